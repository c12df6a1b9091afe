from dataclasses import dataclass

from backend_common.dependencies import make_get_optional_user_id
from fastapi import Depends

get_optional_user_id = make_get_optional_user_id("diary-service")


@dataclass(frozen=True)
class AuthContext:
    """Identity of the current request, resolved once at the HTTP boundary.

    Data and mutation functions take the user id from here explicitly; nothing
    below the routers looks identity up on its own.
    """

    user_id: str | None = None

    @property
    def is_authenticated(self) -> bool:
        return bool(self.user_id)


ANONYMOUS = AuthContext()


def get_auth_context(user_id: str | None = Depends(get_optional_user_id)) -> AuthContext:
    return AuthContext(user_id=user_id)
