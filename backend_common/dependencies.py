from collections.abc import AsyncGenerator, Callable

from fastapi import Depends, Request
from sentry_sdk import set_tag, set_user
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker


def make_get_db_async(
    get_session_factory: Callable[[], async_sessionmaker[AsyncSession]],
) -> Callable[..., AsyncGenerator[AsyncSession, None]]:
    async def get_db(
        session_factory: async_sessionmaker[AsyncSession] = Depends(get_session_factory),
    ) -> AsyncGenerator[AsyncSession, None]:
        async with session_factory() as session:
            yield session

    return get_db


def make_get_optional_user_id(
    service_name: str,
    header_name: str = "x-user-id",
) -> Callable[[Request], str | None]:
    """Resolve the caller id forwarded by the gateway, or None when absent."""

    def get_optional_user_id(request: Request) -> str | None:
        user_id = (request.headers.get(header_name) or "").strip()
        if not user_id:
            return None
        set_user({"id": user_id})
        set_tag("service", service_name)
        return user_id

    return get_optional_user_id
