from enum import Enum
from typing import Any

from pydantic import BaseModel, Field


class ActionStatus(str, Enum):
    ok = "ok"
    unauthenticated = "unauthenticated"
    not_found = "not_found"
    invalid = "invalid"
    conflict = "conflict"
    error = "error"


class ActionResult(BaseModel):
    """Outcome of a write action. Failures are values, never exceptions."""

    status: ActionStatus
    data: Any = None
    message: str | None = None
    field_errors: dict[str, list[str]] = Field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return self.status == ActionStatus.ok

    @classmethod
    def success(cls, data: Any = None) -> "ActionResult":
        return cls(status=ActionStatus.ok, data=data)

    @classmethod
    def failure(
        cls,
        status: ActionStatus,
        message: str,
        field_errors: dict[str, list[str]] | None = None,
    ) -> "ActionResult":
        return cls(status=status, message=message, field_errors=field_errors or {})
