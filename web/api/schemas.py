"""Caller-facing response envelope."""

from typing import Any

from pydantic import BaseModel


class ApiResult(BaseModel):
    """Envelope returned by every view."""

    success: bool
    data: Any = None
    error: str | None = None
    status: int = 200

    @classmethod
    def ok(cls, data: Any) -> "ApiResult":
        return cls(success=True, data=data)

    @classmethod
    def fail(cls, error: str, status: int) -> "ApiResult":
        return cls(success=False, error=error, status=status)
