# backend/backoffice/core/errors.py
from __future__ import annotations

from typing import Any


class BackofficeError(Exception):
    """
    Base for every typed failure the back office surfaces to its callers.

    Each error carries a stable machine code plus a human message; extra
    keyword context ends up in the API error body next to them.
    """

    code = "BACKOFFICE_ERROR"

    def __init__(self, message: str, **extra: Any) -> None:
        super().__init__(message)
        self.message = message
        self.extra = extra

    def to_detail(self) -> dict[str, Any]:
        return {"error": self.code, "message": self.message, **self.extra}


class ValidationError(BackofficeError):
    """Missing or invalid required field. Caller must correct and resubmit."""

    code = "VALIDATION_ERROR"

    def __init__(self, field: str, message: str) -> None:
        super().__init__(message, field=field)
        self.field = field


class InvalidTransition(BackofficeError):
    """A state-machine action was attempted from a state that does not allow it."""

    code = "INVALID_TRANSITION"

    def __init__(self, action: str, current_status: str, message: str | None = None) -> None:
        super().__init__(
            message or f"Cannot {action} a record whose status is {current_status!r}.",
            action=action,
            current_status=current_status,
        )
        self.action = action
        self.current_status = current_status


class ConcurrentModification(InvalidTransition):
    """The record changed between read and write (version mismatch)."""

    code = "CONCURRENT_MODIFICATION"

    def __init__(self, action: str, current_status: str, expected_version: int) -> None:
        super().__init__(
            action,
            current_status,
            f"Record was modified concurrently; {action} was not applied.",
        )
        self.extra["expected_version"] = expected_version
        self.expected_version = expected_version


class NotFound(BackofficeError):
    code = "NOT_FOUND"


class StoreError(BackofficeError):
    """Record or receipt store failure. Never retried here."""

    code = "STORE_ERROR"
