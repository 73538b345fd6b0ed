from __future__ import annotations

from typing import Any, Optional

from checkpoint_hub.utils.error_codes import ErrorCode, ERROR_MESSAGES


def _normalize_error_code(value: ErrorCode | str | None) -> ErrorCode:
    if value is None:
        return ErrorCode.E005
    if isinstance(value, ErrorCode):
        return value
    try:
        return ErrorCode(str(value))
    except ValueError:
        return ErrorCode.E005


class CheckpointHubException(Exception):
    """Base exception for the checkpoint service.

    API response format is handled by the global exception handler.
    """

    def __init__(
        self,
        message: str | None = None,
        *,
        code: ErrorCode | str = ErrorCode.E005,
        details: Optional[dict[str, Any]] = None,
        status_code: int = 500,
    ):
        normalized = _normalize_error_code(code)
        if message is None:
            message = ERROR_MESSAGES.get(normalized, ERROR_MESSAGES[ErrorCode.E005])

        self.message = message
        self.code = normalized.value
        self.details = details or {}
        self.status_code = status_code
        super().__init__(self.message)

    def to_dict(self) -> dict:
        return {"error": {"code": self.code, "message": self.message, "details": self.details}}


class BadRequestException(CheckpointHubException):
    """Malformed or self-contradictory input. Raised before the store is touched."""

    def __init__(self, message: str | None = None, *, details: Optional[dict[str, Any]] = None):
        super().__init__(message, code=ErrorCode.E002, details=details, status_code=400)


class UnauthorizedException(CheckpointHubException):
    def __init__(self, message: str | None = None, *, details: Optional[dict[str, Any]] = None):
        super().__init__(message or "Unauthorized", code=ErrorCode.E003, details=details, status_code=401)


class NotFoundException(CheckpointHubException):
    """No row matched the (possibly ownership-filtered) predicate.

    The message must not reveal whether the row exists for someone else.
    """

    def __init__(self, message: str | None = None, *, details: Optional[dict[str, Any]] = None):
        super().__init__(message or "Checkpoint not found", code=ErrorCode.E001, details=details, status_code=404)


class StoreException(CheckpointHubException):
    """Backend failure. The underlying cause is logged, never sent to the caller."""

    def __init__(self, message: str | None = None, *, details: Optional[dict[str, Any]] = None):
        super().__init__(message, code=ErrorCode.E004, details=details, status_code=500)
