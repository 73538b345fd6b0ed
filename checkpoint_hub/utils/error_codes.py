from __future__ import annotations

from enum import Enum


class ErrorCode(str, Enum):
    """Error codes carried in the `{"error": {...}}` response envelope."""

    E001 = "E001"  # Lookup: Checkpoint not found
    E002 = "E002"  # Validation: Invalid input
    E003 = "E003"  # Auth: Missing or invalid credentials
    E004 = "E004"  # Storage: Backend failure
    E005 = "E005"  # Internal: Internal error


ERROR_MESSAGES: dict[ErrorCode, str] = {
    ErrorCode.E001: "Checkpoint not found",
    ErrorCode.E002: "Validation error",
    ErrorCode.E003: "Unauthorized",
    ErrorCode.E004: "Storage backend failure",
    ErrorCode.E005: "Internal server error",
}
