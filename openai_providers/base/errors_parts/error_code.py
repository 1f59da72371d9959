"""
Normalized error categories (taxonomy).

Defines the `ErrorCode` enumeration attached to every normalized error. Values
are lowercase snake_case and are considered a stable public contract for
logging and analytics.
"""
from __future__ import annotations

from enum import Enum


class ErrorCode(str, Enum):
    """Enumerated normalized error codes representing failure categories."""

    AUTH = "auth"
    RATE_LIMIT = "rate_limit"
    TIMEOUT = "timeout"
    TRANSIENT = "transient"
    VALIDATION = "validation"
    NOT_FOUND = "not_found"
    CONFLICT = "conflict"
    SERVER_ERROR = "server_error"
    UNAVAILABLE = "unavailable"
    PROTOCOL = "protocol"
    DECODE = "decode"
    CONFIGURATION = "configuration"
    UNKNOWN = "unknown"


__all__ = ["ErrorCode"]
