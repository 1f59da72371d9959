"""
Concrete error kinds raised by the request/stream core.

Kinds are distinguished by type so callers can ``except`` precisely; all of
them share the :class:`NormalizedError` fields.
"""
from __future__ import annotations

from dataclasses import dataclass

from .error_code import ErrorCode
from .normalized_error import NormalizedError


@dataclass
class TransportError(NormalizedError):
    """Connection-level failure (DNS, TLS, timeout, abrupt close)."""


@dataclass
class HttpStatusError(NormalizedError):
    """Response status outside the dialect's accepted set."""


@dataclass
class StreamProtocolError(NormalizedError):
    """Unexpected non-data frame (or transient marker) during streaming.

    ``partial_text`` holds the text accumulated before the failing frame.
    """

    category: ErrorCode = ErrorCode.PROTOCOL
    partial_text: str = ""


@dataclass
class StreamDecodeError(NormalizedError):
    """Malformed or empty JSON payload inside a data frame."""

    category: ErrorCode = ErrorCode.DECODE
    partial_text: str = ""


@dataclass
class StreamOverflowError(NormalizedError):
    """Undelimited stream data grew past the configured buffer cap."""

    category: ErrorCode = ErrorCode.PROTOCOL
    partial_text: str = ""


@dataclass
class ConfigurationError(NormalizedError):
    """Invalid call or client configuration, detected before any I/O."""

    category: ErrorCode = ErrorCode.CONFIGURATION


__all__ = [
    "TransportError",
    "HttpStatusError",
    "StreamProtocolError",
    "StreamDecodeError",
    "StreamOverflowError",
    "ConfigurationError",
]
