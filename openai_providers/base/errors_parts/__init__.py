"""Errors parts package public surface.

Re-exports individual error taxonomy components for optional direct imports.
Prefer importing from `openai_providers.base.errors` for the stable surface.
"""

from .error_code import ErrorCode
from .normalized_error import NormalizedError
from .error_kinds import (
    ConfigurationError,
    HttpStatusError,
    StreamDecodeError,
    StreamOverflowError,
    StreamProtocolError,
    TransportError,
)
from .classification import category_for_status, classify_exception

__all__ = [
    "ErrorCode",
    "NormalizedError",
    "TransportError",
    "HttpStatusError",
    "StreamProtocolError",
    "StreamDecodeError",
    "StreamOverflowError",
    "ConfigurationError",
    "category_for_status",
    "classify_exception",
]
