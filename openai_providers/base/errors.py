"""Unified error taxonomy public surface.

This module re-exports the implementations under
``openai_providers.base.errors_parts`` to maintain a stable import path.
"""

from .errors_parts.error_code import ErrorCode
from .errors_parts.normalized_error import NormalizedError
from .errors_parts.error_kinds import (
    ConfigurationError,
    HttpStatusError,
    StreamDecodeError,
    StreamOverflowError,
    StreamProtocolError,
    TransportError,
)
from .errors_parts.classification import category_for_status, classify_exception

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
