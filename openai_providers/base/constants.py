"""Base shared constants for the request/stream core.

Central location to avoid scattering magic strings across the builder,
classifier and decoder.

Security
--------
This module contains only generic sentinel strings. There are no credentials
embedded.

# pragma: allowlist secret
"""
from __future__ import annotations

# Request body content types (slot 0 of every header list)
CONTENT_TYPE_HEADER = "Content-Type"
CONTENT_TYPE_JSON = "application/json"
CONTENT_TYPE_MULTIPART = "multipart/form-data"

# Option keys whose presence switches the body to multipart form data
MULTIPART_KEYS = ("file", "image")

# Streamed response framing
STREAM_DATA_PREFIX = "data: "
STREAM_END_MARKER = "data: [DONE]"
STREAM_FRAME_DELIMITERS = (b"\r\n\r\n", b"\n\n")
# Lower-cased frames that signal a transient upstream condition mid-stream
DEFAULT_TRANSIENT_MARKERS = frozenset({"data: [continue]", "rate limit.."})
# Status attached to protocol failures detected inside a 200 stream
STREAM_PROTOCOL_ERROR_STATUS = 500

# Missing credential sentinel
MISSING_API_KEY_ERROR = "missing_api_key"  # pragma: allowlist secret - generic placeholder string

__all__ = [
    "CONTENT_TYPE_HEADER",
    "CONTENT_TYPE_JSON",
    "CONTENT_TYPE_MULTIPART",
    "MULTIPART_KEYS",
    "STREAM_DATA_PREFIX",
    "STREAM_END_MARKER",
    "STREAM_FRAME_DELIMITERS",
    "DEFAULT_TRANSIENT_MARKERS",
    "STREAM_PROTOCOL_ERROR_STATUS",
    "MISSING_API_KEY_ERROR",
]
