"""Unified timeout & transport limit settings.

This module centralizes the numeric limits applied by the transport and the
stream decoder so no call site hard-codes them.

Key Components
--------------
TransportConfig
    Frozen dataclass with the whole-call HTTP timeout, the redirect cap and
    the optional stream buffer cap.

get_timeout_config()
    Returns a process-cached configuration, parsing environment overrides on
    first use and again only when the relevant variables change. Supported
    environment variables (all optional):
        OPENAI_PROVIDERS_HTTP_TIMEOUT_SECONDS
        OPENAI_PROVIDERS_MAX_REDIRECTS
        OPENAI_PROVIDERS_STREAM_MAX_BUFFER_BYTES

Failure Modes
-------------
Unparseable or non-positive values fall back to the defaults silently.
"""
from __future__ import annotations

import os
from dataclasses import dataclass

from ..config.defaults import DEFAULT_HTTP_TIMEOUT_SECONDS, DEFAULT_MAX_REDIRECTS

_ENV_NAMES = (
    "OPENAI_PROVIDERS_HTTP_TIMEOUT_SECONDS",
    "OPENAI_PROVIDERS_MAX_REDIRECTS",
    "OPENAI_PROVIDERS_STREAM_MAX_BUFFER_BYTES",
)


@dataclass(frozen=True)
class TransportConfig:
    """Container for normalized transport limits.

    Attributes:
        http_timeout_seconds: Timeout applied to each request (connect, read,
            write and pool phases).
        max_redirects: Maximum number of redirects followed per request.
        stream_max_buffer_bytes: Cap on undelimited bytes buffered by the
            stream decoder. ``None`` disables the cap.
    """

    http_timeout_seconds: float = DEFAULT_HTTP_TIMEOUT_SECONDS
    max_redirects: int = DEFAULT_MAX_REDIRECTS
    stream_max_buffer_bytes: int | None = None


_CACHED: TransportConfig | None = None
_ENV_GUARD: str | None = None


def _parse_env_float(name: str, default: float | None) -> float | None:
    """Parse an environment variable as a positive float, else ``default``."""
    raw = os.getenv(name)
    if not raw:
        return default
    try:
        val = float(raw)
    except ValueError:
        return default
    return val if val > 0 else default


def get_timeout_config() -> TransportConfig:
    """Return the process-cached :class:`TransportConfig`."""
    global _CACHED, _ENV_GUARD  # noqa: PLW0603 - intentional, documented module cache
    guard = "/".join(os.getenv(n, "") for n in _ENV_NAMES)
    if _CACHED is not None and _ENV_GUARD == guard:
        return _CACHED

    timeout = _parse_env_float(_ENV_NAMES[0], DEFAULT_HTTP_TIMEOUT_SECONDS)
    redirects = _parse_env_float(_ENV_NAMES[1], float(DEFAULT_MAX_REDIRECTS))
    buffer_cap = _parse_env_float(_ENV_NAMES[2], None)

    _CACHED = TransportConfig(
        http_timeout_seconds=float(timeout),
        max_redirects=int(redirects),
        stream_max_buffer_bytes=int(buffer_cap) if buffer_cap is not None else None,
    )
    _ENV_GUARD = guard
    return _CACHED


__all__ = ["TransportConfig", "get_timeout_config"]
