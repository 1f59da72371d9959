"""Shared HTTP client pool for dialect clients.

Purpose:
    Provide a centralized, thread-safe pool of reusable ``httpx.Client``
    instances to avoid per-call allocations and reduce connection overhead.
    Timeout and redirect defaults derive from :func:`get_timeout_config`.

External dependencies:
    - ``httpx`` for the underlying synchronous HTTP client.

Client defaults:
    - whole-call timeout (300s unless configured), redirects followed up to
      the configured cap (10), HTTP/1.1 only.
    - Caller supplied ``overrides`` (any ``httpx.Client`` keyword, e.g.
      ``transport``, ``verify``, ``proxy``) are merged on top of the defaults
      and win on collision.

Lifecycle & cleanup:
    - Clients without overrides are cached by ``(purpose, timeout,
      max_redirects)``. Clients with overrides are never shared but are still
      tracked so :func:`close_all_clients` releases them.
    - All clients are closed at interpreter exit via ``atexit``.
"""

from __future__ import annotations

import atexit
import threading
from typing import Any, Dict, List, Mapping, Optional, Tuple

import httpx

from ..timeouts import get_timeout_config

_CLIENTS: Dict[Tuple[str, float, int], httpx.Client] = {}
_UNPOOLED: List[httpx.Client] = []
_LOCK = threading.RLock()


def client_defaults(timeout: Optional[float] = None, max_redirects: Optional[int] = None) -> Dict[str, Any]:
    """Return the default ``httpx.Client`` keyword arguments."""
    cfg = get_timeout_config()
    return {
        "timeout": cfg.http_timeout_seconds if timeout is None else timeout,
        "follow_redirects": True,
        "max_redirects": cfg.max_redirects if max_redirects is None else max_redirects,
        "http1": True,
        "http2": False,
    }


def get_httpx_client(
    purpose: str,
    *,
    timeout: Optional[float] = None,
    max_redirects: Optional[int] = None,
    overrides: Optional[Mapping[str, Any]] = None,
) -> httpx.Client:
    """Return an ``httpx.Client`` for ``purpose`` configured with the defaults.

    Parameters:
        purpose: A short string discriminating separate pools (e.g.
            ``"openai"``, ``"azure"``). Keep stable to maximize reuse.
        timeout: Per-request timeout in seconds; ``None`` uses the configured
            default.
        max_redirects: Redirect cap; ``None`` uses the configured default.
        overrides: Low-level ``httpx.Client`` keyword arguments merged on top
            of the defaults. Supplying any override yields a dedicated client.

    Thread-safety:
        Safe for concurrent use; creation is guarded by a re-entrant lock.
    """
    kwargs = client_defaults(timeout, max_redirects)
    if overrides:
        kwargs |= dict(overrides)
        client = httpx.Client(**kwargs)
        with _LOCK:
            _UNPOOLED.append(client)
        return client

    key = (purpose, float(kwargs["timeout"]), int(kwargs["max_redirects"]))
    client = _CLIENTS.get(key)
    if client is not None and not client.is_closed:
        return client
    with _LOCK:
        client = _CLIENTS.get(key)
        if client is None or client.is_closed:
            client = httpx.Client(**kwargs)
            _CLIENTS[key] = client
        return client


def close_all_clients() -> None:
    """Close and clear all HTTP clients created by this module."""
    with _LOCK:
        for c in [*_CLIENTS.values(), *_UNPOOLED]:
            try:
                c.close()
            except Exception:  # nosec B110 - best-effort shutdown; close errors are non-actionable
                pass
        _CLIENTS.clear()
        _UNPOOLED.clear()


def _cleanup_at_exit() -> None:
    """atexit hook to ensure clients are closed on interpreter exit."""
    close_all_clients()


atexit.register(_cleanup_at_exit)

__all__ = ["client_defaults", "get_httpx_client", "close_all_clients"]
