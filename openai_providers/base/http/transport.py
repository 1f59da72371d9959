"""HTTP transport: executes one :class:`PreparedRequest`.

Two body modes are supported:

- whole-buffer: :meth:`HttpTransport.execute` returns a :class:`RawResult`
  with the status and the complete body;
- incremental: :meth:`HttpTransport.open_stream` yields a
  :class:`StreamingBody` whose chunks are pulled as they arrive, and
  :meth:`HttpTransport.stream` drives an ``on_bytes`` callback with them.

Connection-level failures (DNS, TLS, connect/read timeouts, redirect loops)
raise :class:`TransportError` before any status classification happens. A
peer that closes the connection part-way through a streamed body ends the
chunk iteration normally; the stream decoder treats that as end of stream.
"""

from __future__ import annotations

from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Iterator, Mapping, Optional

import httpx

from ..errors import TransportError, classify_exception
from ..logging import get_logger
from .client import get_httpx_client
from .request_builder import PreparedRequest


@dataclass
class RawResult:
    """Complete response of a non-streamed call."""

    status: int
    body: bytes
    headers: Dict[str, str] = field(default_factory=dict)


class StreamingBody:
    """Response whose body is consumed incrementally, in arrival order."""

    def __init__(self, response: httpx.Response, provider: str, logger) -> None:
        self._response = response
        self._provider = provider
        self._logger = logger
        self.peer_closed = False

    @property
    def status(self) -> int:
        return self._response.status_code

    @property
    def headers(self) -> Dict[str, str]:
        return dict(self._response.headers)

    def iter_chunks(self) -> Iterator[bytes]:
        """Yield content-decoded body chunks; an abrupt peer close ends iteration."""
        try:
            for chunk in self._response.iter_bytes():
                if chunk:
                    yield chunk
        except httpx.RemoteProtocolError as exc:
            self.peer_closed = True
            self._logger.warning("stream body ended by peer: %s", exc)
        except httpx.RequestError as exc:
            raise _wrap(exc, self._provider) from exc

    def read(self) -> bytes:
        """Read the remaining body in full (used for error responses)."""
        try:
            return self._response.read()
        except httpx.RequestError as exc:
            raise _wrap(exc, self._provider) from exc


def _wrap(exc: httpx.RequestError, provider: str) -> TransportError:
    return TransportError(
        message=f"Transport error: {exc}" if str(exc) else f"Transport error: {type(exc).__name__}",
        category=classify_exception(exc),
        provider=provider,
        raw=exc,
    )


class HttpTransport:
    """Synchronous transport bound to one pooled or dedicated ``httpx.Client``.

    Parameters:
        provider: Dialect name, used as the pool purpose and in errors.
        timeout: Per-request timeout (seconds); defaults to the configured 300.
        max_redirects: Redirect cap; defaults to the configured 10.
        overrides: ``httpx.Client`` keyword arguments merged over the defaults
            (caller wins), e.g. ``{"transport": httpx.MockTransport(...)}``.
    """

    def __init__(
        self,
        provider: str = "-",
        *,
        timeout: Optional[float] = None,
        max_redirects: Optional[int] = None,
        overrides: Optional[Mapping[str, Any]] = None,
    ) -> None:
        self.provider = provider
        self._timeout = timeout
        self._max_redirects = max_redirects
        self._overrides = dict(overrides or {})
        self._client: Optional[httpx.Client] = None
        self._logger = get_logger("openai_providers.transport")

    @property
    def client(self) -> httpx.Client:
        if self._client is None or self._client.is_closed:
            self._client = get_httpx_client(
                self.provider,
                timeout=self._timeout,
                max_redirects=self._max_redirects,
                overrides=self._overrides or None,
            )
        return self._client

    def execute(self, request: PreparedRequest) -> RawResult:
        """Send ``request`` and return the complete response."""
        try:
            response = self.client.send(request.to_httpx(self.client))
        except httpx.RequestError as exc:
            raise _wrap(exc, self.provider) from exc
        return RawResult(status=response.status_code, body=response.content, headers=dict(response.headers))

    @contextmanager
    def open_stream(self, request: PreparedRequest) -> Iterator[StreamingBody]:
        """Send ``request`` and yield its body for incremental consumption.

        The response is closed when the context exits, including early exits
        after the decoder reached a terminal frame.
        """
        try:
            response = self.client.send(request.to_httpx(self.client), stream=True)
        except httpx.RequestError as exc:
            raise _wrap(exc, self.provider) from exc
        try:
            yield StreamingBody(response, self.provider, self._logger)
        finally:
            response.close()

    def stream(self, request: PreparedRequest, on_bytes: Callable[[bytes], Any]) -> int:
        """Drive ``on_bytes`` with each chunk as it arrives; return the status.

        The callback's return value is ignored.
        """
        with self.open_stream(request) as body:
            for chunk in body.iter_chunks():
                on_bytes(chunk)
            return body.status

    def close(self) -> None:
        """Close a dedicated client; pooled clients are left to the pool."""
        if self._client is not None and self._overrides:
            self._client.close()
        self._client = None


__all__ = ["RawResult", "StreamingBody", "HttpTransport"]
