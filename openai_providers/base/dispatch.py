"""Request dispatch: build -> transport -> classify, or build -> transport -> decode.

Purpose:
    One dialect-agnostic core used by every endpoint method. The dialect only
    enters as an injected :class:`DialectConfig` value.

Flow:
    - non-streamed: :func:`build_request` -> :meth:`HttpTransport.execute` ->
      :meth:`ResponseClassifier.check` -> the body, unmodified (text when it
      is valid UTF-8, otherwise the original bytes);
    - streamed: :func:`build_request` -> :meth:`HttpTransport.open_stream` ->
      status check -> :class:`StreamDecoder` driving the sinks ->
      :class:`StreamResult`.

Errors & Observability:
    - Every failure is a :class:`NormalizedError` raised once, synchronously;
      nothing is retried.
    - Emits ``request.start``/``request.end``/``request.error`` and
      ``stream.start``/``stream.finalize``/``stream.error`` structured events
      with latency, ``time_to_first_delta_ms`` and ``emitted_count``.
"""

from __future__ import annotations

import logging
import time
import uuid
from typing import Any, Callable, Mapping, Optional, Union

from .dialect import DialectConfig
from .errors import NormalizedError
from .http.request_builder import build_request
from .http.response_classifier import ResponseClassifier
from .http.transport import HttpTransport
from .logging import LogContext, get_logger, normalized_log_event
from .streaming import FrameKind, StreamDecoder, StreamResult
from .timeouts import get_timeout_config


def _body_text(body: bytes) -> Union[str, bytes]:
    """Decode a UTF-8 body; anything else is returned as the original bytes."""
    try:
        return body.decode("utf-8")
    except UnicodeDecodeError:
        return body


class RequestDispatcher:
    """Issue requests for one dialect over one transport.

    Parameters:
        dialect: Immutable dialect configuration.
        transport: Pre-built transport; when omitted one is created from
            ``timeout``, ``max_redirects`` and ``transport_options``.
        timeout: Per-request timeout in seconds (default 300).
        max_redirects: Redirect cap (default 10).
        transport_options: ``httpx.Client`` keyword overrides (caller wins).
        max_buffer_bytes: Stream buffer cap; ``None`` uses the configured
            value, which defaults to no cap.
    """

    def __init__(
        self,
        dialect: DialectConfig,
        *,
        transport: Optional[HttpTransport] = None,
        timeout: Optional[float] = None,
        max_redirects: Optional[int] = None,
        transport_options: Optional[Mapping[str, Any]] = None,
        max_buffer_bytes: Optional[int] = None,
    ) -> None:
        self.dialect = dialect
        self.transport = transport or HttpTransport(
            dialect.name,
            timeout=timeout,
            max_redirects=max_redirects,
            overrides=transport_options,
        )
        self.classifier = ResponseClassifier.for_dialect(dialect)
        self._max_buffer = (
            max_buffer_bytes if max_buffer_bytes is not None else get_timeout_config().stream_max_buffer_bytes
        )
        self._logger = get_logger("openai_providers.dispatch")

    def _context(self, method: str, path: str, model: Optional[str]) -> LogContext:
        return LogContext(
            provider=self.dialect.name,
            model=model,
            method=method.upper(),
            path=path,
            request_id=uuid.uuid4().hex[:12],
        )

    def _log_error(self, event: str, ctx: LogContext, exc: NormalizedError, t0: float) -> None:
        normalized_log_event(
            self._logger,
            event,
            ctx,
            phase="finalize",
            error_code=exc.category.value,
            emitted=False,
            level=logging.WARNING,
            http_status=exc.http_status,
            provider_error_code=exc.error_code,
            error_type=type(exc).__name__,
            latency_ms=(time.perf_counter() - t0) * 1000.0,
        )

    def send(
        self,
        path: str,
        method: str = "GET",
        options: Optional[Mapping[str, Any]] = None,
        *,
        model: Optional[str] = None,
        binary: bool = False,
    ) -> Union[str, bytes]:
        """Execute a non-streamed call and return the response body unmodified.

        The body comes back as text when it is valid UTF-8 and as the original
        bytes otherwise; ``binary=True`` always returns bytes.

        Raises:
            TransportError: connection-level failure.
            HttpStatusError: status outside the dialect's accepted set.
            ConfigurationError: options that cannot be serialized.
        """
        ctx = self._context(method, path, model)
        t0 = time.perf_counter()
        try:
            request = build_request(self.dialect, method, path, options, stream=False)
            normalized_log_event(
                self._logger, "request.start", ctx, phase="start", content_type=request.content_type
            )
            raw = self.transport.execute(request)
            body = self.classifier.check(raw.status, raw.body)
        except NormalizedError as exc:
            self._log_error("request.error", ctx, exc, t0)
            raise
        normalized_log_event(
            self._logger,
            "request.end",
            ctx,
            phase="finalize",
            emitted=True,
            http_status=raw.status,
            latency_ms=(time.perf_counter() - t0) * 1000.0,
        )
        return body if binary else _body_text(body)

    def stream(
        self,
        path: str,
        options: Optional[Mapping[str, Any]] = None,
        *,
        method: str = "POST",
        on_delta: Optional[Callable[[str], Any]] = None,
        on_complete: Optional[Callable[[str], Any]] = None,
        should_abort: Optional[Callable[[], bool]] = None,
        model: Optional[str] = None,
    ) -> StreamResult:
        """Execute a streamed call, driving ``on_delta`` per content delta.

        ``options["stream"]`` is forced to ``True``.

        Raises:
            TransportError, HttpStatusError, StreamProtocolError,
            StreamDecodeError, StreamOverflowError
        """
        opts = {**dict(options or {}), "stream": True}
        ctx = self._context(method, path, model)
        decoder = StreamDecoder(
            on_delta=on_delta,
            on_complete=on_complete,
            should_abort=should_abort,
            transient_markers=self.dialect.transient_markers,
            max_buffer_bytes=self._max_buffer,
            provider=self.dialect.name,
        )
        t0 = time.perf_counter()
        first_delta_ms: Optional[float] = None
        try:
            request = build_request(self.dialect, method, path, opts, stream=True)
            normalized_log_event(self._logger, "stream.start", ctx, phase="start")
            with self.transport.open_stream(request) as body:
                if not self.classifier.is_accepted(body.status):
                    self.classifier.check(body.status, body.read())
                for frame in decoder.decode(body.iter_chunks()):
                    if frame.kind is FrameKind.DATA and first_delta_ms is None:
                        first_delta_ms = (time.perf_counter() - t0) * 1000.0
                peer_closed = body.peer_closed
        except NormalizedError as exc:
            self._log_error("stream.error", ctx, exc, t0)
            raise
        result = decoder.result()
        normalized_log_event(
            self._logger,
            "stream.finalize",
            ctx,
            phase="finalize",
            emitted=result.deltas > 0,
            emitted_count=result.deltas,
            time_to_first_delta_ms=first_delta_ms,
            total_duration_ms=(time.perf_counter() - t0) * 1000.0,
            aborted=result.aborted,
            peer_closed=peer_closed,
        )
        return result

    def close(self) -> None:
        self.transport.close()


__all__ = ["RequestDispatcher"]
