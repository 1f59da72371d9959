"""Incremental decoder for blank-line delimited ``data:`` streams.

Purpose
-------
Turn the byte chunks of a streamed chat/completion response into discrete
frames, drive the caller's per-delta sink in arrival order and accumulate the
full response text.

State machine
-------------
``ACCUMULATING`` (initial) -> ``EMITTING`` (while one complete frame is
handled) -> back to ``ACCUMULATING``, or to a terminal state:

- ``DONE`` on the end marker, a consumer abort, or end of input;
- ``FAILED`` on a transient-marker frame, a non-data frame, a data frame with
  an undecodable or empty JSON payload, or buffer overflow.

Frame handling precedence
-------------------------
1. consumer aborted, or frame == ``data: [DONE]`` -> DONE (completion sink
   receives the raw frame; remaining input is ignored)
2. trimmed lower-cased frame in the transient-marker set, or frame without the
   ``data: `` prefix -> :class:`StreamProtocolError` (status 500)
3. payload not JSON, or empty -> :class:`StreamDecodeError`
4. otherwise the delta at ``choices[0].delta.content`` (default ``""``) is
   appended and passed to the per-delta sink

Chunk boundaries never influence the result: the buffer is rescanned from its
start after every chunk, so a delimiter split across chunks is found once its
last byte arrives. Text accumulated before a failure stays available on the
decoder and on the raised error (``partial_text``).

Limitation: without ``max_buffer_bytes`` a peer that never sends a delimiter
nor closes the connection makes the buffer grow without bound.
"""

from __future__ import annotations

import json
from typing import Any, Callable, FrozenSet, Iterable, Iterator, List, Optional

from ..constants import (
    DEFAULT_TRANSIENT_MARKERS,
    STREAM_DATA_PREFIX,
    STREAM_END_MARKER,
    STREAM_FRAME_DELIMITERS,
    STREAM_PROTOCOL_ERROR_STATUS,
)
from ..errors import NormalizedError, StreamDecodeError, StreamOverflowError, StreamProtocolError
from .streaming import DecoderState, FrameKind, StreamFrame, StreamResult, StreamState

DeltaSink = Callable[[str], Any]
CompleteSink = Callable[[str], Any]


def extract_delta(payload: Any) -> str:
    """Return ``payload["choices"][0]["delta"]["content"]`` or ``""``."""
    try:
        content = payload["choices"][0]["delta"]["content"]
    except (KeyError, IndexError, TypeError):
        return ""
    if content is None:
        return ""
    return content if isinstance(content, str) else str(content)


class StreamDecoder:
    """Single-use decoder for one streamed response, fed push-style or pulled.

    Parameters:
        on_delta: Per-delta sink. Its non-``None`` return value is what gets
            forwarded (``StreamFrame.forwarded``) instead of the raw delta.
        on_complete: Completion sink called once with the raw terminal frame.
        should_abort: Polled before each frame; True ends the stream (DONE).
        transient_markers: Lower-cased frames treated as transient failures.
        max_buffer_bytes: Optional cap on undelimited buffered bytes.
        provider: Dialect name recorded on raised errors.

    The decoder is not re-entrant: feed chunks from one consumer, in order.
    """

    def __init__(
        self,
        *,
        on_delta: Optional[DeltaSink] = None,
        on_complete: Optional[CompleteSink] = None,
        should_abort: Optional[Callable[[], bool]] = None,
        transient_markers: Iterable[str] = DEFAULT_TRANSIENT_MARKERS,
        max_buffer_bytes: Optional[int] = None,
        provider: str = "-",
    ) -> None:
        self._on_delta = on_delta
        self._on_complete = on_complete
        self._should_abort = should_abort
        self._markers: FrozenSet[str] = frozenset(m.strip().lower() for m in transient_markers)
        self._max_buffer = max_buffer_bytes
        self._provider = provider
        self._s = StreamState()
        self._aborted = False
        self.error: Optional[NormalizedError] = None
        self.last_frame: Optional[StreamFrame] = None

    # ------------------------------------------------------------------ state

    @property
    def state(self) -> DecoderState:
        return self._s.state

    @property
    def terminal(self) -> bool:
        return self._s.state.terminal

    @property
    def text(self) -> str:
        """Text accumulated so far (also after a failure)."""
        return self._s.text

    def result(self) -> StreamResult:
        """Return the final :class:`StreamResult` of a ``DONE`` stream."""
        if self._s.state is not DecoderState.DONE:
            raise RuntimeError(f"stream not finished (state={self._s.state.value})")
        return StreamResult(
            content=self._s.text,
            raw=self._s.terminal_frame or "",
            first_frame=self._s.first_frame,
            deltas=self._s.deltas,
            aborted=self._aborted,
        )

    # ---------------------------------------------------------------- driving

    def feed(self, chunk: bytes) -> List[StreamFrame]:
        """Buffer ``chunk`` and handle every frame it completes, right away.

        Sinks run before this returns, so ``feed`` works as an ``on_bytes``
        transport callback whose return value is discarded. Returns the frames
        handled for this chunk; chunks fed after a terminal state are ignored.

        Raises:
            StreamProtocolError, StreamDecodeError, StreamOverflowError
        """
        frames: List[StreamFrame] = []
        if self.terminal:
            return frames
        self._s.buffer += chunk
        while not self.terminal:
            raw = self._next_raw_frame()
            if raw is None:
                self._check_overflow()
                break
            frames.append(self._handle(raw))
        return frames

    def finish(self) -> Optional[StreamFrame]:
        """Signal end of input (peer closed); returns the END frame if emitted."""
        if self.terminal:
            return None
        raw = self._s.buffer.decode("utf-8", errors="replace").strip()
        self._s.buffer.clear()
        return self._end(raw)

    def decode(self, chunks: Iterable[bytes]) -> Iterator[StreamFrame]:
        """Lazily decode an iterable of chunks, ending with an END frame.

        Forward-only and non-restartable; stops pulling chunks once terminal.
        """
        for chunk in chunks:
            yield from self.feed(chunk)
            if self.terminal:
                return
        frame = self.finish()
        if frame is not None:
            yield frame

    # -------------------------------------------------------------- internals

    def _next_raw_frame(self) -> Optional[str]:
        buf = self._s.buffer
        best: Optional[tuple[int, int]] = None
        for delim in STREAM_FRAME_DELIMITERS:
            idx = buf.find(delim)
            if idx != -1 and (best is None or idx < best[0]):
                best = (idx, len(delim))
        if best is None:
            return None
        idx, size = best
        raw = bytes(buf[:idx])
        del buf[: idx + size]
        return raw.decode("utf-8", errors="replace").rstrip("\r")

    def _handle(self, raw: str) -> StreamFrame:
        self._s.state = DecoderState.EMITTING
        if self._s.first_frame is None:
            self._s.first_frame = raw

        if self._should_abort is not None and self._should_abort():
            self._aborted = True
            return self._end(raw)
        if raw.strip() == STREAM_END_MARKER:
            return self._end(raw)

        if raw.strip().lower() in self._markers:
            raise self._protocol_error(raw, FrameKind.ERROR, "transient_error")
        if not raw.startswith(STREAM_DATA_PREFIX):
            raise self._protocol_error(raw, FrameKind.MALFORMED, "unexpected_frame")

        try:
            payload = json.loads(raw[len(STREAM_DATA_PREFIX):])
        except ValueError as exc:
            raise self._decode_error(raw, f"JSON decode error: {exc}: {raw}") from exc
        if not payload:
            raise self._decode_error(raw, f"JSON decode error: empty payload: {raw}")

        delta = extract_delta(payload)
        self._s.text_parts.append(delta)
        self._s.deltas += 1
        forwarded = self._on_delta(delta) if self._on_delta is not None else None
        frame = StreamFrame(raw=raw, kind=FrameKind.DATA, delta=delta, forwarded=delta if forwarded is None else forwarded)
        self.last_frame = frame
        self._s.state = DecoderState.ACCUMULATING
        return frame

    def _end(self, raw: str) -> StreamFrame:
        self._s.state = DecoderState.DONE
        self._s.terminal_frame = raw
        frame = StreamFrame(raw=raw, kind=FrameKind.END)
        self.last_frame = frame
        if self._on_complete is not None:
            self._on_complete(raw)
        return frame

    def _failed(self, frame: StreamFrame, error: NormalizedError) -> NormalizedError:
        """Enter ``FAILED`` and return ``error`` for the caller to raise."""
        self._s.state = DecoderState.FAILED
        self._s.terminal_frame = frame.raw
        self.last_frame = frame
        self.error = error
        return error

    def _protocol_error(self, raw: str, kind: FrameKind, code: str) -> NormalizedError:
        message = f"Stream error: {raw}"
        return self._failed(
            StreamFrame(raw=raw, kind=kind, message=message, code=code),
            StreamProtocolError(
                message=message,
                http_status=STREAM_PROTOCOL_ERROR_STATUS,
                error_code=code,
                provider=self._provider,
                raw=raw,
                partial_text=self._s.text,
            ),
        )

    def _decode_error(self, raw: str, message: str) -> NormalizedError:
        return self._failed(
            StreamFrame(raw=raw, kind=FrameKind.MALFORMED, message=message, code="json_decode_error"),
            StreamDecodeError(
                message=message,
                http_status=STREAM_PROTOCOL_ERROR_STATUS,
                error_code="json_decode_error",
                provider=self._provider,
                raw=raw,
                partial_text=self._s.text,
            ),
        )

    def _check_overflow(self) -> None:
        if self._max_buffer is None or len(self._s.buffer) <= self._max_buffer:
            return
        raw = bytes(self._s.buffer[:200]).decode("utf-8", errors="replace")
        message = f"Stream buffer exceeded {self._max_buffer} bytes without a frame delimiter"
        raise self._failed(
            StreamFrame(raw=raw, kind=FrameKind.MALFORMED, message=message, code="stream_overflow"),
            StreamOverflowError(
                message=message,
                http_status=STREAM_PROTOCOL_ERROR_STATUS,
                error_code="stream_overflow",
                provider=self._provider,
                raw=raw,
                partial_text=self._s.text,
            ),
        )


__all__ = ["StreamDecoder", "extract_delta"]
