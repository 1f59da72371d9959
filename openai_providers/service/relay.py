"""Event-stream relay: forward streamed deltas to a writable text stream.

Purpose
-------
Keep output side effects out of the request/stream core. A relay instance is
passed as the ``on_delta`` sink; it writes each forwarded value to its output
as soon as it arrives and flushes, so a hosting web layer (or a terminal) sees
the text incrementally.

Behavior
--------
- ``transform`` (optional) maps each delta to the value written. A ``None``
  result writes nothing and is reported as ``""``, which is also what the
  decoder records as forwarded.
- :attr:`EventStreamRelay.headers` carries the response headers a web layer
  should send before the first write.
- :meth:`EventStreamRelay.close` writes the trailing blank line once.
"""

from __future__ import annotations

import sys
from typing import Any, Callable, Dict, Optional, TextIO

SSE_RESPONSE_HEADERS: Dict[str, str] = {
    "Content-Type": "text/event-stream",
    "X-Accel-Buffering": "no",
    "Cache-Control": "no-cache",
}


class EventStreamRelay:
    """Callable per-delta sink writing to ``output`` (stdout by default)."""

    def __init__(
        self,
        output: Optional[TextIO] = None,
        transform: Optional[Callable[[str], Any]] = None,
    ) -> None:
        self._output = output if output is not None else sys.stdout
        self._transform = transform
        self.written = 0
        self.closed = False

    @property
    def headers(self) -> Dict[str, str]:
        return dict(SSE_RESPONSE_HEADERS)

    def __call__(self, delta: str) -> Any:
        value = self._transform(delta) if self._transform is not None else delta
        if value is None:
            return ""
        self._output.write(str(value))
        self._output.flush()
        self.written += 1
        return value

    def close(self) -> None:
        if self.closed:
            return
        self._output.write("\n\n")
        self._output.flush()
        self.closed = True

    def __enter__(self) -> "EventStreamRelay":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()


__all__ = ["EventStreamRelay", "SSE_RESPONSE_HEADERS"]
