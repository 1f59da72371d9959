"""Streaming primitives for the decoder.

Keeps the frame/state/result value types separate from the decoder logic so
callers can type against them without importing the state machine.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, List, Optional


class FrameKind(str, Enum):
    """Classification of one blank-line delimited frame."""

    DATA = "data"
    END = "end"
    ERROR = "error"
    MALFORMED = "malformed"


class DecoderState(str, Enum):
    """Lifecycle of a :class:`StreamDecoder`."""

    ACCUMULATING = "accumulating"
    EMITTING = "emitting"
    DONE = "done"
    FAILED = "failed"

    @property
    def terminal(self) -> bool:
        return self in (DecoderState.DONE, DecoderState.FAILED)


@dataclass
class StreamFrame:
    """One decoded protocol unit.

    Fields:
      raw: frame text without its delimiter
      kind: frame classification
      delta: content delta (DATA frames only)
      forwarded: what the per-delta sink returned, or the delta itself
      message: error description (ERROR / MALFORMED frames)
      code: dialect-independent error code (ERROR / MALFORMED frames)
    """

    raw: str
    kind: FrameKind
    delta: Optional[str] = None
    forwarded: Any = None
    message: Optional[str] = None
    code: Optional[str] = None


@dataclass
class StreamState:
    """Mutable state owned by one in-flight streaming call."""

    buffer: bytearray = field(default_factory=bytearray)
    text_parts: List[str] = field(default_factory=list)
    state: DecoderState = DecoderState.ACCUMULATING
    first_frame: Optional[str] = None
    terminal_frame: Optional[str] = None
    deltas: int = 0

    @property
    def text(self) -> str:
        return "".join(self.text_parts)


@dataclass(frozen=True)
class StreamResult:
    """Final outcome of a stream that reached ``DONE``.

    Attributes:
        content: Concatenation of every delta, in arrival order.
        raw: Raw terminal frame (``data: [DONE]`` or the undelimited remainder
            left when the peer closed the connection).
        first_frame: Raw text of the first frame received.
        deltas: Number of DATA frames decoded.
        aborted: True when the stream ended because the consumer aborted.
    """

    content: str
    raw: str = ""
    first_frame: Optional[str] = None
    deltas: int = 0
    aborted: bool = False


__all__ = [
    "FrameKind",
    "DecoderState",
    "StreamFrame",
    "StreamState",
    "StreamResult",
]
