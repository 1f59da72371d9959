"""Streaming package: frame/result types and the incremental decoder."""

from .streaming import DecoderState, FrameKind, StreamFrame, StreamResult, StreamState
from .stream_decoder import StreamDecoder, extract_delta

__all__ = [
    "DecoderState",
    "FrameKind",
    "StreamFrame",
    "StreamResult",
    "StreamState",
    "StreamDecoder",
    "extract_delta",
]
