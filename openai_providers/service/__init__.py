"""Outer surfaces built on the clients: the event-stream relay and the CLI."""

from .relay import EventStreamRelay, SSE_RESPONSE_HEADERS

__all__ = ["EventStreamRelay", "SSE_RESPONSE_HEADERS"]
