"""Shared helpers for tests that fake HTTP with ``httpx.MockTransport``."""

from __future__ import annotations

import json
from typing import Any, Callable, Dict, Iterable, Iterator, List

import httpx


class Recorder:
    """Mock transport handler that records requests and replays a response factory."""

    def __init__(self, respond: Callable[[httpx.Request], httpx.Response]) -> None:
        self._respond = respond
        self.requests: List[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        request.read()
        self.requests.append(request)
        return self._respond(request)

    @property
    def last(self) -> httpx.Request:
        return self.requests[-1]

    def options(self) -> Dict[str, Any]:
        """``transport_options`` routing a client through this recorder."""
        return {"transport": httpx.MockTransport(self)}


def json_response(status: int, payload: Any) -> Callable[[httpx.Request], httpx.Response]:
    return lambda _req: httpx.Response(status, json=payload)


def text_response(status: int, body: str) -> Callable[[httpx.Request], httpx.Response]:
    return lambda _req: httpx.Response(status, text=body)


def chunked_response(status: int, chunks: Iterable[bytes]) -> Callable[[httpx.Request], httpx.Response]:
    """Response whose body arrives as the given byte chunks."""
    chunk_list = list(chunks)

    def _respond(_req: httpx.Request) -> httpx.Response:
        return httpx.Response(
            status, headers={"Content-Type": "text/event-stream"}, content=iter(chunk_list)
        )

    return _respond


def delta_frame(content: Any) -> bytes:
    """One ``data:`` frame carrying ``content`` as the chat delta."""
    payload = {"choices": [{"delta": {"content": content}}]}
    return b"data: " + json.dumps(payload).encode("utf-8") + b"\n\n"


def sse_body(*deltas: str, done: bool = True) -> bytes:
    body = b"".join(delta_frame(d) for d in deltas)
    return body + (b"data: [DONE]\n\n" if done else b"")


def split_every(data: bytes, size: int) -> Iterator[bytes]:
    for i in range(0, len(data), size):
        yield data[i : i + size]
