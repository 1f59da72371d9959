from __future__ import annotations

import json
import logging

import httpx
import pytest

from openai_providers.azure.dialect import azure_dialect
from openai_providers.base.dispatch import RequestDispatcher
from openai_providers.base.errors import (
    ErrorCode,
    HttpStatusError,
    StreamProtocolError,
    TransportError,
)
from openai_providers.base.http.request_builder import build_request
from openai_providers.base.http.transport import HttpTransport
from openai_providers.base.streaming import StreamDecoder
from openai_providers.openai.dialect import openai_dialect
from openai_providers.tests.helpers import (
    Recorder,
    chunked_response,
    delta_frame,
    json_response,
    split_every,
    sse_body,
    text_response,
)


def _dispatcher(recorder: Recorder, dialect=None, **kwargs) -> RequestDispatcher:
    return RequestDispatcher(dialect or openai_dialect("sk-test-key"), transport_options=recorder.options(), **kwargs)


def test_send_returns_raw_body_text():
    raw = '{"object": "list",  "data": []}'
    rec = Recorder(text_response(200, raw))
    body = _dispatcher(rec).send("/models")
    assert body == raw  # nosec B101
    assert rec.last.method == "GET" and rec.last.content == b""  # nosec B101
    assert rec.last.headers["Authorization"] == "Bearer sk-test-key"  # nosec B101


def test_send_maps_error_status():
    rec = Recorder(json_response(401, {"error": {"type": "invalid_api_key", "message": "Incorrect key"}}))
    with pytest.raises(HttpStatusError) as ei:
        _dispatcher(rec).send("/models")
    assert ei.value.http_status == 401 and ei.value.error_code == "invalid_api_key"  # nosec B101
    assert ei.value.category is ErrorCode.AUTH  # nosec B101


def test_azure_send_carries_api_version():
    rec = Recorder(json_response(201, {"id": "deployment-1"}))
    d = _dispatcher(rec, azure_dialect("az-key", "2024-02-01"))
    assert json.loads(d.send("/deployments", "POST", {"model": "gpt-35-turbo"})) == {"id": "deployment-1"}  # nosec B101
    assert rec.last.url.params["api-version"] == "2024-02-01"  # nosec B101
    assert rec.last.headers["api-key"] == "az-key"  # nosec B101


def test_connection_failure_is_transport_error():
    def boom(request):
        raise httpx.ConnectError("connection refused", request=request)

    d = RequestDispatcher(openai_dialect("k"), transport_options={"transport": httpx.MockTransport(boom)})
    with pytest.raises(TransportError) as ei:
        d.send("/models")
    assert ei.value.category is ErrorCode.UNAVAILABLE and ei.value.http_status is None  # nosec B101


def test_timeout_is_transport_error():
    def slow(request):
        raise httpx.ReadTimeout("timed out", request=request)

    d = RequestDispatcher(openai_dialect("k"), transport_options={"transport": httpx.MockTransport(slow)})
    with pytest.raises(TransportError) as ei:
        d.send("/models")
    assert ei.value.category is ErrorCode.TIMEOUT  # nosec B101


def test_stream_drives_sink_in_order():
    rec = Recorder(chunked_response(200, split_every(sse_body("a", "b", "c"), 4)))
    seen = []
    result = _dispatcher(rec).stream("/chat/completions", {"model": "m"}, on_delta=seen.append)
    assert seen == ["a", "b", "c"] and result.content == "abc"  # nosec B101
    assert json.loads(rec.last.content)["stream"] is True  # nosec B101


def test_stream_error_status_is_classified_before_decoding():
    rec = Recorder(json_response(429, {"error": {"code": "rate_limit_exceeded", "message": "slow down"}}))
    seen = []
    with pytest.raises(HttpStatusError) as ei:
        _dispatcher(rec).stream("/chat/completions", {"model": "m"}, on_delta=seen.append)
    assert ei.value.category is ErrorCode.RATE_LIMIT and seen == []  # nosec B101


def test_stream_protocol_error_propagates():
    rec = Recorder(chunked_response(200, [delta_frame("x"), b"data: [continue]\n\n"]))
    with pytest.raises(StreamProtocolError) as ei:
        _dispatcher(rec).stream("/chat/completions", {})
    assert ei.value.partial_text == "x"  # nosec B101


def test_stream_peer_close_counts_as_completion():
    def respond(_req):
        def body():
            yield delta_frame("half")
            raise httpx.RemoteProtocolError("peer closed connection without sending complete message body")

        return httpx.Response(200, content=body())

    result = _dispatcher(Recorder(respond)).stream("/chat/completions", {})
    assert result.content == "half"  # nosec B101


def test_stream_buffer_cap_from_environment(monkeypatch):
    from openai_providers.base.errors import StreamOverflowError

    monkeypatch.setenv("OPENAI_PROVIDERS_STREAM_MAX_BUFFER_BYTES", "32")
    rec = Recorder(chunked_response(200, [b"data: " + b"y" * 100]))
    with pytest.raises(StreamOverflowError):
        _dispatcher(rec).stream("/chat/completions", {})


def test_dispatch_emits_normalized_events(caplog):
    rec = Recorder(text_response(200, "{}"))
    logger = logging.getLogger("openai_providers")
    logger.addHandler(caplog.handler)
    try:
        with caplog.at_level(logging.INFO, logger="openai_providers"):
            _dispatcher(rec).send("/models")
    finally:
        logger.removeHandler(caplog.handler)
    payloads = [json.loads(r.getMessage()) for r in caplog.records if r.name == "openai_providers.dispatch"]
    events = [p["event"] for p in payloads]
    assert events == ["request.start", "request.end"]  # nosec B101
    end = payloads[-1]
    assert end["phase"] == "finalize" and end["http_status"] == 200 and end["provider"] == "openai"  # nosec B101
    assert all("sk-test-key" not in json.dumps(p) for p in payloads)  # nosec B101


def _stream_request():
    return build_request(openai_dialect("sk-test-key"), "POST", "/chat/completions", {"stream": True}, stream=True)


def test_transport_stream_calls_back_per_chunk_in_order():
    chunks = [b"one", b"two", b"three"]
    transport = HttpTransport("openai", overrides=Recorder(chunked_response(200, chunks)).options())
    seen = []
    status = transport.stream(_stream_request(), seen.append)
    assert seen == chunks and status == 200  # nosec B101


def test_transport_stream_returns_error_status_unclassified():
    transport = HttpTransport("openai", overrides=Recorder(chunked_response(503, [b"busy"])).options())
    seen = []
    assert transport.stream(_stream_request(), seen.append) == 503  # nosec B101
    assert seen == [b"busy"]  # nosec B101


def test_transport_stream_feeds_decoder():
    body = split_every(sse_body("a", "b"), 7)
    transport = HttpTransport("openai", overrides=Recorder(chunked_response(200, body)).options())
    seen = []
    decoder = StreamDecoder(on_delta=seen.append)
    assert transport.stream(_stream_request(), decoder.feed) == 200  # nosec B101
    decoder.finish()
    assert seen == ["a", "b"]  # nosec B101
    assert decoder.result().content == "ab" and decoder.result().raw == "data: [DONE]"  # nosec B101


def test_send_keeps_non_utf8_body_bytes():
    raw = b"\x89PNG\r\n\x1a\n\xff\xfe"
    rec = Recorder(lambda _req: httpx.Response(200, content=raw))
    assert _dispatcher(rec).send("/files/file-1/content") == raw  # nosec B101


def test_send_binary_always_returns_bytes():
    rec = Recorder(text_response(200, '{"id": "file-1"}'))
    assert _dispatcher(rec).send("/files/file-1/content", binary=True) == b'{"id": "file-1"}'  # nosec B101
