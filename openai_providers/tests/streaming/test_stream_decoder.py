"""Stream decoder contract tests.

Covers the frame handling precedence, chunk-boundary independence, terminal
behavior and the text preserved across failures.
"""
from __future__ import annotations

import pytest

from openai_providers.base.errors import ErrorCode, StreamDecodeError, StreamOverflowError, StreamProtocolError
from openai_providers.base.streaming import DecoderState, FrameKind, StreamDecoder, extract_delta
from openai_providers.tests.helpers import delta_frame, split_every, sse_body


def _run(chunks, **kwargs):
    seen = []
    decoder = StreamDecoder(on_delta=seen.append, **kwargs)
    frames = list(decoder.decode(chunks))
    return decoder, frames, seen


def test_single_delta_then_done():
    decoder, frames, seen = _run([b'data: {"choices":[{"delta":{"content":"Hi"}}]}\n\ndata: [DONE]\n\n'])
    assert seen == ["Hi"]  # nosec B101
    assert decoder.text == "Hi"  # nosec B101
    assert decoder.state is DecoderState.DONE  # nosec B101
    assert [f.kind for f in frames] == [FrameKind.DATA, FrameKind.END]  # nosec B101
    result = decoder.result()
    assert result.content == "Hi" and result.raw == "data: [DONE]" and result.deltas == 1  # nosec B101
    assert result.first_frame.startswith("data: {")  # nosec B101


@pytest.mark.parametrize("size", [1, 2, 3, 5, 7, 16, 64, 10_000])
def test_chunking_does_not_change_output(size):
    body = sse_body("Hel", "lo", ", ", "wörld", "")
    _, _, reference = _run([body])
    decoder, _, seen = _run(split_every(body, size))
    assert seen == reference == ["Hel", "lo", ", ", "wörld", ""]  # nosec B101
    assert decoder.text == "Hello, wörld"  # nosec B101


def test_crlf_delimited_frames():
    body = sse_body("a", "b").replace(b"\n\n", b"\r\n\r\n")
    decoder, _, seen = _run(split_every(body, 3))
    assert seen == ["a", "b"] and decoder.state is DecoderState.DONE  # nosec B101


def test_done_stops_processing_of_later_bytes():
    body = sse_body("x") + delta_frame("ignored") + b"garbage without prefix\n\n"
    decoder, frames, seen = _run([body])
    assert seen == ["x"] and decoder.text == "x"  # nosec B101
    assert frames[-1].kind is FrameKind.END  # nosec B101
    # feeding after a terminal state is a no-op
    assert decoder.feed(delta_frame("late")) == []  # nosec B101
    assert decoder.finish() is None  # nosec B101


def test_missing_content_defaults_to_empty_delta():
    frames = [b'data: {"choices":[{"delta":{}}]}\n\n', b'data: {"choices":[{"delta":{"content":null}}]}\n\n']
    decoder, _, seen = _run(frames)
    assert seen == ["", ""] and decoder.text == ""  # nosec B101
    assert extract_delta({"choices": []}) == ""  # nosec B101


def test_end_of_input_without_done_is_normal_completion():
    completed = []
    decoder = StreamDecoder(on_complete=completed.append)
    frames = list(decoder.decode([delta_frame("par"), delta_frame("tial"), b"  trailing  "]))
    assert decoder.state is DecoderState.DONE and decoder.text == "partial"  # nosec B101
    assert frames[-1].kind is FrameKind.END and frames[-1].raw == "trailing"  # nosec B101
    assert completed == ["trailing"]  # nosec B101


def test_completion_sink_receives_done_frame():
    completed = []
    decoder = StreamDecoder(on_complete=completed.append)
    list(decoder.decode([sse_body("a")]))
    assert completed == ["data: [DONE]"]  # nosec B101


def test_non_data_frame_is_protocol_error_without_partial_delta():
    seen = []
    decoder = StreamDecoder(on_delta=seen.append, provider="azure")
    with pytest.raises(StreamProtocolError) as ei:
        list(decoder.decode([delta_frame("ok"), b'{"error": "boom"}\n\n', delta_frame("never")]))
    err = ei.value
    assert seen == ["ok"]  # nosec B101
    assert err.http_status == 500 and err.error_code == "unexpected_frame"  # nosec B101
    assert err.partial_text == "ok" and err.provider == "azure"  # nosec B101
    assert err.category is ErrorCode.PROTOCOL  # nosec B101
    assert decoder.state is DecoderState.FAILED and decoder.text == "ok"  # nosec B101
    assert decoder.last_frame.kind is FrameKind.MALFORMED  # nosec B101


@pytest.mark.parametrize("marker", [b"data: [CONTINUE]", b"  Rate Limit..  "])
def test_transient_markers_fail_the_stream(marker):
    decoder = StreamDecoder()
    with pytest.raises(StreamProtocolError) as ei:
        list(decoder.decode([marker + b"\n\n"]))
    assert ei.value.error_code == "transient_error"  # nosec B101
    assert decoder.last_frame.kind is FrameKind.ERROR  # nosec B101


def test_extra_transient_marker():
    decoder = StreamDecoder(transient_markers={"data: [retry]"})
    with pytest.raises(StreamProtocolError):
        list(decoder.decode([b"data: [retry]\n\n"]))


def test_malformed_json_is_decode_error_and_keeps_text():
    decoder = StreamDecoder()
    with pytest.raises(StreamDecodeError) as ei:
        list(decoder.decode([delta_frame("kept"), b"data: {not json\n\n"]))
    assert ei.value.partial_text == "kept" and decoder.text == "kept"  # nosec B101
    assert ei.value.category is ErrorCode.DECODE  # nosec B101
    with pytest.raises(RuntimeError):
        decoder.result()


@pytest.mark.parametrize("payload", [b"data: {}\n\n", b"data: null\n\n", b"data: []\n\n"])
def test_empty_payload_is_decode_error(payload):
    with pytest.raises(StreamDecodeError):
        list(StreamDecoder().decode([payload]))


def test_sink_return_value_is_forwarded():
    decoder = StreamDecoder(on_delta=lambda d: d.upper())
    frames = list(decoder.decode([sse_body("ab")]))
    assert frames[0].forwarded == "AB" and frames[0].delta == "ab"  # nosec B101
    assert decoder.text == "ab"  # nosec B101


def test_consumer_abort_ends_stream_as_done():
    seen = []
    decoder = StreamDecoder(on_delta=seen.append, should_abort=lambda: len(seen) >= 1)
    frames = list(decoder.decode([sse_body("one", "two", "three")]))
    assert seen == ["one"]  # nosec B101
    assert frames[-1].kind is FrameKind.END  # nosec B101
    assert decoder.result().aborted is True  # nosec B101


def test_buffer_cap_raises_overflow():
    decoder = StreamDecoder(max_buffer_bytes=16)
    with pytest.raises(StreamOverflowError) as ei:
        list(decoder.decode([delta_frame("a"), b"data: " + b"x" * 64]))
    assert ei.value.partial_text == "a" and ei.value.error_code == "stream_overflow"  # nosec B101


def test_decode_is_lazy():
    pulled = []

    def chunks():
        for c in (delta_frame("1"), b"data: [DONE]\n\n", delta_frame("2")):
            pulled.append(c)
            yield c

    list(StreamDecoder().decode(chunks()))
    assert len(pulled) == 2  # nosec B101


def test_feed_processes_each_chunk_without_iteration():
    seen = []
    decoder = StreamDecoder(on_delta=seen.append)
    for chunk in split_every(sse_body("Hi", " you"), 5):
        decoder.feed(chunk)
    assert seen == ["Hi", " you"]  # nosec B101
    assert decoder.state is DecoderState.DONE and decoder.text == "Hi you"  # nosec B101
    assert decoder.finish() is None  # nosec B101
    assert decoder.result().raw == "data: [DONE]"  # nosec B101


def test_feed_returns_frames_completed_by_the_chunk():
    decoder = StreamDecoder()
    assert decoder.feed(b'data: {"choices":[{"delta":{"content":"a"}}]}') == []  # nosec B101
    frames = decoder.feed(b"\n\n" + delta_frame("b"))
    assert [f.delta for f in frames] == ["a", "b"]  # nosec B101
    assert decoder.state is DecoderState.ACCUMULATING  # nosec B101
