from __future__ import annotations

import types

import httpx

from openai_providers.base.errors import (
    ConfigurationError,
    ErrorCode,
    HttpStatusError,
    NormalizedError,
    StreamProtocolError,
    category_for_status,
    classify_exception,
)


def test_classify_normalized_error_passthrough():
    e = NormalizedError(message="nope", category=ErrorCode.AUTH, provider="x")
    assert classify_exception(e) is ErrorCode.AUTH  # nosec B101 - assert is appropriate in unit tests


def test_classify_http_status_mapping():
    e1 = types.SimpleNamespace(status_code=404)
    assert classify_exception(e1) is ErrorCode.NOT_FOUND  # nosec B101
    e2 = types.SimpleNamespace(response=types.SimpleNamespace(status_code=503))
    assert classify_exception(e2) is ErrorCode.UNAVAILABLE  # nosec B101


def test_classify_httpx_exceptions():
    req = httpx.Request("GET", "https://api.openai.com/v1/models")
    assert classify_exception(httpx.ConnectTimeout("t", request=req)) is ErrorCode.TIMEOUT  # nosec B101
    assert classify_exception(httpx.ConnectError("c", request=req)) is ErrorCode.UNAVAILABLE  # nosec B101


def test_classify_heuristics():
    assert classify_exception(Exception("rate limit exceeded")) is ErrorCode.RATE_LIMIT  # nosec B101
    assert classify_exception(Exception("timed out waiting")) is ErrorCode.TIMEOUT  # nosec B101
    assert classify_exception(Exception("random")) is ErrorCode.UNKNOWN  # nosec B101


def test_category_for_status():
    assert category_for_status(429) is ErrorCode.RATE_LIMIT  # nosec B101
    assert category_for_status(599) is ErrorCode.SERVER_ERROR  # nosec B101
    assert category_for_status(302) is ErrorCode.UNKNOWN  # nosec B101


def test_error_kinds_derive_category():
    assert HttpStatusError(message="m", http_status=401).category is ErrorCode.AUTH  # nosec B101
    assert StreamProtocolError(message="m", http_status=500).category is ErrorCode.PROTOCOL  # nosec B101
    assert ConfigurationError(message="m").category is ErrorCode.CONFIGURATION  # nosec B101
    err = HttpStatusError(message="no such model", http_status=404, error_code="model_not_found", provider="openai")
    assert str(err) == "openai [404] model_not_found: no such model"  # nosec B101
    assert isinstance(err, Exception)  # nosec B101
