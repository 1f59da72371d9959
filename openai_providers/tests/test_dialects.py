from __future__ import annotations

import pytest
from pydantic import ValidationError

from openai_providers.azure.dialect import auth_headers, azure_dialect
from openai_providers.base.dialect import AuthType, DialectConfig
from openai_providers.base.errors import ConfigurationError
from openai_providers.openai.dialect import openai_dialect


def test_openai_dialect_shape():
    d = openai_dialect("k")
    assert d.auth_headers == (("Authorization", "Bearer k"),)  # nosec B101
    assert d.accepted_statuses == frozenset({200}) and d.api_version is None  # nosec B101
    assert d.query_params() == {}  # nosec B101


def test_azure_dialect_shape():
    d = azure_dialect("k", model_aliases={"gpt4": "gpt-4"})
    assert d.accepted_statuses == frozenset({200, 201})  # nosec B101
    assert d.query_params() == {"api-version": "2023-07-01"}  # nosec B101
    assert d.resolve_model("gpt35") == "gpt-3.5-turbo" and d.resolve_model("gpt4") == "gpt-4"  # nosec B101
    assert d.resolve_model("other") == "other"  # nosec B101
    assert d.deployment_path("gpt-3.5-turbo", "/embeddings") == "/deployments/gpt-35-turbo/embeddings"  # nosec B101


@pytest.mark.parametrize(
    "value, expected",
    [
        (None, AuthType.API_KEY),
        (1, AuthType.API_KEY),
        ("2", AuthType.API_TOKEN),
        ("api_token", AuthType.API_TOKEN),
        (AuthType.API_TOKEN, AuthType.API_TOKEN),
    ],
)
def test_auth_type_parse(value, expected):
    assert AuthType.parse(value) is expected  # nosec B101


@pytest.mark.parametrize("value", ["7", "bearer", 0])
def test_auth_type_parse_rejects_unknown(value):
    with pytest.raises(ConfigurationError):
        AuthType.parse(value)


def test_auth_headers_per_type():
    assert auth_headers("x", AuthType.API_KEY) == (("api-key", "x"),)  # nosec B101
    assert auth_headers("x", "api_token") == (("Authorization", "Bearer x"),)  # nosec B101


def test_dialect_is_immutable_and_validated():
    d = openai_dialect("k")
    with pytest.raises(ValidationError):
        d.name = "changed"
    with pytest.raises(ValidationError):
        DialectConfig(name="x", base_url="  ")
    with pytest.raises(ValidationError):
        DialectConfig(name="x", base_url="https://h", accepted_statuses=frozenset())


def test_url_joining_and_transient_marker_extension():
    d = DialectConfig(name="x", base_url="https://h/api/")
    assert d.url_for("/models") == "https://h/api/models" and d.url_for("models") == "https://h/api/models"  # nosec B101
    extended = d.with_transient_markers("  DATA: [RETRY] ")
    assert "data: [retry]" in extended.transient_markers  # nosec B101
    assert "data: [continue]" in extended.transient_markers  # nosec B101
    assert "data: [retry]" not in d.transient_markers  # nosec B101
