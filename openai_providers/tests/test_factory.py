from __future__ import annotations

import pytest
from pydantic import ValidationError

import openai_providers
from openai_providers.azure import AzureOpenAIProvider
from openai_providers.base.dto import ClientParams
from openai_providers.base.errors import ConfigurationError
from openai_providers.base.factory import ProviderFactory, UnknownProviderError, create_provider
from openai_providers.openai import OpenAIProvider


def test_create_known_providers():
    assert isinstance(create_provider("openai", api_key="sk-x"), OpenAIProvider)  # nosec B101
    assert isinstance(ProviderFactory.create(" Azure ", auth_key="az"), AzureOpenAIProvider)  # nosec B101
    assert isinstance(openai_providers.create("openai", api_key="sk-x"), OpenAIProvider)  # nosec B101


def test_unknown_provider_is_configuration_error():
    with pytest.raises(UnknownProviderError) as ei:
        create_provider("anthropic")
    assert isinstance(ei.value, ConfigurationError)  # nosec B101
    assert "openai" in ei.value.message  # nosec B101


def test_rejected_kwargs_wrapped():
    with pytest.raises(UnknownProviderError):
        create_provider("openai", api_key="sk-x", bogus=1)


def test_missing_key_propagates_unchanged():
    with pytest.raises(ConfigurationError) as ei:
        create_provider("azure")
    assert not isinstance(ei.value, UnknownProviderError)  # nosec B101


def test_client_params_mapping():
    params = ClientParams(api_key="k", api_version="2024-02-01", auth_type="api_token", timeout_seconds=30)
    client = ProviderFactory.create("azure", params=params)
    assert client.dialect.api_version == "2024-02-01"  # nosec B101
    assert client.dialect.auth_headers == (("Authorization", "Bearer k"),)  # nosec B101
    assert params.to_kwargs("openai") == {"api_key": "k", "timeout": 30.0}  # nosec B101


def test_explicit_kwargs_win_over_params():
    client = ProviderFactory.create("openai", params=ClientParams(api_key="from-params"), api_key="explicit")
    assert client.dialect.auth_headers[0] == ("Authorization", "Bearer explicit")  # nosec B101


def test_client_params_validation():
    with pytest.raises(ValidationError):
        ClientParams(timeout_seconds=0)
