"""Pytest configuration for the openai_providers test suite.

Every test starts from a clean environment: credential and override
variables are removed, the config-file cache is dropped and pooled HTTP
clients are closed afterwards.
"""

from __future__ import annotations

from typing import Iterator

import pytest

_ENV_VARS = (
    "OPENAI_API_KEY",
    "OPENAI_BASE_URL",
    "OPENAI_ORGANIZATION",
    "OPENAI_API_VERSION",
    "OPENAI_AUTH_TYPE",
    "AZURE_OPENAI_API_KEY",
    "AZURE_OPENAI_KEY",
    "AZURE_OPENAI_BASE_URL",
    "AZURE_OPENAI_API_VERSION",
    "AZURE_OPENAI_ORGANIZATION",
    "AZURE_OPENAI_AUTH_TYPE",
    "OPENAI_PROVIDERS_CONFIG_FILE",
    "OPENAI_PROVIDERS_LOG_LEVEL",
    "OPENAI_PROVIDERS_HTTP_TIMEOUT_SECONDS",
    "OPENAI_PROVIDERS_MAX_REDIRECTS",
    "OPENAI_PROVIDERS_STREAM_MAX_BUFFER_BYTES",
)


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
    """Isolate tests from the developer's shell configuration."""
    from openai_providers.base.http import close_all_clients
    from openai_providers.config import reset_config_cache

    for name in _ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    reset_config_cache()
    yield
    reset_config_cache()
    close_all_clients()
