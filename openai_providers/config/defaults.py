"""openai_providers.config.defaults
================================

Central place for small, stable default values used across the package. These
defaults can be overridden via environment variables, an external config file
or constructor arguments, but provide sensible fallbacks for local development
and tests.

This module intentionally avoids importing from other package modules to
prevent circular dependencies. Only plain constants live here.
"""

from __future__ import annotations

# ---- Transport ----
# Whole-call timeout (seconds) and redirect cap applied to every request.
DEFAULT_HTTP_TIMEOUT_SECONDS = 300.0
DEFAULT_MAX_REDIRECTS = 10

# ---- OpenAI ----
OPENAI_DEFAULT_BASE_URL = "https://api.openai.com/v1"
# Model injected into completion/chat bodies that do not name one.
OPENAI_DEFAULT_COMPLETION_MODEL = "text-davinci-003"
OPENAI_DEFAULT_CHAT_MODEL = "gpt-3.5-turbo"

# ---- Azure OpenAI ----
AZURE_DEFAULT_BASE_URL = "https://goldentech.openai.azure.com/openai"
AZURE_DEFAULT_API_VERSION = "2023-07-01"
# Deployment alias -> model name sent in streaming chat bodies.
AZURE_DEFAULT_MODEL_ALIASES = {"gpt35": "gpt-3.5-turbo"}
AZURE_DEFAULT_STREAM_DEPLOYMENT = "gpt35"

# ---- CLI ----
PROVIDER_CLI_DEFAULT_PROVIDER = "openai"
PROVIDER_CLI_PROMPT_PREVIEW_CHARS = 60


__all__ = [
    "DEFAULT_HTTP_TIMEOUT_SECONDS",
    "DEFAULT_MAX_REDIRECTS",
    "OPENAI_DEFAULT_BASE_URL",
    "OPENAI_DEFAULT_COMPLETION_MODEL",
    "OPENAI_DEFAULT_CHAT_MODEL",
    "AZURE_DEFAULT_BASE_URL",
    "AZURE_DEFAULT_API_VERSION",
    "AZURE_DEFAULT_MODEL_ALIASES",
    "AZURE_DEFAULT_STREAM_DEPLOYMENT",
    "PROVIDER_CLI_DEFAULT_PROVIDER",
    "PROVIDER_CLI_PROMPT_PREVIEW_CHARS",
]
