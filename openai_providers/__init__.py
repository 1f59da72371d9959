"""openai_providers package

Clients for the OpenAI REST API and Azure OpenAI sharing one request/stream
core.

Purpose:
    Provide a minimal, stable API for external consumption (packaging is
    configured via the repository root ``pyproject.toml``). Callers use client
    instances directly, e.g. ``create("openai").chat({...})``.

Public API (re-exported):
    - Version: ``__version__``
    - Clients: :class:`OpenAIProvider`, :class:`AzureOpenAIProvider`
    - Factory: :func:`create`, :class:`ProviderFactory`, :class:`ClientParams`
    - Exceptions: :class:`NormalizedError` and its kinds, :class:`ErrorCode`
    - Streaming: :class:`StreamDecoder`, :class:`StreamResult`
"""

from typing import Any

from .azure import AzureOpenAIProvider
from .base.dialect import AuthType, DialectConfig
from .base.dto import ClientParams
from .base.errors import (
    ConfigurationError,
    ErrorCode,
    HttpStatusError,
    NormalizedError,
    StreamDecodeError,
    StreamOverflowError,
    StreamProtocolError,
    TransportError,
)
from .base.factory import ProviderFactory, UnknownProviderError
from .base.streaming import StreamDecoder, StreamResult
from .openai import OpenAIProvider

__version__ = "0.1.0"

__all__ = [
    "__version__",
    "OpenAIProvider",
    "AzureOpenAIProvider",
    "AuthType",
    "DialectConfig",
    "create",
    "ProviderFactory",
    "UnknownProviderError",
    "ClientParams",
    "ErrorCode",
    "NormalizedError",
    "TransportError",
    "HttpStatusError",
    "StreamProtocolError",
    "StreamDecodeError",
    "StreamOverflowError",
    "ConfigurationError",
    "StreamDecoder",
    "StreamResult",
]


def create(provider: str, **kwargs: Any) -> Any:
    """Create a client by canonical name (``"openai"`` or ``"azure"``).

    Raises:
        UnknownProviderError: unknown name or rejected arguments.
        ConfigurationError: the client could not resolve its credentials.
    """
    return ProviderFactory.create(provider, **kwargs)
