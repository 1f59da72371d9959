"""
Request/stream core shared by every dialect.

- Dialect: :class:`DialectConfig` values injected into one generic core
- HTTP: request builder, pooled transport, response classifier
- Streaming: incremental ``data:`` frame decoder
- Dispatch: :class:`RequestDispatcher` and the :class:`DialectClient` base
- Factory: lazy creation of dialect clients by canonical name
"""

from .dialect import AuthType, DialectConfig
from .dispatch import RequestDispatcher
from .dto import ClientParams
from .errors import (
    ConfigurationError,
    ErrorCode,
    HttpStatusError,
    NormalizedError,
    StreamDecodeError,
    StreamOverflowError,
    StreamProtocolError,
    TransportError,
)
from .factory import ProviderFactory, UnknownProviderError, create_provider
from .provider import DialectClient
from .streaming import DecoderState, FrameKind, StreamDecoder, StreamFrame, StreamResult
from .timeouts import TransportConfig, get_timeout_config

__all__ = [
    "AuthType",
    "DialectConfig",
    "RequestDispatcher",
    "ClientParams",
    "ConfigurationError",
    "ErrorCode",
    "HttpStatusError",
    "NormalizedError",
    "StreamDecodeError",
    "StreamOverflowError",
    "StreamProtocolError",
    "TransportError",
    "ProviderFactory",
    "UnknownProviderError",
    "create_provider",
    "DialectClient",
    "DecoderState",
    "FrameKind",
    "StreamDecoder",
    "StreamFrame",
    "StreamResult",
    "TransportConfig",
    "get_timeout_config",
]
