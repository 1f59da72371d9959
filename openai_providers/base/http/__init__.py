"""HTTP layer: client pool, request builder, response classifier, transport."""

from .client import close_all_clients, get_httpx_client
from .request_builder import PreparedRequest, build_request, is_multipart_options
from .response_classifier import Classification, ResponseClassifier, extract_error_envelope
from .transport import HttpTransport, RawResult, StreamingBody

__all__ = [
    "get_httpx_client",
    "close_all_clients",
    "PreparedRequest",
    "build_request",
    "is_multipart_options",
    "Classification",
    "ResponseClassifier",
    "extract_error_envelope",
    "HttpTransport",
    "RawResult",
    "StreamingBody",
]
