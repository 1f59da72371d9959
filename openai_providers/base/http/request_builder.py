"""Request builder: option map -> fully prepared HTTP request.

Purpose:
    Turn a logical operation (endpoint path, HTTP verb, option map) into a
    :class:`PreparedRequest` carrying the URL, query parameters, ordered
    header list and serialized body. No network I/O happens here.

Content-type rule:
    - An option map containing a ``file`` or ``image`` key is sent as
      ``multipart/form-data``; every other non-empty map is JSON.
    - Slot 0 of the header list always holds the content-type header, so it is
      overwritten in place rather than appended.
    - An empty option map yields a request with no body (plain GET/DELETE).

Multipart value coercion:
    bytes, file objects, ``pathlib.Path`` and ``(filename, content[, type])``
    tuples become file parts; ``bool`` becomes ``"true"``/``"false"``; dicts are
    JSON encoded; lists repeat the field; anything else is ``str()``.
"""

from __future__ import annotations

import json
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Tuple

import httpx

from ..constants import (
    CONTENT_TYPE_HEADER,
    CONTENT_TYPE_JSON,
    CONTENT_TYPE_MULTIPART,
    MULTIPART_KEYS,
)
from ..dialect import DialectConfig
from ..errors import ConfigurationError

FilePart = Tuple[str, Tuple[Any, ...]]


@dataclass
class PreparedRequest:
    """One outbound request, built fresh per call.

    Attributes:
        method: Upper-cased HTTP verb.
        url: Absolute URL (base URL + endpoint path).
        params: Query parameters (``api-version`` for Azure).
        headers: Ordered name/value pairs; index 0 is the content-type slot.
        content: Serialized JSON body, when the body is JSON.
        data: Multipart scalar fields, when the body is multipart.
        files: Multipart file parts, when the body is multipart.
        stream: Whether the response is consumed incrementally.
    """

    method: str
    url: str
    params: Dict[str, str] = field(default_factory=dict)
    headers: List[Tuple[str, str]] = field(default_factory=list)
    content: Optional[bytes] = None
    data: Optional[Dict[str, Any]] = None
    files: Optional[List[FilePart]] = None
    stream: bool = False

    @property
    def content_type(self) -> str:
        return self.headers[0][1] if self.headers else ""

    @property
    def is_multipart(self) -> bool:
        return self.content_type.startswith(CONTENT_TYPE_MULTIPART)

    @property
    def has_body(self) -> bool:
        return self.content is not None or self.data is not None or self.files is not None

    def set_content_type(self, value: str) -> None:
        """Overwrite the content-type slot without adding a duplicate header."""
        if self.headers and self.headers[0][0].lower() == CONTENT_TYPE_HEADER.lower():
            self.headers[0] = (CONTENT_TYPE_HEADER, value)
        else:
            self.headers.insert(0, (CONTENT_TYPE_HEADER, value))

    def to_httpx(self, client: httpx.Client) -> httpx.Request:
        """Materialize the request on ``client`` (timeouts and redirects come from the client)."""
        return client.build_request(
            self.method,
            self.url,
            params=self.params or None,
            headers=self.headers,
            content=self.content,
            data=self.data or None,
            files=self.files or None,
        )

    def describe(self) -> Dict[str, Any]:
        """Return a log/CLI friendly summary with credentials redacted."""
        return {
            "method": self.method,
            "url": self.url,
            "params": dict(self.params),
            "headers": [(k, _redact(k, v)) for k, v in self.headers],
            "content_type": self.content_type,
            "stream": self.stream,
            "body": json.loads(self.content) if self.content else None,
            "fields": sorted(self.data) if self.data else None,
            "files": [name for name, _ in self.files] if self.files else None,
        }


def _redact(name: str, value: str) -> str:
    if name.lower() in {"authorization", "api-key"}:
        return value[:7] + "***" if len(value) > 10 else "***"
    return value


def is_multipart_options(options: Mapping[str, Any]) -> bool:
    """Return True when the option map must be sent as multipart form data."""
    return any(key in options for key in MULTIPART_KEYS)


def _is_file_like(value: Any) -> bool:
    return hasattr(value, "read") and callable(value.read)


def _file_part(key: str, value: Any) -> Optional[Tuple[Any, ...]]:
    """Return an httpx file tuple for ``value`` or ``None`` for scalar fields."""
    if isinstance(value, (bytes, bytearray)):
        return (key, bytes(value))
    if isinstance(value, Path):
        return (value.name, value.read_bytes())
    if _is_file_like(value):
        return (os.path.basename(str(getattr(value, "name", key))), value)
    if (
        isinstance(value, tuple)
        and 2 <= len(value) <= 3
        and (isinstance(value[1], (bytes, bytearray)) or _is_file_like(value[1]))
    ):
        return value
    return None


def _form_value(value: Any) -> Any:
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, dict):
        return json.dumps(value)
    if isinstance(value, (list, tuple)):
        return [_form_value(v) for v in value]
    return "" if value is None else str(value)


def _encode_multipart(options: Mapping[str, Any]) -> Tuple[Dict[str, Any], List[FilePart]]:
    data: Dict[str, Any] = {}
    files: List[FilePart] = []
    for key, value in options.items():
        part = _file_part(key, value)
        if part is not None:
            files.append((key, part))
        else:
            data[key] = _form_value(value)
    if not files:
        # httpx urlencodes when no file part is present; nameless parts keep it multipart
        files = [
            (key, (None, item))
            for key, value in data.items()
            for item in (value if isinstance(value, list) else [value])
        ]
        data = {}
    return data, files


def _encode_json(options: Mapping[str, Any], dialect: DialectConfig) -> bytes:
    try:
        return json.dumps(options).encode("utf-8")
    except (TypeError, ValueError) as exc:
        raise ConfigurationError(
            message=f"request options are not JSON serializable: {exc}",
            provider=dialect.name,
            raw=exc,
        ) from exc


def build_request(
    dialect: DialectConfig,
    method: str,
    path: str,
    options: Optional[Mapping[str, Any]] = None,
    *,
    stream: Optional[bool] = None,
) -> PreparedRequest:
    """Build a :class:`PreparedRequest` for ``path`` under ``dialect``.

    Parameters:
        dialect: Dialect configuration supplying URL, auth headers and
            ``api-version``.
        method: HTTP verb (any case).
        path: Endpoint path relative to the dialect base URL.
        options: Request body option map; empty or ``None`` means no body.
        stream: Force the streaming flag; defaults to ``options["stream"]``.

    Raises:
        ConfigurationError: When a JSON body cannot be serialized.
    """
    opts = dict(options or {})
    req = PreparedRequest(
        method=method.upper(),
        url=dialect.url_for(path),
        params=dialect.query_params(),
        headers=[(CONTENT_TYPE_HEADER, CONTENT_TYPE_JSON), *dialect.auth_headers],
        stream=bool(opts.get("stream")) if stream is None else stream,
    )
    if not opts:
        return req
    if is_multipart_options(opts):
        # httpx reads the boundary back out of an explicit content-type header
        req.set_content_type(f"{CONTENT_TYPE_MULTIPART}; boundary={os.urandom(16).hex()}")
        req.data, req.files = _encode_multipart(opts)
        return req
    req.content = _encode_json(opts, dialect)
    return req


__all__ = ["PreparedRequest", "build_request", "is_multipart_options"]
