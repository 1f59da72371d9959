"""Response classifier: HTTP status + body -> success or normalized error.

The accepted status set and the embedded-error policy are injected (normally
from a :class:`DialectConfig`), so one classifier serves both dialects.

Error envelopes understood on failure:

- ``{"error": {"type" | "code": ..., "message": ...}}`` (``type`` wins)
- ``{"object": "error", "code": ..., "message": ...}``, normalized into the
  first shape before extraction.

A body that is not JSON, or matches neither shape, yields the generic message
``HTTP CODE [<status>]`` with no error code.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any, Dict, FrozenSet, Iterable, Optional, Union

from ..dialect import DialectConfig
from ..errors import HttpStatusError

Body = Union[bytes, str]


@dataclass(frozen=True)
class Classification:
    """Outcome of :meth:`ResponseClassifier.classify`."""

    ok: bool
    status: int
    body: Body
    error: Optional[HttpStatusError] = None


def _decode_json(body: Body) -> Any:
    text = body.decode("utf-8", errors="replace") if isinstance(body, (bytes, bytearray)) else body
    try:
        return json.loads(text)
    except ValueError:
        return None


def extract_error_envelope(payload: Any) -> Optional[Dict[str, Any]]:
    """Return the normalized ``{"type", "message"}`` error dict, if any."""
    if not isinstance(payload, dict):
        return None
    if payload.get("object") == "error":
        return {"type": payload.get("code"), "message": payload.get("message")}
    err = payload.get("error")
    if isinstance(err, dict):
        return {"type": err.get("type") or err.get("code"), "message": err.get("message")}
    return None


class ResponseClassifier:
    """Classify responses against an injected accepted-status set."""

    def __init__(
        self,
        accepted_statuses: Iterable[int] = (200,),
        *,
        embedded_error_is_failure: bool = False,
        provider: str = "-",
    ) -> None:
        self.accepted_statuses: FrozenSet[int] = frozenset(accepted_statuses)
        self.embedded_error_is_failure = embedded_error_is_failure
        self.provider = provider

    @classmethod
    def for_dialect(cls, dialect: DialectConfig) -> "ResponseClassifier":
        return cls(
            dialect.accepted_statuses,
            embedded_error_is_failure=dialect.embedded_error_is_failure,
            provider=dialect.name,
        )

    def is_accepted(self, status: int) -> bool:
        return status in self.accepted_statuses

    def classify(self, status: int, body: Body) -> Classification:
        """Return a :class:`Classification`; never raises for bad bodies."""
        if self.is_accepted(status):
            if self.embedded_error_is_failure:
                payload = _decode_json(body)
                if isinstance(payload, dict) and payload.get("object") == "error":
                    return Classification(False, status, body, self._build_error(status, payload, body))
            return Classification(True, status, body)
        return Classification(False, status, body, self._build_error(status, _decode_json(body), body))

    def check(self, status: int, body: Body) -> Body:
        """Return ``body`` unchanged on success, otherwise raise the normalized error."""
        result = self.classify(status, body)
        if result.error is not None:
            raise result.error
        return result.body

    def _build_error(self, status: int, payload: Any, body: Body) -> HttpStatusError:
        envelope = extract_error_envelope(payload)
        if envelope is None:
            return HttpStatusError(
                message=f"HTTP CODE [{status}]",
                http_status=status,
                provider=self.provider,
                raw=body,
            )
        code = envelope.get("type")
        return HttpStatusError(
            message=str(envelope.get("message") or ""),
            http_status=status,
            error_code=str(code) if code is not None else None,
            provider=self.provider,
            raw=body,
        )


__all__ = ["Classification", "ResponseClassifier", "extract_error_envelope"]
