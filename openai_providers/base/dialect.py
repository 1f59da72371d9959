"""Dialect configuration value shared by the builder, classifier and decoder.

Purpose
-------
OpenAI and Azure OpenAI differ in base URL, auth header, path templating,
accepted success statuses and error envelope. Rather than subclassing the
dispatcher per dialect, each dialect is a :class:`DialectConfig` value injected
into one generic request/stream core.

External dependencies
---------------------
- Pydantic v2 ``BaseModel`` (frozen) for validation and immutability.

Failure modes
-------------
- ``pydantic.ValidationError`` for an empty base URL or an empty accepted
  status set.
- :class:`ConfigurationError` from :meth:`AuthType.parse` for unknown names.
"""
from __future__ import annotations

from enum import IntEnum
from typing import Dict, FrozenSet, Optional, Tuple, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .constants import DEFAULT_TRANSIENT_MARKERS
from .errors import ConfigurationError


class AuthType(IntEnum):
    """How the credential is presented to the API."""

    API_KEY = 1
    API_TOKEN = 2

    @classmethod
    def parse(cls, value: Union["AuthType", int, str, None]) -> "AuthType":
        """Coerce an enum member, its number, or its name (``"api_token"``)."""
        if value is None:
            return cls.API_KEY
        if isinstance(value, cls):
            return value
        text = str(value).strip()
        try:
            return cls(int(text)) if text.isdigit() else cls[text.upper()]
        except (KeyError, ValueError) as exc:
            raise ConfigurationError(
                message=f"unknown auth type '{value}' (expected api_key or api_token)",
            ) from exc


class DialectConfig(BaseModel):
    """Immutable per-client description of one API dialect.

    Attributes
    ----------
    name:
        Dialect identifier used in logs and errors (``"openai"``, ``"azure"``).
    base_url:
        API root; endpoint paths are appended to it.
    auth_headers:
        Ordered name/value pairs appended after the content-type slot.
    api_version:
        When set, sent as the ``api-version`` query parameter on every call.
    accepted_statuses:
        HTTP statuses treated as success by the response classifier.
    embedded_error_is_failure:
        Treat an accepted status whose body is an ``{"object": "error"}``
        envelope as a failure.
    model_separators:
        Characters stripped from a model name before it becomes a deployment
        path segment.
    model_aliases:
        Deployment alias -> model name sent in request bodies.
    transient_markers:
        Lower-cased stream frames that abort a stream as transient failures.
    """

    model_config = ConfigDict(frozen=True)

    name: str
    base_url: str
    auth_headers: Tuple[Tuple[str, str], ...] = ()
    api_version: Optional[str] = None
    accepted_statuses: FrozenSet[int] = frozenset({200})
    embedded_error_is_failure: bool = False
    model_separators: Tuple[str, ...] = (".",)
    model_aliases: Dict[str, str] = Field(default_factory=dict)
    transient_markers: FrozenSet[str] = DEFAULT_TRANSIENT_MARKERS

    @field_validator("base_url")
    @classmethod
    def _base_url_present(cls, v: str) -> str:
        if not v or not v.strip():
            raise ValueError("base_url must be a non-empty URL")
        return v.strip().rstrip("/")

    @field_validator("accepted_statuses")
    @classmethod
    def _statuses_present(cls, v: FrozenSet[int]) -> FrozenSet[int]:
        if not v:
            raise ValueError("accepted_statuses must not be empty")
        return v

    def url_for(self, path: str) -> str:
        """Join ``path`` onto the base URL with exactly one slash."""
        return f"{self.base_url}/{path.lstrip('/')}"

    def query_params(self) -> Dict[str, str]:
        return {"api-version": self.api_version} if self.api_version else {}

    def deployment_id(self, model: str) -> str:
        """Return ``model`` with the separator characters removed (``gpt-3.5`` -> ``gpt-35``)."""
        for sep in self.model_separators:
            model = model.replace(sep, "")
        return model

    def deployment_path(self, model: str, suffix: str = "") -> str:
        return f"/deployments/{self.deployment_id(model)}{suffix}"

    def resolve_model(self, alias: str) -> str:
        return self.model_aliases.get(alias, alias)

    def with_transient_markers(self, *markers: str) -> "DialectConfig":
        """Return a copy whose transient-marker set also contains ``markers``."""
        extra = frozenset(m.strip().lower() for m in markers)
        return self.model_copy(update={"transient_markers": self.transient_markers | extra})


__all__ = ["AuthType", "DialectConfig"]
