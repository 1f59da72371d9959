"""Typed parameter object for dialect client initialization.

Purpose
-------
Capture the constructor arguments shared by the OpenAI and Azure clients in
one validated object so the factory and the CLI pass a stable contract instead
of long keyword lists.

External dependencies
---------------------
- Pydantic v2 ``BaseModel`` for validation and ``.model_dump()``.

Failure modes & side effects
----------------------------
- Pure data container: no I/O. ``pydantic.ValidationError`` on wrong types or
  a non-positive timeout.
"""
from __future__ import annotations

from typing import Any, Dict, Optional

from pydantic import BaseModel, Field


class ClientParams(BaseModel):
    """Common client initialization parameters.

    Attributes
    ----------
    api_key:
        OpenAI API key, or the Azure key/token (passed as ``auth_key``).
    base_url:
        API root override.
    organization:
        OpenAI organization id (ignored by Azure).
    api_version:
        Azure ``api-version`` (ignored by OpenAI).
    auth_type:
        Azure credential presentation, ``"api_key"`` or ``"api_token"``.
    timeout_seconds:
        Per-request timeout; ``None`` uses the configured default.
    max_redirects:
        Redirect cap; ``None`` uses the configured default.
    extra:
        Further constructor keyword arguments (e.g. ``transport_options``).
    """

    api_key: Optional[str] = None
    base_url: Optional[str] = None
    organization: Optional[str] = None
    api_version: Optional[str] = None
    auth_type: Optional[str] = None
    timeout_seconds: Optional[float] = Field(default=None, gt=0)
    max_redirects: Optional[int] = Field(default=None, ge=0)
    extra: Dict[str, Any] = Field(default_factory=dict)

    def to_kwargs(self, provider: str) -> Dict[str, Any]:
        """Return constructor kwargs for ``provider`` with ``None`` values dropped."""
        out: Dict[str, Any] = {
            "base_url": self.base_url,
            "timeout": self.timeout_seconds,
            "max_redirects": self.max_redirects,
        }
        if provider == "azure":
            out |= {"auth_key": self.api_key, "api_version": self.api_version, "auth_type": self.auth_type}
        else:
            out |= {"api_key": self.api_key, "organization": self.organization}
        out |= self.extra
        return {k: v for k, v in out.items() if v is not None}


__all__ = ["ClientParams"]
