"""OpenAI dialect: bearer auth, optional organization header, status 200 only."""

from __future__ import annotations

from typing import List, Optional, Tuple

from ..base.dialect import DialectConfig
from ..config.defaults import OPENAI_DEFAULT_BASE_URL


def openai_dialect(
    api_key: str,
    organization: Optional[str] = None,
    *,
    base_url: Optional[str] = None,
) -> DialectConfig:
    """Return the :class:`DialectConfig` for the public OpenAI API.

    Headers are ``Authorization: Bearer <key>`` followed by
    ``OpenAI-Organization`` when an organization is given.
    """
    headers: List[Tuple[str, str]] = [("Authorization", f"Bearer {api_key}")]
    if organization:
        headers.append(("OpenAI-Organization", organization))
    return DialectConfig(
        name="openai",
        base_url=base_url or OPENAI_DEFAULT_BASE_URL,
        auth_headers=tuple(headers),
        accepted_statuses=frozenset({200}),
    )


__all__ = ["openai_dialect"]
