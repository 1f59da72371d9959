"""Azure OpenAI dialect.

Differences from the public API:

- credential sent as ``api-key: <key>`` or ``Authorization: Bearer <token>``
  depending on :class:`AuthType`;
- ``api-version`` query parameter on every call;
- models addressed through ``/deployments/{id}`` where the id is the model
  name with dots removed;
- statuses 200 and 201 both count as success, and error bodies may use the
  flat ``{"object": "error", "code", "message"}`` envelope.
"""

from __future__ import annotations

from typing import Mapping, Optional, Tuple, Union

from ..base.dialect import AuthType, DialectConfig
from ..config.defaults import (
    AZURE_DEFAULT_API_VERSION,
    AZURE_DEFAULT_BASE_URL,
    AZURE_DEFAULT_MODEL_ALIASES,
)


def auth_headers(auth_key: str, auth_type: Union[AuthType, int, str, None] = AuthType.API_KEY) -> Tuple[Tuple[str, str], ...]:
    if AuthType.parse(auth_type) is AuthType.API_TOKEN:
        return (("Authorization", f"Bearer {auth_key}"),)
    return (("api-key", auth_key),)


def azure_dialect(
    auth_key: str,
    api_version: Optional[str] = None,
    auth_type: Union[AuthType, int, str, None] = AuthType.API_KEY,
    *,
    base_url: Optional[str] = None,
    model_aliases: Optional[Mapping[str, str]] = None,
    embedded_error_is_failure: bool = False,
) -> DialectConfig:
    """Return the :class:`DialectConfig` for an Azure OpenAI resource."""
    aliases = dict(AZURE_DEFAULT_MODEL_ALIASES)
    aliases.update(model_aliases or {})
    return DialectConfig(
        name="azure",
        base_url=base_url or AZURE_DEFAULT_BASE_URL,
        auth_headers=auth_headers(auth_key, auth_type),
        api_version=api_version or AZURE_DEFAULT_API_VERSION,
        accepted_statuses=frozenset({200, 201}),
        embedded_error_is_failure=embedded_error_is_failure,
        model_aliases=aliases,
    )


__all__ = ["auth_headers", "azure_dialect"]
