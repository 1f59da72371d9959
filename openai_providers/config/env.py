"""openai_providers.config.env
===========================

Centralized environment variable mapping and helpers for dialect credentials.

Design Notes
------------
- Canonical mapping is defined in ``ENV_MAP``. Azure deployments have used
  more than one variable name; ``ENV_ALIASES`` lists those with the canonical
  name first to establish precedence.
- ``ENV_PREFIX`` gives the prefix for the per-field overrides read by
  :func:`openai_providers.config.get_provider_config`.

Failure Modes
-------------
Helpers never raise on unknown providers or unset variables; they return
``None`` and callers decide how to proceed.
"""

from __future__ import annotations

import os
from typing import Dict, Optional, Tuple

# Canonical provider -> env var mapping
ENV_MAP: Dict[str, str] = {
    "openai": "OPENAI_API_KEY",
    "azure": "AZURE_OPENAI_API_KEY",
}

# Provider -> ordered tuple of acceptable env var names (canonical first)
ENV_ALIASES: Dict[str, Tuple[str, ...]] = {
    "azure": ("AZURE_OPENAI_API_KEY", "AZURE_OPENAI_KEY"),
}

# Provider -> prefix used for field overrides (e.g. AZURE_OPENAI_API_VERSION)
ENV_PREFIX: Dict[str, str] = {
    "openai": "OPENAI",
    "azure": "AZURE_OPENAI",
}


_PLACEHOLDER_MARKERS = ("placeholder", "changeme", "example", "your-key", "sk-xxx")


def is_placeholder(val: Optional[str]) -> bool:
    """True for values copied from sample configs (``changeme``, ``test_...``)."""
    if val is None:
        return False
    v = str(val).strip().lower()
    return v.startswith("test_") or any(marker in v for marker in _PLACEHOLDER_MARKERS)


def get_env_var_name(provider: str) -> Optional[str]:
    """Return the canonical environment variable name for a provider."""
    return ENV_MAP.get((provider or "").lower())


def get_env_var_candidates(provider: str) -> Tuple[str, ...]:
    """Acceptable key variables for ``provider``, canonical name first."""
    p = (provider or "").lower()
    names = ([ENV_MAP[p]] if p in ENV_MAP else []) + list(ENV_ALIASES.get(p, ()))
    return tuple(dict.fromkeys(names))


def resolve_provider_key(provider: str) -> Tuple[Optional[str], Optional[str]]:
    """Return ``(key, variable)`` for the first usable candidate, else ``(None, None)``.

    Empty values and placeholders are skipped, so a stale ``AZURE_OPENAI_API_KEY=changeme``
    does not shadow a real ``AZURE_OPENAI_KEY``.
    """
    for name in get_env_var_candidates(provider):
        val = (os.getenv(name) or "").strip()
        if val and not is_placeholder(val):
            return val, name
    return None, None


__all__ = [
    "ENV_MAP",
    "ENV_ALIASES",
    "ENV_PREFIX",
    "is_placeholder",
    "get_env_var_name",
    "get_env_var_candidates",
    "resolve_provider_key",
]
