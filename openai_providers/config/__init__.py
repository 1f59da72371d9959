"""Unified configuration layer for dialect clients.

Goals
-----
* Centralize defaults (base URLs, api version, model aliases).
* Merge sources in a predictable order (later wins):
    1. Built-in defaults
    2. Optional external config file (JSON or YAML) pointed to by
       ``OPENAI_PROVIDERS_CONFIG_FILE``
    3. Environment variables (``OPENAI_API_KEY``, ``AZURE_OPENAI_API_VERSION``, ...)
    4. In-code overrides passed to the helper
* Provide a single call site: ``get_provider_config(provider)``.

Environment Variable Conventions
--------------------------------
``<PREFIX>_API_KEY``, ``<PREFIX>_BASE_URL``, ``<PREFIX>_API_VERSION``,
``<PREFIX>_ORGANIZATION``, ``<PREFIX>_AUTH_TYPE`` where the prefix is
``OPENAI`` or ``AZURE_OPENAI`` (see :data:`config.env.ENV_PREFIX`).

External Config File
--------------------
Structure example::

    openai:
      organization: org-123
    azure:
      base_url: https://my-resource.openai.azure.com/openai
      api_version: 2023-07-01
      auth_type: api_key
"""
from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

from .defaults import (
    AZURE_DEFAULT_API_VERSION,
    AZURE_DEFAULT_BASE_URL,
    OPENAI_DEFAULT_BASE_URL,
)
from .env import ENV_PREFIX, resolve_provider_key

CONFIG_FILE_ENV = "OPENAI_PROVIDERS_CONFIG_FILE"

DEFAULTS: Dict[str, Dict[str, Any]] = {
    "openai": {"base_url": OPENAI_DEFAULT_BASE_URL},
    "azure": {
        "base_url": AZURE_DEFAULT_BASE_URL,
        "api_version": AZURE_DEFAULT_API_VERSION,
        "auth_type": "api_key",
    },
}

ENV_FIELD_MAP = {
    "base_url": "BASE_URL",
    "api_version": "API_VERSION",
    "organization": "ORGANIZATION",
    "auth_type": "AUTH_TYPE",
}

_FILE_CACHE: Optional[Dict[str, Any]] = None


def _load_external_config() -> Dict[str, Any]:
    """Load and cache the optional JSON/YAML config file.

    JSON is tried first; YAML (a superset) is the fallback. A missing file, a
    parse failure, or a non-mapping document all yield an empty mapping.
    """
    global _FILE_CACHE  # noqa: PLW0603 - documented module cache
    if _FILE_CACHE is not None:
        return _FILE_CACHE
    path = os.getenv(CONFIG_FILE_ENV)
    if not path or not Path(path).is_file():
        _FILE_CACHE = {}
        return _FILE_CACHE
    text = Path(path).read_text(encoding="utf-8")
    data: Any
    try:
        data = json.loads(text)
    except json.JSONDecodeError:
        try:
            data = yaml.safe_load(text) or {}
        except yaml.YAMLError:
            data = {}
    _FILE_CACHE = data if isinstance(data, dict) else {}
    return _FILE_CACHE


def reset_config_cache() -> None:
    """Forget the cached external config file (used by tests)."""
    global _FILE_CACHE  # noqa: PLW0603
    _FILE_CACHE = None


def _env_overrides(provider: str) -> Dict[str, Any]:
    out: Dict[str, Any] = {}
    prefix = ENV_PREFIX.get(provider)
    if prefix is None:
        return out
    for field, suffix in ENV_FIELD_MAP.items():
        val = os.getenv(f"{prefix}_{suffix}")
        if val is not None and val.strip():
            out[field] = val.strip()
    key, _ = resolve_provider_key(provider)
    if key:
        out["api_key"] = key
    return out


def get_provider_config(provider: str, overrides: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
    """Return merged configuration for a provider.

    Merge order (later wins): defaults -> external config -> env vars -> overrides.
    ``None`` values in ``overrides`` are ignored.
    """
    name = (provider or "").lower().strip()
    cfg: Dict[str, Any] = {}
    cfg |= DEFAULTS.get(name, {})

    file_cfg = _load_external_config().get(name)
    if isinstance(file_cfg, dict):
        cfg |= file_cfg

    cfg |= _env_overrides(name)

    if overrides:
        cfg |= {k: v for k, v in overrides.items() if v is not None}
    return cfg


__all__ = [
    "CONFIG_FILE_ENV",
    "DEFAULTS",
    "get_provider_config",
    "reset_config_cache",
]
