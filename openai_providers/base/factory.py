"""Client factory.

Purpose
-------
Create dialect clients by canonical name (``"openai"``, ``"azure"``). Client
modules are imported lazily with ``importlib`` so importing the factory has no
side effects.

Failure modes
-------------
- :class:`UnknownProviderError` (a :class:`ConfigurationError`) for an unknown
  name, a missing class, or constructor arguments the client rejects.
- Errors raised by the client constructor itself (e.g. a missing key) are
  :class:`ConfigurationError` already and propagate unchanged.
"""

from __future__ import annotations

from dataclasses import dataclass
from importlib import import_module
from typing import Any, Dict, Optional, Type

from .dto.client_params import ClientParams
from .errors import ConfigurationError


@dataclass
class UnknownProviderError(ConfigurationError):
    """Raised when a provider cannot be resolved or initialized."""


def create_provider(provider: str, **kwargs: Any) -> Any:
    """Shortcut for :meth:`ProviderFactory.create`."""
    return ProviderFactory.create(provider, **kwargs)


class ProviderFactory:
    """Create dialect clients based on a canonical name.

    Design notes
    ------------
    - Uses ``importlib.import_module`` for explicit import semantics.
    - Structured :class:`ClientParams` are merged with explicit ``kwargs``;
      explicit kwargs win.
    """

    _PROVIDERS: Dict[str, Dict[str, str]] = {
        "openai": {"module": "openai_providers.openai.client", "class": "OpenAIProvider"},
        "azure": {"module": "openai_providers.azure.client", "class": "AzureOpenAIProvider"},
    }

    @classmethod
    def names(cls) -> list[str]:
        return sorted(cls._PROVIDERS)

    @classmethod
    def create(
        cls,
        provider: str,
        *,
        params: Optional[ClientParams] = None,
        **kwargs: Any,
    ) -> Any:
        """Create a client instance.

        Parameters
        ----------
        provider:
            ``"openai"`` or ``"azure"`` (case-insensitive).
        params:
            Optional :class:`ClientParams`.
        **kwargs:
            Client constructor keyword arguments.

        Raises
        ------
        UnknownProviderError
            Unknown provider, missing class, or rejected constructor arguments.
        """
        name = (provider or "").lower().strip()
        spec = cls._PROVIDERS.get(name)
        if not spec:
            raise UnknownProviderError(
                message=f"Unknown provider '{provider}' (expected one of {', '.join(cls.names())})"
            )

        merged: Dict[str, Any] = params.to_kwargs(name) if params is not None else {}
        merged |= kwargs

        module_path, class_name = spec["module"], spec["class"]
        mod = import_module(module_path)
        try:
            klass: Type = getattr(mod, class_name)
        except AttributeError as exc:
            raise UnknownProviderError(
                message=f"Client class '{class_name}' not found in '{module_path}'", provider=name
            ) from exc

        try:
            return klass(**merged)
        except TypeError as exc:
            raise UnknownProviderError(
                message=f"Invalid arguments for provider '{name}': {exc}", provider=name
            ) from exc


__all__ = ["ProviderFactory", "UnknownProviderError", "create_provider"]
