"""Shared base for dialect clients.

Purpose
-------
Hold the :class:`RequestDispatcher` for one dialect and expose the two call
shapes every endpoint method uses: a plain request returning the raw body
(text, or bytes for file content), and a completion-style request that is
streamed when the options ask for it.

Failure modes
-------------
- :class:`ConfigurationError` when a per-delta or completion sink is supplied without
  ``stream: true`` in the options, raised before any I/O.
- Every other failure is whatever the dispatcher raises.
"""

from __future__ import annotations

from typing import Any, Callable, Dict, Mapping, Optional, Union

from .dialect import DialectConfig
from .dispatch import RequestDispatcher
from .errors import ConfigurationError
from .streaming import StreamResult

DeltaSink = Callable[[str], Any]
Body = Union[str, bytes]


class DialectClient:
    """Base class binding a :class:`DialectConfig` to a dispatcher.

    Subclasses build their dialect and call ``super().__init__`` with it.
    Instances are usable as context managers; leaving the block closes a
    dedicated transport (pooled clients stay in the pool).
    """

    def __init__(
        self,
        dialect: DialectConfig,
        *,
        timeout: Optional[float] = None,
        max_redirects: Optional[int] = None,
        transport_options: Optional[Mapping[str, Any]] = None,
        max_buffer_bytes: Optional[int] = None,
    ) -> None:
        self.dialect = dialect
        self._dispatcher = RequestDispatcher(
            dialect,
            timeout=timeout,
            max_redirects=max_redirects,
            transport_options=transport_options,
            max_buffer_bytes=max_buffer_bytes,
        )

    @property
    def provider_name(self) -> str:
        return self.dialect.name

    @property
    def dispatcher(self) -> RequestDispatcher:
        return self._dispatcher

    def _send(
        self,
        path: str,
        method: str = "GET",
        options: Optional[Mapping[str, Any]] = None,
        *,
        model: Optional[str] = None,
        binary: bool = False,
    ) -> Body:
        return self._dispatcher.send(path, method, options, model=model, binary=binary)

    def _completion_call(
        self,
        path: str,
        options: Dict[str, Any],
        *,
        on_delta: Optional[DeltaSink] = None,
        on_complete: Optional[Callable[[str], Any]] = None,
        should_abort: Optional[Callable[[], bool]] = None,
        model: Optional[str] = None,
    ) -> Union[Body, StreamResult]:
        """POST ``options`` to ``path``; streamed when ``options["stream"]`` is truthy.

        Returns the raw body for a plain call, or a :class:`StreamResult`
        for a streamed one.
        """
        streaming = bool(options.get("stream"))
        if not streaming and (on_delta is not None or on_complete is not None):
            raise ConfigurationError(
                message="a stream function requires 'stream': true in the options",
                provider=self.provider_name,
            )
        if not streaming:
            return self._send(path, "POST", options, model=model)
        return self._dispatcher.stream(
            path,
            options,
            on_delta=on_delta,
            on_complete=on_complete,
            should_abort=should_abort,
            model=model,
        )

    def close(self) -> None:
        self._dispatcher.close()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()


__all__ = ["Body", "DialectClient", "DeltaSink"]
