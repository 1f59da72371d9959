"""OpenAI client built on :class:`DialectClient`.

Every endpoint method returns the raw response body unmodified (text, or the
original bytes when it is not UTF-8; file content is always bytes) and callers
parse it. ``completion`` and ``chat`` return a :class:`StreamResult` instead
when their options carry ``stream: true``.

Configuration is resolved through :func:`get_provider_config` so the key,
organization and base URL may come from ``OPENAI_API_KEY`` /
``OPENAI_ORGANIZATION`` / ``OPENAI_BASE_URL`` or the config file when not
passed explicitly.
"""

from __future__ import annotations

from typing import Any, Callable, Dict, Mapping, Optional, Union

from ..base.constants import MISSING_API_KEY_ERROR
from ..base.errors import ConfigurationError
from ..base.provider import Body, DeltaSink, DialectClient
from ..base.streaming import StreamResult
from ..config import get_provider_config
from ..config.defaults import OPENAI_DEFAULT_CHAT_MODEL, OPENAI_DEFAULT_COMPLETION_MODEL
from .dialect import openai_dialect

__all__ = ["OpenAIProvider"]


class OpenAIProvider(DialectClient):
    """Client for ``https://api.openai.com/v1``.

    Args:
        api_key: API key; falls back to configuration/environment.
        organization: Optional organization id sent as ``OpenAI-Organization``.
        base_url: API root override.
        timeout: Per-request timeout in seconds (default 300).
        max_redirects: Redirect cap (default 10).
        transport_options: Extra ``httpx.Client`` keyword arguments; they
            override the defaults.
        max_buffer_bytes: Optional cap on undelimited streamed bytes.

    Raises:
        ConfigurationError: no API key could be resolved.
    """

    def __init__(
        self,
        api_key: Optional[str] = None,
        organization: Optional[str] = None,
        *,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
        max_redirects: Optional[int] = None,
        transport_options: Optional[Mapping[str, Any]] = None,
        max_buffer_bytes: Optional[int] = None,
    ) -> None:
        cfg = get_provider_config(
            "openai", {"api_key": api_key, "organization": organization, "base_url": base_url}
        )
        key = cfg.get("api_key")
        if not key:
            raise ConfigurationError(
                message="OpenAI API key is not configured (set OPENAI_API_KEY)",
                error_code=MISSING_API_KEY_ERROR,
                provider="openai",
            )
        self.completion_model = cfg.get("completion_model") or OPENAI_DEFAULT_COMPLETION_MODEL
        self.chat_model = cfg.get("chat_model") or OPENAI_DEFAULT_CHAT_MODEL
        super().__init__(
            openai_dialect(key, cfg.get("organization"), base_url=cfg.get("base_url")),
            timeout=timeout,
            max_redirects=max_redirects,
            transport_options=transport_options,
            max_buffer_bytes=max_buffer_bytes,
        )

    # ---------------------------------------------------------------- models

    def list_models(self) -> Body:
        return self._send("/models")

    def retrieve_model(self, model: str) -> Body:
        return self._send(f"/models/{model}", model=model)

    # ----------------------------------------------------------- completions

    def completion(
        self,
        opts: Mapping[str, Any],
        on_delta: Optional[DeltaSink] = None,
        *,
        on_complete: Optional[Callable[[str], Any]] = None,
        should_abort: Optional[Callable[[], bool]] = None,
    ) -> Union[Body, StreamResult]:
        """Create a completion; ``model`` defaults to the completion model."""
        body: Dict[str, Any] = dict(opts)
        body.setdefault("model", self.completion_model)
        return self._completion_call(
            "/completions",
            body,
            on_delta=on_delta,
            on_complete=on_complete,
            should_abort=should_abort,
            model=body["model"],
        )

    def chat(
        self,
        opts: Mapping[str, Any],
        on_delta: Optional[DeltaSink] = None,
        *,
        on_complete: Optional[Callable[[str], Any]] = None,
        should_abort: Optional[Callable[[], bool]] = None,
    ) -> Union[Body, StreamResult]:
        """Create a chat completion; ``model`` defaults to the chat model.

        With ``opts["stream"]`` set, ``on_delta`` receives each content delta
        as it arrives and a :class:`StreamResult` is returned.
        """
        body: Dict[str, Any] = dict(opts)
        body.setdefault("model", self.chat_model)
        return self._completion_call(
            "/chat/completions",
            body,
            on_delta=on_delta,
            on_complete=on_complete,
            should_abort=should_abort,
            model=body["model"],
        )

    def create_edit(self, opts: Mapping[str, Any]) -> Body:
        return self._send("/edits", "POST", opts)

    def embeddings(self, opts: Mapping[str, Any]) -> Body:
        return self._send("/embeddings", "POST", opts, model=opts.get("model"))

    def moderation(self, opts: Mapping[str, Any]) -> Body:
        return self._send("/moderations", "POST", opts)

    # ------------------------------------------------------- images / audio

    def image(self, opts: Mapping[str, Any]) -> Body:
        return self._send("/images/generations", "POST", opts)

    def image_edit(self, opts: Mapping[str, Any]) -> Body:
        """Edit an image; an ``image`` key sends the request as multipart."""
        return self._send("/images/edits", "POST", opts)

    def create_image_variation(self, opts: Mapping[str, Any]) -> Body:
        return self._send("/images/variations", "POST", opts)

    def transcribe(self, opts: Mapping[str, Any]) -> Body:
        return self._send("/audio/transcriptions", "POST", opts)

    def translate(self, opts: Mapping[str, Any]) -> Body:
        return self._send("/audio/translations", "POST", opts)

    # ----------------------------------------------------------------- files

    def upload_file(self, opts: Mapping[str, Any]) -> Body:
        return self._send("/files", "POST", opts)

    def list_files(self) -> Body:
        return self._send("/files")

    def retrieve_file(self, file_id: str) -> Body:
        return self._send(f"/files/{file_id}")

    def retrieve_file_content(self, file_id: str) -> bytes:
        return self._send(f"/files/{file_id}/content", binary=True)

    def delete_file(self, file_id: str) -> Body:
        return self._send(f"/files/{file_id}", "DELETE")

    # ------------------------------------------------------------ fine-tunes

    def create_fine_tune(self, opts: Mapping[str, Any]) -> Body:
        return self._send("/fine-tunes", "POST", opts)

    def list_fine_tunes(self) -> Body:
        return self._send("/fine-tunes")

    def retrieve_fine_tune(self, fine_tune_id: str) -> Body:
        return self._send(f"/fine-tunes/{fine_tune_id}")

    def cancel_fine_tune(self, fine_tune_id: str) -> Body:
        return self._send(f"/fine-tunes/{fine_tune_id}/cancel", "POST")

    def list_fine_tune_events(self, fine_tune_id: str) -> Body:
        return self._send(f"/fine-tunes/{fine_tune_id}/events")

    def delete_fine_tune(self, fine_tune_id: str) -> Body:
        return self._send(f"/fine-tunes/{fine_tune_id}", "DELETE")
