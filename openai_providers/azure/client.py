"""Azure OpenAI client built on :class:`DialectClient`.

``chat``, ``completion`` and ``embeddings`` move the ``model`` option out of
the body into the deployment path. ``chat_stream`` always streams and maps a
deployment alias (``gpt35``) to the model name carried in the body.
"""

from __future__ import annotations

from typing import Any, Callable, Dict, Mapping, Optional, Union

from ..base.constants import MISSING_API_KEY_ERROR
from ..base.dialect import AuthType
from ..base.errors import ConfigurationError
from ..base.provider import Body, DeltaSink, DialectClient
from ..base.streaming import StreamResult
from ..config import get_provider_config
from ..config.defaults import AZURE_DEFAULT_STREAM_DEPLOYMENT
from .dialect import azure_dialect

__all__ = ["AzureOpenAIProvider"]


class AzureOpenAIProvider(DialectClient):
    """Client for an Azure OpenAI resource.

    Args:
        auth_key: API key or AAD token; falls back to ``AZURE_OPENAI_API_KEY``
            (or ``AZURE_OPENAI_KEY``) and the config file.
        api_version: Value of the ``api-version`` query parameter.
        auth_type: :class:`AuthType` member, number or name.
        base_url: Resource root, e.g. ``https://<name>.openai.azure.com/openai``.
        model_aliases: Extra deployment alias -> model name entries.
        embedded_error_is_failure: Treat a 200/201 body of the form
            ``{"object": "error", ...}`` as a failure.
        timeout, max_redirects, transport_options, max_buffer_bytes: see
            :class:`DialectClient`.

    Raises:
        ConfigurationError: no key could be resolved, or the auth type is unknown.
    """

    def __init__(
        self,
        auth_key: Optional[str] = None,
        api_version: Optional[str] = None,
        auth_type: Union[AuthType, int, str, None] = None,
        *,
        base_url: Optional[str] = None,
        model_aliases: Optional[Mapping[str, str]] = None,
        embedded_error_is_failure: bool = False,
        timeout: Optional[float] = None,
        max_redirects: Optional[int] = None,
        transport_options: Optional[Mapping[str, Any]] = None,
        max_buffer_bytes: Optional[int] = None,
    ) -> None:
        cfg = get_provider_config(
            "azure",
            {
                "api_key": auth_key,
                "api_version": api_version,
                "auth_type": auth_type,
                "base_url": base_url,
            },
        )
        key = cfg.get("api_key")
        if not key:
            raise ConfigurationError(
                message="Azure OpenAI key is not configured (set AZURE_OPENAI_API_KEY)",
                error_code=MISSING_API_KEY_ERROR,
                provider="azure",
            )
        aliases = dict(cfg.get("model_aliases") or {})
        aliases.update(model_aliases or {})
        super().__init__(
            azure_dialect(
                key,
                cfg.get("api_version"),
                cfg.get("auth_type"),
                base_url=cfg.get("base_url"),
                model_aliases=aliases,
                embedded_error_is_failure=embedded_error_is_failure,
            ),
            timeout=timeout,
            max_redirects=max_redirects,
            transport_options=transport_options,
            max_buffer_bytes=max_buffer_bytes,
        )

    @property
    def models(self) -> Dict[str, str]:
        return dict(self.dialect.model_aliases)

    def _split_model(self, opts: Mapping[str, Any]) -> tuple[str, Dict[str, Any]]:
        body = dict(opts)
        model = body.pop("model", None)
        if not model:
            raise ConfigurationError(
                message="'model' (the deployment name) is required", provider=self.provider_name
            )
        return str(model), body

    # ----------------------------------------------------------- deployments

    def chat(
        self,
        opts: Mapping[str, Any],
        on_delta: Optional[DeltaSink] = None,
        *,
        on_complete: Optional[Callable[[str], Any]] = None,
        should_abort: Optional[Callable[[], bool]] = None,
    ) -> Union[Body, StreamResult]:
        model, body = self._split_model(opts)
        return self._completion_call(
            self.dialect.deployment_path(model, "/chat/completions"),
            body,
            on_delta=on_delta,
            on_complete=on_complete,
            should_abort=should_abort,
            model=model,
        )

    def completion(
        self,
        opts: Mapping[str, Any],
        on_delta: Optional[DeltaSink] = None,
        *,
        on_complete: Optional[Callable[[str], Any]] = None,
        should_abort: Optional[Callable[[], bool]] = None,
    ) -> Union[Body, StreamResult]:
        model, body = self._split_model(opts)
        return self._completion_call(
            self.dialect.deployment_path(model, "/completions"),
            body,
            on_delta=on_delta,
            on_complete=on_complete,
            should_abort=should_abort,
            model=model,
        )

    def embeddings(self, opts: Mapping[str, Any]) -> Body:
        model, body = self._split_model(opts)
        return self._send(self.dialect.deployment_path(model, "/embeddings"), "POST", body, model=model)

    def chat_stream(
        self,
        opts: Optional[Mapping[str, Any]] = None,
        deployment: str = AZURE_DEFAULT_STREAM_DEPLOYMENT,
        *,
        on_delta: Optional[DeltaSink] = None,
        on_complete: Optional[Callable[[str], Any]] = None,
        should_abort: Optional[Callable[[], bool]] = None,
    ) -> StreamResult:
        """Stream a chat completion from ``deployment``.

        The deployment id is the alias with dots removed; the body's ``model``
        defaults to the alias's model name. ``stream`` is always ``true``.
        """
        deployment_id = self.dialect.deployment_id(deployment)
        body: Dict[str, Any] = dict(opts or {})
        body.setdefault("model", self.dialect.resolve_model(deployment_id))
        return self._dispatcher.stream(
            self.dialect.deployment_path(deployment_id, "/chat/completions"),
            body,
            on_delta=on_delta,
            on_complete=on_complete,
            should_abort=should_abort,
            model=body["model"],
        )

    def create_deployment(self, opts: Mapping[str, Any]) -> Body:
        return self._send("/deployments", "POST", opts)

    def delete_deployment(self, deployment_id: str) -> Body:
        return self._send(f"/deployments/{deployment_id}", "DELETE")

    def retrieve_deployment(self, deployment_id: str) -> Body:
        return self._send(f"/deployments/{deployment_id}")

    def list_deployments(self) -> Body:
        return self._send("/deployments")

    def update_deployment(self, deployment_id: str, opts: Mapping[str, Any]) -> Body:
        return self._send(f"/deployments/{deployment_id}", "PATCH", opts)

    # ----------------------------------------------------------------- files

    def delete_file(self, file_id: str) -> Body:
        return self._send(f"/files/{file_id}", "DELETE")

    def retrieve_file(self, file_id: str) -> Body:
        return self._send(f"/files/{file_id}")

    def file_content(self, file_id: str) -> bytes:
        return self._send(f"/files/{file_id}/content", binary=True)

    def import_file(self, opts: Mapping[str, Any]) -> Body:
        return self._send("/files/import", "POST", opts)

    def upload_file(self, opts: Mapping[str, Any]) -> Body:
        return self._send("/files", "POST", opts)

    def list_files(self) -> Body:
        return self._send("/files")

    # ------------------------------------------------------------ fine-tunes

    def create_fine_tune(self, opts: Mapping[str, Any]) -> Body:
        return self._send("/fine-tunes", "POST", opts)

    def cancel_fine_tune(self, fine_tune_id: str) -> Body:
        return self._send(f"/fine-tunes/{fine_tune_id}/cancel", "POST", {"fine_tune_id": fine_tune_id})

    def delete_fine_tune(self, fine_tune_id: str) -> Body:
        return self._send(f"/fine-tunes/{fine_tune_id}", "DELETE")

    def retrieve_fine_tune(self, fine_tune_id: str) -> Body:
        return self._send(f"/fine-tunes/{fine_tune_id}")

    def retrieve_fine_tune_events(self, fine_tune_id: str) -> Body:
        return self._send(f"/fine-tunes/{fine_tune_id}/events")

    def list_fine_tunes(self) -> Body:
        return self._send("/fine-tunes")

    # ---------------------------------------------------------------- models

    def retrieve_model(self, model_id: str) -> Body:
        return self._send(f"/models/{model_id}", model=model_id)

    def list_models(self) -> Body:
        return self._send("/models")
