"""CLI action handlers and client helpers.

Purpose
-------
Subcommand handlers for ``openai-providers``, keeping the entrypoint thin.
This module has no top-level side effects and is safe to import in tests.

Fallback & Error Semantics
--------------------------
- Dry-run paths never touch the network; they only read configuration.
- Execution paths emit normalized structured logs. Errors are printed as JSON
  to stderr: exit code ``2`` for usage/configuration errors (unknown
  provider, missing key), ``1`` for failed calls.
"""

from __future__ import annotations

import argparse
import json
import sys
from typing import Any, Dict, List, Optional

from ...base.errors import ConfigurationError, NormalizedError
from ...base.factory import ProviderFactory
from ...base.logging import LogContext, get_logger, normalized_log_event
from ...config import get_provider_config
from ...config.defaults import (
    AZURE_DEFAULT_STREAM_DEPLOYMENT,
    OPENAI_DEFAULT_CHAT_MODEL,
    PROVIDER_CLI_PROMPT_PREVIEW_CHARS,
)
from ...config.env import get_env_var_candidates
from ..relay import EventStreamRelay


def default_model(provider: str) -> Optional[str]:
    """Return the model (OpenAI) or deployment (Azure) used when none is given."""
    return {"openai": OPENAI_DEFAULT_CHAT_MODEL, "azure": AZURE_DEFAULT_STREAM_DEPLOYMENT}.get(provider)


def chat_options(model: str, prompt: str, stream: bool) -> Dict[str, Any]:
    """Build the chat body sent for a single user prompt."""
    opts: Dict[str, Any] = {"model": model, "messages": [{"role": "user", "content": prompt}]}
    if stream:
        opts["stream"] = True
    return opts


def _error(payload: Dict[str, Any]) -> None:
    print(json.dumps(payload), file=sys.stderr)


def _known(provider: str) -> bool:
    return provider in ProviderFactory.names()


def plan_run(*, provider: str, model: Optional[str], prompt: Optional[str], stream: bool) -> Dict[str, Any]:
    """Compute a dry-run execution plan for a chat call without I/O.

    Returns
    -------
    Dict[str, Any]
        JSON-serializable summary: provider, effective model, base URL, api
        version (Azure), prompt preview, whether a key is configured and which
        environment variables are consulted.
    """
    name = (provider or "").lower().strip()
    known = _known(name)
    cfg = get_provider_config(name) if known else {}
    limit = PROVIDER_CLI_PROMPT_PREVIEW_CHARS
    return {
        "provider": name,
        "provider_known": known,
        "model": model or default_model(name),
        "base_url": cfg.get("base_url"),
        "api_version": cfg.get("api_version"),
        "prompt_preview": (f"{prompt[:limit]}..." if (prompt and len(prompt) > limit) else prompt),
        "stream_requested": bool(stream),
        "api_key_present": bool(cfg.get("api_key")),
        "key_env_candidates": list(get_env_var_candidates(name)),
    }


def _create_client(provider: str) -> Any:
    """Create a client or print the configuration error; returns ``None`` on failure."""
    try:
        return ProviderFactory.create(provider)
    except ConfigurationError as exc:
        _error(
            {
                "error": exc.message,
                "error_code": exc.error_code,
                "set_one_of_env": list(get_env_var_candidates(provider)),
            }
        )
        return None


def execute(provider: str, model: Optional[str], prompt: str, stream: bool) -> int:
    """Send one chat prompt and print the result.

    Non-streamed calls print the raw response body. Streamed calls relay each
    delta to stdout as it arrives, followed by a blank line.

    Returns
    -------
    int
        ``0`` on success, ``1`` when the call failed, ``2`` on configuration
        errors.
    """
    client = _create_client(provider)
    if client is None:
        return 2

    mdl = model or default_model(provider) or ""
    logger = get_logger(f"openai_providers.cli.{provider}")
    ctx = LogContext(provider=provider, model=mdl)
    normalized_log_event(logger, "cli.start", ctx, phase="start", attempt=1, stream=stream)

    try:
        with client:
            if stream:
                with EventStreamRelay(sys.stdout) as relay:
                    result = client.chat(chat_options(mdl, prompt, True), relay)
                emitted = bool(result.content)
            else:
                body = client.chat(chat_options(mdl, prompt, False))
                print(body)
                emitted = bool(body)
    except NormalizedError as exc:
        normalized_log_event(
            logger,
            "cli.error",
            ctx,
            phase="finalize",
            error_code=exc.category.value,
            emitted=False,
            error=str(exc),
        )
        _error({"error": exc.message, "http_status": exc.http_status, "error_code": exc.error_code})
        return 1
    normalized_log_event(logger, "cli.finalize", ctx, phase="finalize", emitted=emitted)
    return 0


def handle_run(args: argparse.Namespace) -> int:
    """Execute the default ``run`` subcommand (inspect or execute)."""
    provider = (args.provider or "").lower().strip()
    if not args.execute:
        print(json.dumps(plan_run(provider=provider, model=args.model, prompt=args.prompt, stream=args.stream)))
        return 0
    if not _known(provider):
        _error({"error": f"unknown provider '{args.provider}'", "known": ProviderFactory.names()})
        return 2
    if not args.prompt:
        _error({"error": "--prompt is required with --execute"})
        return 2
    return execute(provider, args.model, args.prompt, args.stream)


def handle_models(args: argparse.Namespace) -> int:
    """Execute the ``models`` subcommand: print the raw model listing."""
    provider = (args.provider or "").lower().strip()
    if not args.execute:
        _error({"error": "models performs a network call; pass --execute"})
        return 2
    if not _known(provider):
        _error({"error": f"unknown provider '{args.provider}'", "known": ProviderFactory.names()})
        return 2
    client = _create_client(provider)
    if client is None:
        return 2
    try:
        with client:
            print(client.list_models())
    except NormalizedError as exc:
        _error({"error": exc.message, "http_status": exc.http_status, "error_code": exc.error_code})
        return 1
    return 0


def known_commands() -> List[str]:
    return ["run", "models"]


__all__ = [
    "chat_options",
    "default_model",
    "execute",
    "handle_models",
    "handle_run",
    "known_commands",
    "plan_run",
]
