"""CLI parser construction for openai-providers.

This module wires subparsers but contains no execution logic. Subcommand
handlers live in ``cli_actions``.
"""

from __future__ import annotations

import argparse

from ...config.defaults import PROVIDER_CLI_DEFAULT_PROVIDER


_TRUE = frozenset({"1", "true", "yes", "on"})
_FALSE = frozenset({"0", "false", "no", "off"})


def _str2bool(v: str) -> bool:
    val = v.strip().lower()
    if val in _TRUE:
        return True
    if val in _FALSE:
        return False
    raise argparse.ArgumentTypeError(f"expected a boolean, got {v!r}")


def add_stream_flags(parser: argparse.ArgumentParser) -> None:
    """Attach ``--stream [BOOL]`` / ``--no-stream`` flags to a parser."""
    grp = parser.add_mutually_exclusive_group()
    grp.add_argument("--stream", nargs="?", const=True, type=_str2bool, default=False)
    grp.add_argument("--no-stream", dest="stream", action="store_false")


def build_parser() -> argparse.ArgumentParser:
    """Construct the top-level CLI parser with ``run`` and ``models`` subcommands.

    No I/O or network calls occur here.
    """
    p = argparse.ArgumentParser(
        prog="openai-providers",
        description="OpenAI / Azure OpenAI debugging CLI (safe by default: dry-run)",
    )
    sub = p.add_subparsers(dest="cmd")

    p_run = sub.add_parser("run", help="Inspect or execute a single chat prompt (default)")
    p_run.add_argument("--provider", default=PROVIDER_CLI_DEFAULT_PROVIDER)
    p_run.add_argument("--model", default=None, help="Model (OpenAI) or deployment (Azure)")
    p_run.add_argument("--prompt", default=None)
    add_stream_flags(p_run)
    p_run.add_argument("--execute", action="store_true")

    p_models = sub.add_parser("models", help="List models available to the configured key")
    p_models.add_argument("--provider", default=PROVIDER_CLI_DEFAULT_PROVIDER)
    p_models.add_argument("--execute", action="store_true")

    return p


__all__ = ["build_parser", "add_stream_flags"]
