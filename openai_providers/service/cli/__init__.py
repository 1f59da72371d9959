"""openai-providers CLI.

``run`` is the default subcommand, so ``openai-providers --prompt hi`` prints
the dry-run plan for the default provider. Handlers live in ``cli_actions``.
"""

from __future__ import annotations

import sys
from typing import Optional, Sequence

from .cli_actions import handle_models, handle_run, known_commands, plan_run
from .cli_parser import build_parser

_HELP_FLAGS = frozenset({"-h", "--help"})


def _with_default_command(argv: Sequence[str]) -> list[str]:
    args = list(argv)
    if args and (args[0] in known_commands() or args[0] in _HELP_FLAGS):
        return args
    return ["run", *args]


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Parse ``argv`` (default ``sys.argv[1:]``) and dispatch.

    Exit codes: 0 success, 1 failed provider call, 2 usage or configuration.
    """
    args = build_parser().parse_args(_with_default_command(sys.argv[1:] if argv is None else argv))
    if args.cmd == "models":
        return handle_models(args)
    return handle_run(args)


__all__ = ["main", "plan_run"]
