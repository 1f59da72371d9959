"""Structured logging for the dispatch layer.

Every module obtains its logger through :func:`get_logger`. Child loggers
propagate to the shared ``openai_providers`` logger, which owns one console
handler writing to the current ``sys.stderr``.

Request and stream events go through :func:`normalized_log_event`, which always
carries ``phase``, ``attempt``, ``emitted`` and ``http_status`` (``null`` when
unknown) plus ``error_code`` on failures, so a log consumer can filter
``request.*``, ``stream.*`` and ``cli.*`` lines the same way.
"""
from __future__ import annotations

import contextlib
import json
import logging
import os
import sys
from logging.handlers import RotatingFileHandler
from typing import Any, Dict, Optional

from .log_support import JsonFormatter, LogContext

ROOT_LOGGER_NAME = "openai_providers"
LOG_LEVEL_ENV = "OPENAI_PROVIDERS_LOG_LEVEL"

_INITIALIZED_ATTR = "_openai_providers_logger_initialized"
_CONSOLE_ATTR = "_openai_providers_console_handler"
_FILE_ATTR = "_openai_providers_file_handler"
_PLAIN_FORMAT = "%(asctime)s %(levelname)s %(name)s %(message)s"
_ROTATE_BYTES = 10 * 1024 * 1024
_ROTATE_BACKUPS = 5

REQUIRED_NORMALIZED_KEYS = ("phase", "attempt", "error_code", "emitted", "http_status")


def _formatter(json_mode: bool) -> logging.Formatter:
    return JsonFormatter() if json_mode else logging.Formatter(_PLAIN_FORMAT)


def _level_from(value: int | str | None, default: int) -> int:
    """Resolve a numeric level or a level name (``warn`` is accepted)."""
    if value is None or value == "":
        return default
    if isinstance(value, int):
        return value
    name = value.strip().upper()
    if name == "WARN":
        name = "WARNING"
    resolved = logging.getLevelName(name)
    return resolved if isinstance(resolved, int) else default


def _drop_handler(logger: logging.Logger, handler: logging.Handler) -> None:
    logger.removeHandler(handler)
    with contextlib.suppress(Exception):  # pragma: no cover
        handler.close()


def _console_handler(json_mode: bool, level: int) -> logging.StreamHandler:
    handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(level)
    handler.setFormatter(_formatter(json_mode))
    setattr(handler, _CONSOLE_ATTR, True)
    return handler


def _sync_console(logger: logging.Logger, json_mode: bool, level: int) -> None:
    """Keep the console handler bound to the live ``sys.stderr``.

    stderr is swapped under capture (pytest, the CLI tests); a handler left on
    the old stream would write into a closed buffer.
    """
    for handler in [h for h in logger.handlers if getattr(h, _CONSOLE_ATTR, False)]:
        stream = getattr(handler, "stream", None)
        if stream is not sys.stderr or getattr(stream, "closed", False):
            _drop_handler(logger, handler)
            logger.addHandler(_console_handler(json_mode, level))
            continue
        handler.setLevel(level)
        if json_mode != isinstance(handler.formatter, JsonFormatter):
            handler.setFormatter(_formatter(json_mode))


def _base_logger(json_mode: bool = True, level: int = logging.INFO) -> logging.Logger:
    logger = logging.getLogger(ROOT_LOGGER_NAME)
    desired = _level_from(os.getenv(LOG_LEVEL_ENV), level)
    logger.setLevel(desired)
    if getattr(logger, _INITIALIZED_ATTR, False):
        _sync_console(logger, json_mode, desired)
        return logger
    logger.handlers[:] = [_console_handler(json_mode, desired)]
    logger.propagate = False
    setattr(logger, _INITIALIZED_ATTR, True)
    return logger


def get_logger(name: str = ROOT_LOGGER_NAME, json_mode: bool = True, level: int = logging.INFO) -> logging.Logger:
    """Return a logger wired to the shared package handler.

    Child names such as ``openai_providers.dispatch`` own no handlers and
    propagate to the base logger, so each event is emitted once.
    """
    base = _base_logger(json_mode=json_mode, level=level)
    if name == ROOT_LOGGER_NAME:
        return base
    logger = logging.getLogger(name)
    for handler in [h for h in logger.handlers if getattr(h, _CONSOLE_ATTR, False)]:
        _drop_handler(logger, handler)
    logger.setLevel(logging.NOTSET)
    logger.propagate = True
    return logger


def configure_logger(
    *,
    level: int | str | None = None,
    file_path: Optional[str] = None,
    json_mode: bool = True,
) -> logging.Logger:
    """Reconfigure the shared package logger at runtime.

    Parameters
    ----------
    level: int | str | None
        Numeric level or level name. ``None`` keeps the current level.
    file_path: Optional[str]
        Attach (or reuse) a rotating file handler writing to this path.
        ``None`` removes any file handler previously attached here.
    json_mode: bool
        JSON lines when true, plain text otherwise.
    """
    logger = _base_logger(json_mode=json_mode)
    if level is not None:
        resolved = _level_from(level, logger.level)
        logger.setLevel(resolved)
        for handler in logger.handlers:
            handler.setLevel(resolved)

    target = os.path.abspath(os.path.expanduser(file_path)) if file_path else None
    keep: Optional[logging.Handler] = None
    for handler in [h for h in logger.handlers if getattr(h, _FILE_ATTR, False)]:
        if target is not None and getattr(handler, "baseFilename", None) == target:
            keep = handler
        else:
            _drop_handler(logger, handler)
    if target is None:
        return logger

    if keep is None:
        os.makedirs(os.path.dirname(target), exist_ok=True)
        keep = RotatingFileHandler(target, maxBytes=_ROTATE_BYTES, backupCount=_ROTATE_BACKUPS, encoding="utf-8")
        setattr(keep, _FILE_ATTR, True)
        logger.addHandler(keep)
    keep.setFormatter(_formatter(json_mode))
    keep.setLevel(logger.level)
    return logger


def log_event(
    logger: logging.Logger,
    event: str,
    ctx: LogContext | None = None,
    *,
    level: int = logging.INFO,
    keep_none: bool = False,
    **fields: Any,
) -> None:
    """Emit ``event`` as one JSON message; ``None`` fields are dropped unless ``keep_none``."""
    payload: Dict[str, Any] = {"event": event}
    if ctx is not None:
        payload.update(ctx.to_dict())
    payload.update(fields if keep_none else {k: v for k, v in fields.items() if v is not None})
    logger.log(level, json.dumps(payload, ensure_ascii=False, default=str))


def normalized_log_event(  # noqa: PLR0913
    logger: logging.Logger,
    event: str,
    ctx: LogContext | None = None,
    *,
    phase: str,
    attempt: int | None = None,
    error_code: str | None = None,
    emitted: bool | None = None,
    http_status: int | None = None,
    level: int = logging.INFO,
    **extra_fields: Any,
) -> None:
    """Emit an event carrying the normalized keys.

    ``error_code`` appears only on failures. Extra fields with ``None`` values
    are dropped and never override a normalized key.
    """
    fields: Dict[str, Any] = {
        "phase": phase,
        "attempt": attempt,
        "emitted": emitted,
        "http_status": http_status,
    }
    if error_code is not None:
        fields["error_code"] = error_code
    for key, value in extra_fields.items():
        if value is not None and key not in fields:
            fields[key] = value
    log_event(logger, event, ctx, level=level, keep_none=True, **fields)


__all__ = [
    "LogContext",
    "get_logger",
    "configure_logger",
    "log_event",
    "normalized_log_event",
    "REQUIRED_NORMALIZED_KEYS",
]
