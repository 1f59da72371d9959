"""JSON line formatter for the package logger."""
from __future__ import annotations

import contextlib
import json
import logging
from datetime import datetime, timezone

ISO = "%Y-%m-%dT%H:%M:%S.%fZ"

# Attributes every LogRecord carries; anything else arrived through ``extra=``.
_STANDARD_ATTRS = frozenset(vars(logging.LogRecord("", 0, "", 0, "", None, None))) | {"message", "taskName"}


class JsonFormatter(logging.Formatter):
    """Render a record as one JSON object.

    Messages produced by ``log_event`` are JSON objects already; their keys are
    merged into the line and ``msg`` is dropped so the event is not encoded
    twice. Plain messages stay under ``msg``.
    """

    def format(self, record: logging.LogRecord) -> str:
        line = {
            "ts": datetime.now(timezone.utc).strftime(ISO),
            "level": record.levelname,
            "logger": record.name,
        }
        text = record.getMessage()
        event = None
        with contextlib.suppress(ValueError):
            event = json.loads(text)
        if isinstance(event, dict):
            line.update(event)
        else:
            line["msg"] = text
        if record.exc_info:
            line["exc"] = self.formatException(record.exc_info)
        for key, value in vars(record).items():
            if key.startswith("_") or key in _STANDARD_ATTRS:
                continue
            line.setdefault(key, value)
        return json.dumps(line, ensure_ascii=False, default=str)


__all__ = ["JsonFormatter", "ISO"]
