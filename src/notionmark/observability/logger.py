"""Structured JSON logging for notionmark.

Each record becomes one JSON object per line::

    {"ts": "2026-01-01T12:00:00.123456+00:00", "level": "WARNING",
     "logger": "notionmark.fetcher", "message": "Sub-page expansion failed",
     "op": "expand_child_page", "block_id": "abc123"}

Structured fields ride along in ``extra={"extra_fields": {...}}``::

    log = get_logger("notionmark.fetcher")
    log.info("children fetched", extra={"extra_fields": {"count": 12}})
"""

from __future__ import annotations

import json
import logging
import sys
from datetime import datetime, timezone
from typing import Any

ROOT_LOGGER_NAME = "notionmark"


class StructuredFormatter(logging.Formatter):
    """Render a :class:`logging.LogRecord` as a single-line JSON object.

    Guaranteed keys are ``ts`` (UTC, ISO-8601), ``level``, ``logger`` and
    ``message``.  ``extra_fields`` are merged at the top level, and
    ``exception`` carries the formatted traceback when one is attached.
    """

    def format(self, record: logging.LogRecord) -> str:
        entry: dict[str, Any] = {
            "ts": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        extra_fields: dict[str, Any] | None = getattr(record, "extra_fields", None)
        if extra_fields:
            entry.update(extra_fields)

        if record.exc_info and record.exc_info[1] is not None:
            entry["exception"] = self.formatException(record.exc_info)

        return json.dumps(entry, default=str, ensure_ascii=False)


_configured: set[str] = set()


def get_logger(
    name: str = ROOT_LOGGER_NAME,
    *,
    level: int | str = logging.INFO,
    stream: Any | None = None,
) -> logging.Logger:
    """Return a logger whose records are emitted as structured JSON.

    Only the root ``notionmark`` logger gets a handler; component loggers
    such as ``notionmark.fetcher`` propagate to it.  Calling this function
    repeatedly never stacks handlers.

    Parameters
    ----------
    name:
        Logger name, ``"notionmark"`` or a dotted child of it.
    level:
        Level applied to the root logger the first time it is configured.
        Accepts an ``int`` or a case-insensitive level name.
    stream:
        Output stream for the handler.  Defaults to ``sys.stderr``.
    """
    root = logging.getLogger(ROOT_LOGGER_NAME)
    if ROOT_LOGGER_NAME not in _configured:
        resolved = logging.getLevelName(level.upper()) if isinstance(level, str) else level
        root.setLevel(resolved)
        handler = logging.StreamHandler(stream or sys.stderr)
        handler.setFormatter(StructuredFormatter())
        root.addHandler(handler)
        root.propagate = False
        _configured.add(ROOT_LOGGER_NAME)

    return logging.getLogger(name)
