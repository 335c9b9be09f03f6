"""Structured JSON logging setup."""

from __future__ import annotations

import json
import logging
import sys
from datetime import datetime, timezone
from typing import Any

# Attributes every LogRecord carries; anything else came in through ``extra``.
_STANDARD_ATTRS = frozenset({
    "name", "msg", "args", "created", "relativeCreated", "exc_info",
    "exc_text", "stack_info", "lineno", "funcName", "pathname",
    "filename", "module", "levelno", "levelname", "message",
    "msecs", "processName", "process", "threadName", "thread",
    "taskName",
})

_TEXT_FORMAT = "%(asctime)s %(levelname)-7s %(name)s: %(message)s"


class JSONFormatter(logging.Formatter):
    """Format log records as single-line JSON objects.

    Fields: ``timestamp``, ``level``, ``logger``, ``module``, ``message``,
    any ``extra`` fields (e.g. ``records``, ``cities``) and ``exception``.
    """

    def format(self, record: logging.LogRecord) -> str:
        log_entry: dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(
                record.created, tz=timezone.utc
            ).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "module": record.module,
            "message": record.getMessage(),
        }

        for key, value in record.__dict__.items():
            if key not in _STANDARD_ATTRS and not key.startswith("_"):
                log_entry[key] = value

        if record.exc_info and record.exc_info[1] is not None:
            log_entry["exception"] = self.formatException(record.exc_info)

        return json.dumps(log_entry, default=str, ensure_ascii=False)


def setup_logging(
    level: str = "INFO",
    log_file: str | None = None,
    json_console: bool = True,
) -> logging.Logger:
    """Configure the ``edu_routes`` logger.

    Args:
        level: Log level string (e.g. "DEBUG", "INFO", "WARNING").
            Unknown names fall back to INFO.
        log_file: Optional path to a log file. The file always receives
            JSON lines.
        json_console: Emit JSON on stderr; when False, use a short
            human-readable line format instead.

    Returns:
        The configured package logger. Repeated calls replace its handlers.
    """
    logger = logging.getLogger("edu_routes")
    logger.setLevel(getattr(logging, str(level).upper(), logging.INFO))
    logger.handlers.clear()

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setFormatter(
        JSONFormatter() if json_console else logging.Formatter(_TEXT_FORMAT)
    )
    logger.addHandler(console_handler)

    if log_file is not None:
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setFormatter(JSONFormatter())
        logger.addHandler(file_handler)

    # urllib3 logs every connection at DEBUG
    logging.getLogger("urllib3").setLevel(logging.WARNING)

    return logger
