"""Structured JSON logs for both front-ends.

The API writes to stdout next to uvicorn. The console terminal owns stdout for
its own rendering, so it sends records to a file instead.
"""

from __future__ import annotations

import logging
import sys
from pathlib import Path

from pythonjsonlogger.json import JsonFormatter

LOG_FIELDS = "%(asctime)s %(levelname)s %(name)s %(message)s"
FIELD_NAMES = {"asctime": "timestamp", "levelname": "level", "name": "logger"}
SERVER_LOGGERS = ("uvicorn", "uvicorn.access", "uvicorn.error")
# Per-request chatter from the HTTP clients
CHATTY_LOGGERS = ("httpx", "httpcore", "openai")


def json_formatter() -> JsonFormatter:
    return JsonFormatter(
        fmt=LOG_FIELDS,
        rename_fields=FIELD_NAMES,
        datefmt="%Y-%m-%dT%H:%M:%S%z",
        json_ensure_ascii=False,
    )


def _level(name: str) -> int:
    level = logging.getLevelName(name.upper())
    return level if isinstance(level, int) else logging.INFO


def setup_logging(log_level: str = "INFO", log_file: str | Path | None = None) -> logging.Handler:
    """Route every logger through one JSON handler and return that handler.

    *log_file* switches the destination from stdout to an appended file.
    """
    level = _level(log_level)

    if log_file is None:
        handler: logging.Handler = logging.StreamHandler(sys.stdout)
    else:
        path = Path(log_file).expanduser()
        path.parent.mkdir(parents=True, exist_ok=True)
        handler = logging.FileHandler(path, encoding="utf-8")
    handler.setFormatter(json_formatter())

    root = logging.getLogger()
    root.setLevel(level)
    root.handlers.clear()
    root.addHandler(handler)

    for name in SERVER_LOGGERS:
        server_logger = logging.getLogger(name)
        server_logger.handlers.clear()
        server_logger.addHandler(handler)
        server_logger.propagate = False

    if level > logging.DEBUG:
        for name in CHATTY_LOGGERS:
            logging.getLogger(name).setLevel(logging.WARNING)

    return handler
