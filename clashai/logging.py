"""Logging setup for the client, based on stdlib logging.

Provides setup_logging() and get_logger(name). Nothing is printed until
setup_logging() is called; the package only installs a NullHandler.
"""
from __future__ import annotations

import logging as _logging
import os
import sys
from typing import Any, Dict, Optional, TextIO

import orjson

LOGGER_NAME = "clashai"

# LogRecord attributes that are not structured event fields
_RESERVED = set(vars(_logging.LogRecord("", 0, "", 0, "", None, None))) | {"message", "asctime"}


class JsonFormatter(_logging.Formatter):
    def format(self, record: _logging.LogRecord) -> str:  # type: ignore[override]
        payload: Dict[str, Any] = {
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "time": self.formatTime(record, datefmt="%Y-%m-%dT%H:%M:%S"),
            "pid": os.getpid(),
        }
        for key, value in vars(record).items():
            if key not in _RESERVED and not key.startswith("_"):
                payload[key] = value
        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)
        return orjson.dumps(payload, default=str).decode("utf-8")


def setup_logging(level: str | int = "INFO", *, json: bool = False, stream: Optional[TextIO] = None) -> None:
    """Send clashai log records to stream (stdout by default), as plain lines or JSON lines."""
    level_value = _logging.getLevelName(level.upper()) if isinstance(level, str) else level
    log = _logging.getLogger(LOGGER_NAME)
    log.setLevel(level_value)
    for h in list(log.handlers):
        if not isinstance(h, _logging.NullHandler):
            log.removeHandler(h)
    handler = _logging.StreamHandler(stream=stream or sys.stdout)
    if json:
        handler.setFormatter(JsonFormatter())
    else:
        handler.setFormatter(_logging.Formatter("%(message)s"))
    log.addHandler(handler)


def get_logger(name: str = LOGGER_NAME) -> _logging.Logger:
    return _logging.getLogger(name)
