"""Structured event logging with human-friendly messages.

Each event goes through the `clashai` logger: the record message is a
concise human-readable line and the raw fields ride along as record
attributes (rendered by JsonFormatter when JSON output is enabled).
"""
from __future__ import annotations

import logging
from typing import Any, Dict

from .logging import LOGGER_NAME

_log = logging.getLogger(LOGGER_NAME)


def _short(value: Any, n: int = 8) -> str:
    s = str(value or "")
    return s if len(s) <= n else s[:n] + "…"


def _kv(rec: Dict[str, Any], keys: list[str]) -> str:
    parts = []
    for k in keys:
        if k in rec and rec[k] is not None:
            parts.append(f"{k}={rec[k]}")
    return " ".join(parts)


def _pretty(event: str, level: str, rec: Dict[str, Any]) -> str:
    if event == "request_ok":
        return (
            f"[REQ] ok user={_short(rec.get('user_id'))} model={rec.get('model', '?')} "
            f"history={rec.get('history_len')} {_kv(rec, ['total_tokens'])} {rec.get('latency', 0)} ms"
        )
    if event == "request_error":
        return (
            f"[REQ] error user={_short(rec.get('user_id'))} model={rec.get('model', '?')} "
            f"{rec.get('latency', 0)} ms: {rec.get('error', '')}"
        )
    if event == "usage_ok":
        return f"[USE] ok user={_short(rec.get('user_id'))} {_kv(rec, ['requests_all_time', 'requests_this_minute'])}"
    if event == "usage_error":
        return f"[USE] error user={_short(rec.get('user_id'))}: {rec.get('error', '')}"
    if event == "unknown_model":
        return f"[CFG] model not in known list: {rec.get('model')}"
    if event == "listener_error":
        return f"[EVT] listener for {rec.get('event_name')} failed: {rec.get('error', '')}"
    # Generic fallback for any other events
    tail = " ".join(f"{k}={v}" for k, v in rec.items())
    return f"[LOG] {level} {event} {tail}".rstrip()


def _write(level: int, event: str, kv: Dict[str, Any]) -> None:
    if not _log.isEnabledFor(level):
        return
    msg = _pretty(event, logging.getLevelName(level), kv)
    extra = {"event": event}
    extra.update({k: v for k, v in kv.items() if k not in {"message", "asctime"}})
    try:
        _log.log(level, msg, extra=extra)
    except KeyError:
        # field name collides with a LogRecord attribute
        _log.log(level, msg, extra={"event": event})


def log_info(event: str, **kv: Any) -> None:
    _write(logging.INFO, event, kv)


def log_warning(event: str, **kv: Any) -> None:
    _write(logging.WARNING, event, kv)


def log_error(event: str, **kv: Any) -> None:
    _write(logging.ERROR, event, kv)
