"""Async client for the ClashAI chat-completion API.

Wraps ``/v1/chat/completions`` and ``/my_stats/{user_id}``, keeps each
user's conversation in memory and notifies listeners when a request
completes (``request_made``) or fails (``error``). The main entry point is
``clashai.Client``; ``python -m clashai`` is a small command-line front end.
"""

import logging as _logging

from .client import Client
from .config import Settings, get_settings
from .errors import ClashAIError, ConfigError, ResponseFormatError
from .events import Event, EventEmitter
from .history import HistoryStore
from .models import (
    KNOWN_MODELS,
    ChatCompletion,
    Message,
    RequestMadeInfo,
    Role,
    StatsResultResponse,
)
from .result import Err, Ok, Result

_logging.getLogger(__name__).addHandler(_logging.NullHandler())

__all__ = [
    "ChatCompletion",
    "ClashAIError",
    "Client",
    "ConfigError",
    "Err",
    "Event",
    "EventEmitter",
    "HistoryStore",
    "KNOWN_MODELS",
    "Message",
    "Ok",
    "RequestMadeInfo",
    "ResponseFormatError",
    "Result",
    "Role",
    "Settings",
    "StatsResultResponse",
    "get_settings",
]
