"""Exceptions raised or reported by the client."""
from __future__ import annotations


class ClashAIError(Exception):
    """Base class for client errors."""


class ConfigError(ClashAIError, ValueError):
    """Missing or invalid client configuration. Raised at construction."""


class ResponseFormatError(ClashAIError):
    """The service answered with a body the client cannot use."""

    def __init__(self, message: str, body: object = None) -> None:
        super().__init__(message)
        self.body = body
