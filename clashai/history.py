"""Per-user conversation history store.

A plain in-memory mapping of user id to the ordered list of messages sent
and received for that user. Lists are created on first reference and are
never pruned; callers that want to bound memory trim them directly.
"""
from __future__ import annotations

import asyncio
from collections.abc import MutableMapping
from typing import Dict, Iterable, Iterator, List

from .models import Message, MessageLike, coerce_message


class HistoryStore(MutableMapping):
    """Mutable mapping of user id -> list[Message] with lazy creation."""

    def __init__(self) -> None:
        self._histories: Dict[str, List[Message]] = {}
        self._locks: Dict[str, asyncio.Lock] = {}

    def get_or_create(self, user_id: str) -> List[Message]:
        """Return the live history list for user_id, creating it if new."""
        history = self._histories.get(user_id)
        if history is None:
            history = []
            self._histories[user_id] = history
        return history

    def lock(self, user_id: str) -> asyncio.Lock:
        """Per-user lock used to serialize dispatches for one user."""
        lk = self._locks.get(user_id)
        if lk is None:
            lk = asyncio.Lock()
            self._locks[user_id] = lk
        return lk

    def has_lock(self, user_id: str) -> bool:
        return user_id in self._locks

    def __getitem__(self, user_id: str) -> List[Message]:
        return self._histories[user_id]

    def __setitem__(self, user_id: str, messages: Iterable[MessageLike]) -> None:
        self._histories[user_id] = [coerce_message(m) for m in messages]

    def __delitem__(self, user_id: str) -> None:
        # The lock stays: a dispatch for this user may still hold it
        del self._histories[user_id]

    def __iter__(self) -> Iterator[str]:
        return iter(self._histories)

    def __len__(self) -> int:
        return len(self._histories)

    def __repr__(self) -> str:
        sizes = {uid: len(msgs) for uid, msgs in self._histories.items()}
        return f"HistoryStore({sizes!r})"
