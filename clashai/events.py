"""Publish/subscribe channel for client notifications.

Two events exist:

- ``error``: a request failed; listeners receive the exception.
- ``request_made``: a chat request completed; listeners receive a
  RequestMadeInfo with the user id and the full history.

Listeners run synchronously in registration order. A listener that raises
is logged and skipped. Coroutine listeners are scheduled as tasks on the
running loop and are not awaited by emit().
"""
from __future__ import annotations

import asyncio
import inspect
from enum import Enum
from typing import Any, Callable, Dict, List, Optional, Set, Union

from .logging_utils import log_error


class Event(str, Enum):
    ERROR = "error"
    REQUEST_MADE = "request_made"


Listener = Callable[..., Any]
EventName = Union[Event, str]


class _Registration:
    __slots__ = ("listener", "once")

    def __init__(self, listener: Listener, once: bool) -> None:
        self.listener = listener
        self.once = once


def _event(name: EventName) -> Event:
    try:
        return Event(name)
    except ValueError:
        raise ValueError(f"unknown event {name!r}; expected one of {[e.value for e in Event]}") from None


class EventEmitter:
    def __init__(self) -> None:
        self._listeners: Dict[Event, List[_Registration]] = {e: [] for e in Event}
        self._tasks: Set[asyncio.Task] = set()

    def _add(self, name: EventName, listener: Listener, *, once: bool, prepend: bool) -> "EventEmitter":
        if not callable(listener):
            raise TypeError("listener must be callable")
        reg = _Registration(listener, once)
        regs = self._listeners[_event(name)]
        if prepend:
            regs.insert(0, reg)
        else:
            regs.append(reg)
        return self

    def on(self, event: EventName, listener: Listener) -> "EventEmitter":
        return self._add(event, listener, once=False, prepend=False)

    add_listener = on

    def once(self, event: EventName, listener: Listener) -> "EventEmitter":
        return self._add(event, listener, once=True, prepend=False)

    def prepend_listener(self, event: EventName, listener: Listener) -> "EventEmitter":
        return self._add(event, listener, once=False, prepend=True)

    def prepend_once_listener(self, event: EventName, listener: Listener) -> "EventEmitter":
        return self._add(event, listener, once=True, prepend=True)

    def off(self, event: EventName, listener: Listener) -> "EventEmitter":
        """Remove the most recently added registration of listener."""
        regs = self._listeners[_event(event)]
        for i in range(len(regs) - 1, -1, -1):
            if regs[i].listener == listener:
                del regs[i]
                break
        return self

    remove_listener = off

    def remove_all_listeners(self, event: Optional[EventName] = None) -> "EventEmitter":
        if event is None:
            for regs in self._listeners.values():
                regs.clear()
        else:
            self._listeners[_event(event)].clear()
        return self

    def listener_count(self, event: EventName) -> int:
        return len(self._listeners[_event(event)])

    def listeners(self, event: EventName) -> List[Listener]:
        return [r.listener for r in self._listeners[_event(event)]]

    def emit(self, event: EventName, *args: Any) -> bool:
        """Call every listener of event with args. Returns False if there were none."""
        ev = _event(event)
        regs = self._listeners[ev]
        if not regs:
            return False
        for reg in list(regs):
            if reg.once:
                try:
                    regs.remove(reg)
                except ValueError:
                    continue
            try:
                result = reg.listener(*args)
            except Exception as e:  # noqa: BLE001
                log_error("listener_error", event_name=ev.value, error=f"{type(e).__name__}: {e}")
                continue
            if inspect.isawaitable(result):
                self._schedule(ev, result)
        return True

    def _schedule(self, ev: Event, awaitable: Any) -> None:
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            # No loop: run the coroutine listener to completion here
            try:
                asyncio.run(_as_coroutine(awaitable))
            except Exception as e:  # noqa: BLE001
                log_error("listener_error", event_name=ev.value, error=f"{type(e).__name__}: {e}")
            return
        task = loop.create_task(_as_coroutine(awaitable))
        self._tasks.add(task)

        def _done(t: asyncio.Task) -> None:
            self._tasks.discard(t)
            if t.cancelled():
                return
            exc = t.exception()
            if exc is not None:
                log_error("listener_error", event_name=ev.value, error=f"{type(exc).__name__}: {exc}")

        task.add_done_callback(_done)

    async def wait_listeners(self) -> None:
        """Wait for outstanding coroutine listeners to finish."""
        while self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)


async def _as_coroutine(awaitable: Any) -> Any:
    return await awaitable
