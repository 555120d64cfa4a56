"""ClashAI client: chat requests with per-user history, and usage stats.

Example::

    client = Client("your clash ai api key", "chatgpt-4o-latest")
    client.on("request_made", lambda info: print(len(info.messages)))
    res = await client.make_request(
        [{"role": "system", "content": "You are a friendly chatbot."},
         {"role": "user", "content": "Hello, how are you?"}],
        user_id="u1",
    )
    if res:
        print(res.value.text)
"""
from __future__ import annotations

import contextlib
import time
import uuid
from typing import Any, AsyncIterator, Dict, Iterable, List, Optional

import httpx
import orjson
from pydantic import ValidationError

from .config import Settings, get_settings
from .errors import ConfigError, ResponseFormatError
from .events import Event, EventEmitter
from .history import HistoryStore
from .http_client import ClashAIHTTP
from .logging_utils import log_error, log_info, log_warning
from .models import (
    ChatCompletion,
    Message,
    MessageLike,
    RequestMadeInfo,
    StatsResultResponse,
    coerce_message,
    is_known_model,
)
from .result import Err, Ok, Result

# Failures reported through the error event instead of raised
_RECOVERABLE = (httpx.HTTPError, ValueError, TypeError, ResponseFormatError)


def _coerce_messages(messages: Iterable[MessageLike]) -> List[Message]:
    return [coerce_message(m) for m in messages]


def _wire_messages(history: List[Any]) -> List[Dict[str, Any]]:
    # The store is caller-mutable, so entries may be dicts
    return [coerce_message(m).model_dump() for m in history]


def _decode_stats(data: Any) -> StatsResultResponse:
    if not isinstance(data, dict) or "result" not in data:
        raise ResponseFormatError("stats response has no result field", body=data)
    result = data["result"]
    if isinstance(result, (str, bytes)):
        result = orjson.loads(result)
        # The whole body may have been serialized, not just the result
        if isinstance(result, dict) and set(result) == {"result"}:
            result = result["result"]
    return StatsResultResponse.model_validate({"result": result})


class Client(EventEmitter):
    """Async client for the ClashAI API.

    Keeps every user's conversation in `user_histories` and sends the whole
    conversation as context on each request. Request failures never raise:
    they are emitted on the ``error`` event and returned as `Err`.
    """

    def __init__(
        self,
        api_key: str,
        model: str,
        *,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
        serialize_per_user: Optional[bool] = None,
        history: Optional[HistoryStore] = None,
        http_client: Optional[httpx.AsyncClient] = None,
        settings: Optional[Settings] = None,
    ) -> None:
        super().__init__()
        if not api_key:
            raise ConfigError("API key is required.")
        if not model:
            raise ConfigError("Model is required.")
        s = settings or get_settings()
        self._model = model
        self._serialize = s.serialize_per_user if serialize_per_user is None else serialize_per_user
        self._histories = history if history is not None else HistoryStore()
        self._http = ClashAIHTTP(
            (base_url or s.base_url).rstrip("/"),
            api_key,
            timeout=timeout if timeout is not None else s.request_timeout,
            client=http_client,
        )
        if not is_known_model(model):
            log_warning("unknown_model", model=model)

    @classmethod
    def from_settings(cls, settings: Optional[Settings] = None, **kwargs: Any) -> "Client":
        """Build a client from CLASHAI_* configuration."""
        s = settings or get_settings()
        return cls(s.api_key, s.model, settings=s, **kwargs)

    @property
    def model(self) -> str:
        return self._model

    @property
    def base_url(self) -> str:
        return self._http.base_url

    @property
    def user_histories(self) -> HistoryStore:
        return self._histories

    async def aclose(self) -> None:
        await self.wait_listeners()
        await self._http.aclose()

    async def __aenter__(self) -> "Client":
        return self

    async def __aexit__(self, *exc: Any) -> None:
        await self.aclose()

    @contextlib.asynccontextmanager
    async def _user_turn(self, user_id: str, *, serialize: bool) -> AsyncIterator[None]:
        if serialize:
            async with self._histories.lock(user_id):
                yield
        else:
            yield

    async def make_request(
        self,
        messages: Iterable[MessageLike] = (),
        user_id: Optional[str] = None,
    ) -> Result[ChatCompletion]:
        """Append messages to the user's history and ask the model.

        Without a user_id a fresh one is generated, so the call gets a new
        history of its own. On success the assistant reply is appended and
        ``request_made`` is emitted; on failure ``error`` is emitted and the
        appended input messages stay in the history.
        """
        # A generated id is never shared, so it needs no lock
        serialize = self._serialize and bool(user_id)
        if not user_id:
            user_id = str(uuid.uuid4())
        try:
            new_messages = _coerce_messages(messages)
        except (ValidationError, TypeError) as e:
            log_error("request_error", user_id=user_id, model=self._model, latency=0, error=str(e)[:200])
            self.emit(Event.ERROR, e)
            return Err(e)

        async with self._user_turn(user_id, serialize=serialize):
            history = self._histories.get_or_create(user_id)
            history.extend(new_messages)
            t0 = time.perf_counter()
            try:
                data = await self._http.chat_completions(self._model, _wire_messages(history))
                try:
                    completion = ChatCompletion.model_validate(data)
                except ValidationError as ve:
                    raise ResponseFormatError(f"malformed chat completion: {ve.error_count()} error(s)", body=data) from ve
            except _RECOVERABLE as e:
                dt_ms = int((time.perf_counter() - t0) * 1000)
                log_error("request_error", user_id=user_id, model=self._model, latency=dt_ms, error=f"{type(e).__name__}: {str(e)[:200]}")
                self.emit(Event.ERROR, e)
                return Err(e)

            history.append(Message(role="assistant", content=completion.text))
            dt_ms = int((time.perf_counter() - t0) * 1000)
            log_info(
                "request_ok",
                user_id=user_id,
                model=self._model,
                history_len=len(history),
                total_tokens=completion.usage.total_tokens,
                latency=dt_ms,
            )
            self.emit(Event.REQUEST_MADE, RequestMadeInfo(user_id=user_id, messages=list(history)))
        return Ok(completion)

    async def get_usage(self, user_id: str) -> Result[StatsResultResponse]:
        """Return request statistics for user_id."""
        try:
            data = await self._http.my_stats(user_id)
            try:
                stats = _decode_stats(data)
            except ValidationError as ve:
                raise ResponseFormatError(f"malformed stats response: {ve.error_count()} error(s)", body=data) from ve
        except _RECOVERABLE as e:
            log_error("usage_error", user_id=user_id, error=f"{type(e).__name__}: {str(e)[:200]}")
            self.emit(Event.ERROR, e)
            return Err(e)
        log_info(
            "usage_ok",
            user_id=user_id,
            requests_all_time=stats.result.requests_all_time,
            requests_this_minute=stats.result.requests_this_minute,
        )
        return Ok(stats)
