"""Pydantic models for the ClashAI wire payloads.

Contains the chat message model, the chat-completion response, the usage
statistics response and the payload of the request-made notification.
"""

from __future__ import annotations

from typing import Any, Dict, List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field

Role = Literal["user", "system", "assistant"]

# Model names the service advertised. Informational only, never enforced.
KNOWN_MODELS = (
    "gpt-4o",
    "chatgpt-4o-latest",
    "gpt-4-turbo",
    "gpt-4o-2024-08-06",
    "gpt-4o-mini",
    "gpt-4",
    "hermes-3-llama-3.1-405b",
    "gpt-4o-2024-05-13",
    "gpt-4o-mini-2024-07-18",
    "llama-3.1-405b-instruct",
    "qwen-2-7b-instruct",
    "nous-capybara-7b",
    "phi-3-medium-128k-instruct",
    "openchat-7b",
    "llama-3.1-70b-instruct",
    "toppy-m-7b",
    "gemma-7b-it",
    "mythomist-7b",
    "phi-3-mini-128k-instruct",
    "gemma-2-9b-it",
    "llama-3-8b-instruct",
    "mixtral-8x22b-v0.1",
    "mixtral-8x22b-instruct-v0.1",
    "llama-3-70b-instruct",
    "llama-2-70b-chat-hf",
    "llama-2-13b-chat-hf",
    "llama-2-7b-chat-hf",
    "zephyr-7b-beta",
    "llama-3.1-8b-instruct",
    "mixtral-8x7b-instruct-v0.1",
)


def is_known_model(model: str) -> bool:
    return model in KNOWN_MODELS


class Message(BaseModel):
    """Represents a chat message.

    role: one of system, user, assistant. A system message sets the
        personality of the model.
    content: message text
    """

    model_config = ConfigDict(frozen=True)

    role: Role
    content: str


MessageLike = Union[Message, Dict[str, Any]]


def coerce_message(m: MessageLike) -> Message:
    """Return m as a Message; dicts are validated."""
    return m if isinstance(m, Message) else Message.model_validate(m)


class ChoiceMessage(BaseModel):
    model_config = ConfigDict(extra="allow")

    content: str


class Choice(BaseModel):
    """One possible completion."""

    model_config = ConfigDict(extra="allow")

    index: int = 0
    message: ChoiceMessage
    logprobs: Optional[Any] = None
    finish_reason: Optional[str] = None


class Usage(BaseModel):
    prompt_tokens: int = 0
    completion_tokens: int = 0
    total_tokens: int = 0


class ChatCompletion(BaseModel):
    """Response of POST /v1/chat/completions."""

    model_config = ConfigDict(extra="allow")

    id: str
    object: str = "chat.completion"
    created: int = 0
    model: str
    system_fingerprint: Optional[str] = None
    choices: List[Choice] = Field(min_length=1)
    usage: Usage = Field(default_factory=Usage)

    @property
    def text(self) -> str:
        """Content of the first choice."""
        return self.choices[0].message.content


class StatsResult(BaseModel):
    model_config = ConfigDict(extra="allow")

    message: str
    user_id: Union[str, int]
    requests_all_time: int
    requests_this_minute: int


class StatsResultResponse(BaseModel):
    """Response of GET /my_stats/{user_id}."""

    result: StatsResult


class RequestMadeInfo(BaseModel):
    """Payload of the request_made notification.

    - user_id: the id used for the request, supplied or generated
    - messages: the user's full history after the assistant reply was added
    """

    user_id: str
    messages: List[Message]
