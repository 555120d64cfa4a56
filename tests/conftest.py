import json

import httpx
import pytest

from clashai import Client
from clashai.config import Settings, get_settings

BASE_URL = "http://clashai.test"


def completion_body(content, *, model="gpt-4o", n=1):
    return {
        "id": f"chatcmpl-{n}",
        "object": "chat.completion",
        "created": 1725000000 + n,
        "model": model,
        "system_fingerprint": None,
        "choices": [
            {
                "index": 0,
                "message": {"role": "assistant", "content": content},
                "logprobs": None,
                "finish_reason": "stop",
            }
        ],
        "usage": {"prompt_tokens": 10, "completion_tokens": 5, "total_tokens": 15},
    }


class FakeClashAI:
    """Records requests and answers them like the remote service."""

    def __init__(self):
        self.requests = []
        self.fail_next = None  # httpx.Response or exception to use once
        self.stats_body = None

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.fail_next is not None:
            failure, self.fail_next = self.fail_next, None
            if isinstance(failure, Exception):
                raise failure
            return failure
        if request.url.path == "/v1/chat/completions":
            body = json.loads(request.content)
            n = len(self.requests)
            return httpx.Response(200, json=completion_body(f"reply {n}", model=body["model"], n=n))
        if request.url.path.startswith("/my_stats/"):
            return httpx.Response(200, json=self.stats_body)
        return httpx.Response(404, json={"detail": "not found"})

    def sent_messages(self, i=-1):
        return json.loads(self.requests[i].content)["messages"]


@pytest.fixture(autouse=True)
def _clean_settings(monkeypatch):
    for key in ("CLASHAI_API_KEY", "CLASHAI_MODEL", "CLASHAI_BASE_URL", "CLASHAI_SERIALIZE_PER_USER"):
        monkeypatch.delenv(key, raising=False)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def settings():
    return Settings(_env_file=None, base_url=BASE_URL)


@pytest.fixture
def fake():
    return FakeClashAI()


@pytest.fixture
def http_client(fake):
    return httpx.AsyncClient(transport=httpx.MockTransport(fake.handler))


@pytest.fixture
def client(settings, http_client):
    return Client("test-key", "gpt-4o", settings=settings, http_client=http_client)
