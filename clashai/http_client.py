"""HTTP transport for the ClashAI endpoints.

- POST {base}/v1/chat/completions with a bearer token
- GET  {base}/my_stats/{user_id}

No retries: a single failed attempt is final and the caller decides how to
report it.
"""
from __future__ import annotations

from typing import Any, Dict, List, Optional
from urllib.parse import quote

import httpx


class ClashAIHTTP:
    def __init__(
        self,
        base_url: str,
        api_key: str,
        *,
        timeout: float = 60.0,
        client: Optional[httpx.AsyncClient] = None,
    ) -> None:
        self._base = base_url.rstrip("/")
        self._api_key = api_key
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(timeout=timeout)

    @property
    def base_url(self) -> str:
        return self._base

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    async def chat_completions(self, model: str, messages: List[Dict[str, Any]]) -> Any:
        url = f"{self._base}/v1/chat/completions"
        payload: Dict[str, Any] = {
            "model": model,
            "messages": messages,
        }
        headers = {
            "Authorization": f"Bearer {self._api_key}",
            "Content-Type": "application/json",
        }
        resp = await self._client.post(url, json=payload, headers=headers)
        resp.raise_for_status()
        return resp.json()

    async def my_stats(self, user_id: str) -> Any:
        url = f"{self._base}/my_stats/{quote(str(user_id), safe='')}"
        resp = await self._client.get(url)
        resp.raise_for_status()
        return resp.json()
