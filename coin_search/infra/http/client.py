from __future__ import annotations

from typing import Dict, Optional

import httpx


class HttpClient:
    def __init__(
        self,
        timeout_seconds: int,
        user_agent: str,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self.timeout_seconds = timeout_seconds
        self.user_agent = user_agent
        self.transport = transport
        self._client: Optional[httpx.AsyncClient] = None

    async def __aenter__(self) -> "HttpClient":
        self._client = httpx.AsyncClient(
            timeout=httpx.Timeout(self.timeout_seconds),
            headers={
                "User-Agent": self.user_agent,
                "Accept": "application/json",
            },
            follow_redirects=True,
            transport=self.transport,
        )
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    async def get_bytes(self, url: str, params: Optional[Dict[str, str]] = None) -> bytes:
        response = await self._request(url=url, params=params)
        return response.content

    async def _request(self, url: str, params: Optional[Dict[str, str]] = None) -> httpx.Response:
        if self._client is None:
            raise RuntimeError("HttpClient must be used as an async context manager.")
        response = await self._client.get(url, params=params)
        response.raise_for_status()
        return response
