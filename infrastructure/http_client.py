"""Shared async HTTP client for outbound lookups."""

from typing import Any

import httpx

DEFAULT_HEADERS = {
    "Accept": "application/json",
    "User-Agent": "clicklog/1.0",
}


class HttpClient:
    """Thin async wrapper around httpx.AsyncClient with a hard timeout.

    Created once in the app lifespan and shared by every request. The
    timeout covers connect, read, write and pool acquisition alike.
    """

    def __init__(self, timeout: float = 5.0) -> None:
        self.timeout = timeout
        self._client = httpx.AsyncClient(
            timeout=httpx.Timeout(timeout),
            headers=DEFAULT_HEADERS,
            follow_redirects=False,
        )

    async def get(self, url: str, **kwargs: Any) -> httpx.Response:
        return await self._client.get(url, **kwargs)

    async def aclose(self) -> None:
        await self._client.aclose()

    async def __aenter__(self) -> "HttpClient":
        return self

    async def __aexit__(self, *args: Any) -> None:
        await self.aclose()
