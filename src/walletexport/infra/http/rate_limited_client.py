import asyncio
import time

import httpx

from walletexport.exceptions import TransientProviderError


class RateLimitedClient:
    """Async HTTP client enforcing a minimum interval between consecutive requests.

    One instance per provider. The wait happens before a request, so nothing is
    slept after the last page of a branch.
    """

    def __init__(self, min_interval: float = 0.2, timeout: float = 30.0, headers: dict | None = None) -> None:
        self._min_interval = max(min_interval, 0.0)
        self._last_request_time: float | None = None
        self._lock = asyncio.Lock()
        self._client = httpx.AsyncClient(timeout=timeout, headers=headers)

    async def _wait_for_slot(self) -> None:
        async with self._lock:
            now = time.monotonic()
            if self._last_request_time is not None:
                elapsed = now - self._last_request_time
                if elapsed < self._min_interval:
                    await asyncio.sleep(self._min_interval - elapsed)
            self._last_request_time = time.monotonic()

    async def get(self, url: str, params: dict | None = None, headers: dict | None = None) -> httpx.Response:
        await self._wait_for_slot()
        try:
            return await self._client.get(url, params=params, headers=headers)
        except httpx.HTTPError as exc:
            raise TransientProviderError(f"GET {url} failed: {exc}") from exc

    async def close(self) -> None:
        await self._client.aclose()

    async def __aenter__(self) -> "RateLimitedClient":
        return self

    async def __aexit__(self, *args: object) -> None:
        await self.close()
