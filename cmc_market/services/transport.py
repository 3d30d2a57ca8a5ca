"""Default HTTP transport built on httpx."""

from __future__ import annotations

from typing import Any, Awaitable, Callable, Optional

import httpx

from cmc_market.services.errors import TransportError


Transport = Callable[[str, Any], Awaitable[Any]]


class HttpxTransport:
    """
    Awaitable ``(url, config) -> httpx.Response``.

    Uses the shared ``client`` when one is given, otherwise opens a
    short-lived AsyncClient per request.
    """

    def __init__(self, client: Optional[httpx.AsyncClient] = None, timeout: float = 10.0) -> None:
        self._client = client
        self._timeout = timeout

    async def __call__(self, url: str, config: Any) -> httpx.Response:
        timeout = getattr(config, "timeout", None) or self._timeout
        try:
            if self._client is not None:
                return await self._client.request(
                    config.method, url, headers=dict(config.headers), timeout=timeout
                )
            async with httpx.AsyncClient(timeout=timeout) as client:
                return await client.request(config.method, url, headers=dict(config.headers))
        except httpx.HTTPError as exc:
            raise TransportError(f"Unable to reach CoinMarketCap: {exc}", url=url) from exc

    async def aclose(self) -> None:
        if self._client is not None:
            await self._client.aclose()
