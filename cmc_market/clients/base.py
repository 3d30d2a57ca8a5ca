from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping, Optional

from cmc_market.services.dispatcher import Dispatcher, RequestConfig, build_request_config
from cmc_market.services.errors import TransportError
from cmc_market.services.transport import HttpxTransport, Transport


DEFAULT_PAGE_SIZE = 100
DEFAULT_TIMEOUT_SECONDS = 10.0


@dataclass(frozen=True)
class ClientConfig:
    base_url: str
    version: str
    request: RequestConfig
    page_size: int = DEFAULT_PAGE_SIZE


class BaseClient:
    """
    Shared plumbing for the API facades.

    Everything captured here is fixed at construction; the facade methods
    keep no state between calls.
    """

    BASE_URL: str = ""
    DEFAULT_VERSION: str = ""

    def __init__(
        self,
        *,
        api_key: Optional[str] = None,
        base_url: Optional[str] = None,
        version: Optional[str] = None,
        transport: Optional[Transport] = None,
        headers: Optional[Mapping[str, str]] = None,
        timeout: Optional[float] = None,
        page_size: int = DEFAULT_PAGE_SIZE,
    ) -> None:
        if page_size <= 0:
            raise ValueError(f"page_size must be positive, got {page_size}")

        self._owns_transport = transport is None
        self._transport = transport or HttpxTransport(timeout=timeout or DEFAULT_TIMEOUT_SECONDS)

        self.config = ClientConfig(
            base_url=(base_url or self.BASE_URL).rstrip("/"),
            version=(version or self.DEFAULT_VERSION).strip("/"),
            request=build_request_config(api_key=api_key, headers=headers, timeout=timeout),
            page_size=page_size,
        )
        self._dispatcher = Dispatcher(
            base_url=self.config.base_url,
            version=self.config.version,
            config=self.config.request,
            transport=self._transport,
        )

    async def _get(
        self,
        resource: str,
        query: Mapping[str, Any] | None = None,
        *,
        segment: str | int | None = None,
    ) -> Any:
        return await self._dispatcher.dispatch(resource, query, segment=segment)

    @staticmethod
    def _active_cryptocurrencies(snapshot: Any) -> int:
        try:
            return int(snapshot["data"]["active_cryptocurrencies"])
        except (KeyError, TypeError, ValueError) as exc:
            raise TransportError("Global snapshot has no active_cryptocurrencies count") from exc

    async def aclose(self) -> None:
        if self._owns_transport and isinstance(self._transport, HttpxTransport):
            await self._transport.aclose()

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc, tb):
        await self.aclose()
        return False
