"""Build request URLs and funnel every call through one transport."""

from __future__ import annotations

import asyncio
import inspect
import logging
import time
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Mapping, Optional
from urllib.parse import quote

import httpx

from cmc_market.services.errors import TransportError
from cmc_market.services.transport import Transport

logger = logging.getLogger("cmc_market.dispatcher")

API_KEY_HEADER = "X-CMC_PRO_API_KEY"

DEFAULT_HEADERS: Mapping[str, str] = MappingProxyType(
    {
        "Accept": "application/json",
        "Accept-Charset": "utf-8",
    }
)


@dataclass(frozen=True)
class RequestConfig:
    """Read-only per-client request configuration handed to the transport."""

    headers: Mapping[str, str] = field(default_factory=lambda: DEFAULT_HEADERS)
    timeout: Optional[float] = None
    method: str = "GET"


def build_request_config(
    api_key: str | None = None,
    headers: Mapping[str, str] | None = None,
    timeout: float | None = None,
) -> RequestConfig:
    merged = dict(DEFAULT_HEADERS)
    if api_key:
        merged[API_KEY_HEADER] = api_key
    if headers:
        merged.update(headers)
    return RequestConfig(headers=MappingProxyType(merged), timeout=timeout)


def build_url(
    base_url: str,
    version: str,
    resource: str,
    segment: str | int | None = None,
    query: Mapping[str, Any] | None = None,
) -> str:
    """
    base + version + resource [+ segment/] [+ ?query]

    The query string is only appended when there is something to send.
    """
    url = f"{base_url.rstrip('/')}/{version.strip('/')}/{resource.lstrip('/')}"
    if segment is not None and segment != "":
        url = f"{url.rstrip('/')}/{quote(str(segment), safe='')}/"
    if query:
        url = f"{url}?{httpx.QueryParams(dict(query))}"
    return url


class Dispatcher:
    def __init__(
        self,
        base_url: str,
        version: str,
        config: RequestConfig,
        transport: Transport,
    ) -> None:
        self.base_url = base_url
        self.version = version
        self.config = config
        self._transport = transport

    def url_for(
        self,
        resource: str,
        query: Mapping[str, Any] | None = None,
        segment: str | int | None = None,
    ) -> str:
        return build_url(self.base_url, self.version, resource, segment=segment, query=query)

    async def dispatch(
        self,
        resource: str,
        query: Mapping[str, Any] | None = None,
        *,
        segment: str | int | None = None,
    ) -> Any:
        url = self.url_for(resource, query=query, segment=segment)
        t0 = time.perf_counter()

        try:
            response = await self._transport(url, self.config)
            body = response.json()
            if inspect.isawaitable(body):
                body = await body
        except TransportError:
            logger.warning("transport error | url=%s", url)
            raise
        except (httpx.HTTPError, OSError, asyncio.TimeoutError) as exc:
            logger.warning("transport error | url=%s | err=%r", url, exc)
            raise TransportError(f"Request to {url} failed: {exc}", url=url) from exc
        except ValueError as exc:
            logger.warning("non-JSON response | url=%s", url)
            raise TransportError(f"Response from {url} is not valid JSON", url=url) from exc

        logger.debug("dispatch | url=%s | ms=%d", url, int((time.perf_counter() - t0) * 1000))
        return body
