from __future__ import annotations

import dataclasses

import httpx
import pytest

from conftest import FakeResponse, RecordingTransport
from cmc_market.services.dispatcher import (
    API_KEY_HEADER,
    Dispatcher,
    build_request_config,
    build_url,
)
from cmc_market.services.errors import TransportError
from cmc_market.services.transport import HttpxTransport


BASE = "https://api.example.com"


def test_build_url_without_query_has_no_question_mark():
    assert build_url(BASE, "v1", "global-metrics/quotes/latest") == (
        "https://api.example.com/v1/global-metrics/quotes/latest"
    )
    assert build_url(BASE, "v1", "global", query={}) == "https://api.example.com/v1/global"


def test_build_url_appends_identifier_segment():
    assert build_url(BASE, "v2", "ticker/", segment=1) == "https://api.example.com/v2/ticker/1/"
    assert build_url(BASE, "v2", "ticker/") == "https://api.example.com/v2/ticker/"


def test_build_url_encodes_comma_joined_values():
    url = httpx.URL(build_url(BASE + "/", "/v1/", "cryptocurrency/quotes/latest", query={"convert": "USD,EUR", "id": 1}))
    assert url.path == "/v1/cryptocurrency/quotes/latest"
    assert url.params["convert"] == "USD,EUR"
    assert url.params["id"] == "1"


def test_request_config_defaults_and_api_key():
    config = build_request_config()
    assert config.method == "GET"
    assert config.headers["Accept"] == "application/json"
    assert config.headers["Accept-Charset"] == "utf-8"
    assert API_KEY_HEADER not in config.headers

    keyed = build_request_config(api_key="secret", headers={"Accept-Charset": "latin-1"})
    assert keyed.headers[API_KEY_HEADER] == "secret"
    assert keyed.headers["Accept-Charset"] == "latin-1"


def test_request_config_is_read_only():
    config = build_request_config(api_key="secret")
    with pytest.raises(TypeError):
        config.headers["Accept"] = "text/html"  # type: ignore[index]
    with pytest.raises(dataclasses.FrozenInstanceError):
        config.method = "POST"  # type: ignore[misc]


@pytest.mark.asyncio
async def test_dispatch_returns_body_verbatim():
    payload = {"data": {"active_cryptocurrencies": 3}, "status": {"error_code": 0}}
    transport = RecordingTransport(lambda url: payload)
    config = build_request_config(api_key="k")
    dispatcher = Dispatcher(BASE, "v1", config, transport)

    result = await dispatcher.dispatch("global-metrics/quotes/latest", {"convert": "EUR"})

    assert result == payload
    url, sent_config = transport.calls[0]
    assert url == "https://api.example.com/v1/global-metrics/quotes/latest?convert=EUR"
    assert sent_config is config


@pytest.mark.asyncio
async def test_dispatch_awaits_async_json_accessor():
    class AsyncJsonResponse:
        async def json(self):
            return {"ok": True}

    async def transport(url, config):
        return AsyncJsonResponse()

    dispatcher = Dispatcher(BASE, "v1", build_request_config(), transport)
    assert await dispatcher.dispatch("global") == {"ok": True}


@pytest.mark.asyncio
async def test_dispatch_wraps_network_failure():
    def handler(url):
        return httpx.ConnectError("connection refused")

    dispatcher = Dispatcher(BASE, "v1", build_request_config(), RecordingTransport(handler))

    with pytest.raises(TransportError) as excinfo:
        await dispatcher.dispatch("global")
    assert excinfo.value.url == "https://api.example.com/v1/global"


@pytest.mark.asyncio
async def test_dispatch_wraps_non_json_body():
    transport = RecordingTransport(lambda url: FakeResponse(error=ValueError("Expecting value")))
    dispatcher = Dispatcher(BASE, "v1", build_request_config(), transport)

    with pytest.raises(TransportError):
        await dispatcher.dispatch("listings")


@pytest.mark.asyncio
async def test_httpx_transport_sends_configured_headers():
    seen = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json={"data": []})

    client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    transport = HttpxTransport(client=client)
    dispatcher = Dispatcher(BASE, "v1", build_request_config(api_key="secret"), transport)

    body = await dispatcher.dispatch("cryptocurrency/map", {"symbol": "BTC,ETH"})
    await transport.aclose()

    assert body == {"data": []}
    request = seen[0]
    assert request.method == "GET"
    assert request.headers[API_KEY_HEADER] == "secret"
    assert request.headers["Accept"] == "application/json"
    assert request.url.params["symbol"] == "BTC,ETH"


@pytest.mark.asyncio
async def test_httpx_transport_maps_http_errors():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("down", request=request)

    client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    dispatcher = Dispatcher(BASE, "v1", build_request_config(), HttpxTransport(client=client))

    with pytest.raises(TransportError):
        await dispatcher.dispatch("global")
    await client.aclose()
