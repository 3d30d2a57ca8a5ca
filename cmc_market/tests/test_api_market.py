from __future__ import annotations

import httpx
import pytest
from fastapi.testclient import TestClient

from conftest import RecordingTransport
from cmc_market.api import market as market_module
from cmc_market.clients.pro import CoinMarketCap
from cmc_market.config import settings as settings_module
from cmc_market.main import app
from cmc_market.services.errors import NotFoundError


@pytest.fixture()
def api(monkeypatch):
    monkeypatch.delenv("CMC_DEFAULT_CONVERT", raising=False)
    settings_module.reset_settings()

    state = {"handler": lambda url: {"data": {"echo": dict(url.params)}, "status": {"error_code": 0}}}
    transport = RecordingTransport(lambda url: state["handler"](url))
    client = CoinMarketCap("secret", transport=transport)

    app.dependency_overrides[market_module.get_client] = lambda: client
    try:
        yield TestClient(app), transport, state
    finally:
        app.dependency_overrides.clear()
        settings_module.reset_settings()


def test_quotes_are_proxied_with_default_convert(api):
    http, transport, _ = api
    resp = http.get("/market/quotes", params={"symbol": "BTC,ETH"})

    assert resp.status_code == 200
    assert resp.json()["data"]["echo"] == {"symbol": "BTC,ETH", "convert": "USD"}
    assert transport.urls[0].path == "/v1/cryptocurrency/quotes/latest"


def test_missing_selector_is_a_bad_request(api):
    http, transport, _ = api
    resp = http.get("/market/metadata")

    assert resp.status_code == 400
    assert resp.json()["error"]["code"] == "missing_selector"
    assert transport.calls == []


def test_incompatible_options_is_a_bad_request(api):
    http, _, _ = api
    resp = http.get("/market/tickers", params={"start": 10, "limit": 0})

    assert resp.status_code == 400
    assert resp.json()["error"]["code"] == "incompatible_options"


def test_upstream_failure_is_a_bad_gateway(api):
    http, _, state = api
    state["handler"] = lambda url: httpx.ConnectError("down")

    resp = http.get("/market/global", params={"convert": "eur"})

    assert resp.status_code == 502
    body = resp.json()
    assert body["error"]["code"] == "upstream_unavailable"
    assert body["error"]["details"]["url"].endswith("/v1/global-metrics/quotes/latest?convert=EUR")


def test_not_found_maps_to_404():
    class _MissingClient:
        async def get_quotes(self, **kwargs):
            raise NotFoundError("NOPE")

    app.dependency_overrides[market_module.get_client] = lambda: _MissingClient()
    try:
        resp = TestClient(app).get("/market/quotes", params={"symbol": "NOPE"})
    finally:
        app.dependency_overrides.clear()

    assert resp.status_code == 404
    assert resp.json()["error"]["details"] == {"symbol": "NOPE"}


def test_map_passes_listing_options(api):
    http, transport, _ = api
    resp = http.get("/market/map", params={"symbol": "BTC", "listing_status": "active", "limit": 3})

    assert resp.status_code == 200
    assert dict(transport.urls[0].params) == {"listing_status": "active", "limit": "3", "symbol": "BTC"}


def test_health_reports_upstream_configuration(monkeypatch):
    monkeypatch.setenv("CMC_API_KEY", "abc")
    settings_module.reset_settings()
    try:
        resp = TestClient(app).get("/health")
    finally:
        settings_module.reset_settings()

    assert resp.status_code == 200
    body = resp.json()
    assert body["ok"] is True
    assert body["upstream"]["api_key_configured"] is True
    assert body["uptime_s"] >= 0
