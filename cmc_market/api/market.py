# cmc_market/api/market.py
from __future__ import annotations

import logging
from typing import Any, Awaitable, Optional

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from cmc_market.clients.pro import CoinMarketCap
from cmc_market.config.settings import get_settings
from cmc_market.services.errors import (
    ConflictingSelectorError,
    IncompatibleOptionsError,
    InvalidOptionsError,
    InvalidRequestError,
    MissingSelectorError,
    NotFoundError,
    TransportError,
)

logger = logging.getLogger("cmc_market.api")

router = APIRouter(prefix="/market", tags=["market"])

_ERROR_CODES: dict[type, str] = {
    ConflictingSelectorError: "conflicting_selector",
    MissingSelectorError: "missing_selector",
    IncompatibleOptionsError: "incompatible_options",
    InvalidOptionsError: "invalid_options",
}

_client: CoinMarketCap | None = None


def get_client() -> CoinMarketCap:
    global _client
    if _client is None:
        _client = CoinMarketCap.from_settings()
    return _client


async def close_client() -> None:
    global _client
    if _client is not None:
        await _client.aclose()
        _client = None


def _error_response(
    *,
    code: str,
    message: str,
    status_code: int = 400,
    details: dict[str, Any] | None = None,
) -> JSONResponse:
    payload: dict[str, Any] = {"error": {"code": code, "message": message}}
    if details:
        payload["error"]["details"] = details
    return JSONResponse(status_code=status_code, content=payload)


async def _proxy(call: Awaitable[Any]) -> Any:
    try:
        return await call
    except InvalidRequestError as exc:
        code = _ERROR_CODES.get(type(exc), "invalid_request")
        return _error_response(code=code, message=str(exc), status_code=400)
    except NotFoundError as exc:
        return _error_response(
            code="not_found",
            message=str(exc),
            status_code=404,
            details={"symbol": exc.symbol},
        )
    except TransportError as exc:
        logger.warning("upstream failure | url=%s | err=%s", exc.url, exc)
        return _error_response(
            code="upstream_unavailable",
            message="Unable to reach CoinMarketCap",
            status_code=502,
            details={"url": exc.url} if exc.url else None,
        )


def _default_convert(convert: Optional[str]) -> str:
    return convert or ",".join(get_settings().CMC_DEFAULT_CONVERT)


@router.get("/map")
async def get_id_map(
    symbol: Optional[str] = None,
    listing_status: Optional[str] = None,
    start: Optional[int] = None,
    limit: Optional[int] = None,
    sort: Optional[str] = None,
    client: CoinMarketCap = Depends(get_client),
):
    """
    Example: /market/map?symbol=BTC,ETH
    """
    return await _proxy(
        client.get_id_map(
            listing_status=listing_status,
            start=start,
            limit=limit,
            symbol=symbol,
            sort=sort,
        )
    )


@router.get("/metadata")
async def get_metadata(
    id: Optional[str] = None,
    symbol: Optional[str] = None,
    client: CoinMarketCap = Depends(get_client),
):
    return await _proxy(client.get_metadata(id=id, symbol=symbol))


@router.get("/tickers")
async def get_tickers(
    start: Optional[int] = None,
    limit: Optional[int] = None,
    convert: Optional[str] = None,
    sort: Optional[str] = None,
    sort_dir: Optional[str] = None,
    cryptocurrency_type: Optional[str] = None,
    client: CoinMarketCap = Depends(get_client),
):
    """
    Latest listings. limit=0 pages through the whole listing.
    Example: /market/tickers?limit=10&convert=EUR
    """
    return await _proxy(
        client.get_tickers(
            start=start,
            limit=limit,
            convert=_default_convert(convert),
            sort=sort,
            sort_dir=sort_dir,
            cryptocurrency_type=cryptocurrency_type,
        )
    )


@router.get("/quotes")
async def get_quotes(
    id: Optional[str] = None,
    symbol: Optional[str] = None,
    convert: Optional[str] = None,
    client: CoinMarketCap = Depends(get_client),
):
    """
    Example: /market/quotes?symbol=BTC,ETH&convert=USD,EUR
    """
    return await _proxy(client.get_quotes(id=id, symbol=symbol, convert=_default_convert(convert)))


@router.get("/global")
async def get_global(
    convert: Optional[str] = None,
    client: CoinMarketCap = Depends(get_client),
):
    return await _proxy(client.get_global(convert=_default_convert(convert)))
