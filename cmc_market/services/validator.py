"""Option rules checked before any request is dispatched."""

from __future__ import annotations

from typing import Any, Mapping

from cmc_market.schemas.options import IdMapOptions, ListingOptions, TickerOptions
from cmc_market.services.errors import (
    ConflictingSelectorError,
    IncompatibleOptionsError,
    NotFoundError,
)


def _check_fetch_all_start(start: int | None, wants_all: bool) -> None:
    # limit=0 means "everything", which only makes sense from rank 1
    if start and wants_all:
        raise IncompatibleOptionsError("Start and limit = 0 cannot be passed in at the same time.")


def validate_ticker_options(options: TickerOptions) -> None:
    single_asset = options.currency is not None or options.id is not None
    # start=0 is the top of the listing, same as no start
    window = bool(options.start) or options.limit is not None or options.sort is not None

    if single_asset and window:
        raise IncompatibleOptionsError(
            "Start, limit, and sort options can only be used when currency or ID is not given."
        )
    if options.currency is not None and options.id is not None:
        raise ConflictingSelectorError("Currency and ID cannot be passed in at the same time.")

    _check_fetch_all_start(options.start, options.wants_all)


def validate_listing_options(options: ListingOptions) -> None:
    _check_fetch_all_start(options.start, options.wants_all)


def validate_id_map_options(options: IdMapOptions) -> None:
    _check_fetch_all_start(options.start, options.wants_all)


def resolve_symbol(listings: Mapping[str, Any], symbol: str) -> int:
    """
    Find the CoinMarketCap id of ``symbol`` in a listings payload
    (``{"data": [{"id": 1, "symbol": "BTC", ...}, ...]}``).
    """
    wanted = symbol.strip().upper()
    for listing in listings.get("data") or []:
        if str(listing.get("symbol", "")).upper() == wanted:
            return int(listing["id"])
    raise NotFoundError(symbol)
