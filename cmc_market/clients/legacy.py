"""Client for the keyless public API (listings / ticker / global)."""

from __future__ import annotations

import logging
from typing import Any, Optional

from cmc_market.clients.base import BaseClient
from cmc_market.schemas.options import GlobalOptions, TickerOptions, parse_options
from cmc_market.services.normalizer import OptionValue, build_query
from cmc_market.services.pagination import RankWindow, fetch_all
from cmc_market.services.validator import resolve_symbol, validate_ticker_options

logger = logging.getLogger("cmc_market.clients")


class LegacyCoinMarketCap(BaseClient):
    BASE_URL = "https://api.coinmarketcap.com"
    DEFAULT_VERSION = "v2"

    async def get_listings(self) -> Any:
        """All active cryptocurrency listings (id, name, symbol, slug)."""
        return await self._get("listings")

    async def get_ticker(
        self,
        *,
        start: Optional[int] = None,
        limit: Any = None,
        sort: Optional[str] = None,
        structure: Optional[str] = None,
        convert: OptionValue = None,
        currency: Optional[str] = None,
        id: Optional[int] = None,
    ) -> Any:
        """
        Ticker data for the whole listing or for one currency.

        start / limit / sort only apply when neither currency nor id is
        given, and currency and id cannot be combined. ``limit=0`` (or
        ``LIMIT_ALL``) pages through every active cryptocurrency.
        """
        options = parse_options(
            TickerOptions,
            start=start,
            limit=limit,
            sort=sort,
            structure=structure,
            convert=convert,
            currency=currency,
            id=id,
        )
        validate_ticker_options(options)

        ticker_id = options.id
        if options.currency is not None:
            listings = await self.get_listings()
            ticker_id = resolve_symbol(listings, options.currency)
            logger.debug("resolved symbol | %s -> %s", options.currency, ticker_id)

        if options.wants_all:
            total = await self.get_total_active_cryptocurrencies()

            async def fetch_page(window: RankWindow) -> Any:
                return await self._get(
                    "ticker/",
                    build_query(
                        start=window.start,
                        limit=window.size,
                        structure=options.structure,
                        convert=options.convert,
                    ),
                )

            merged = await fetch_all(
                total,
                self.config.page_size,
                fetch_page,
                shape="array" if options.structure == "array" else "map",
            )
            return merged.to_dict()

        query = build_query(
            start=options.start,
            limit=options.limit_count,
            sort=options.sort,
            structure=options.structure,
            convert=options.convert,
        )
        return await self._get("ticker/", query, segment=ticker_id)

    async def get_global(self, convert: OptionValue = None) -> Any:
        options = parse_options(GlobalOptions, convert=convert)
        return await self._get("global", build_query(convert=options.convert))

    async def get_total_active_cryptocurrencies(self) -> int:
        return self._active_cryptocurrencies(await self.get_global())
