"""Client for the authenticated pro API."""

from __future__ import annotations

from typing import Any, Optional

from cmc_market.clients.base import BaseClient
from cmc_market.config.settings import DEFAULT_BASE_URL, Settings, get_settings
from cmc_market.schemas.options import (
    GlobalOptions,
    IdMapOptions,
    ListingOptions,
    SelectorOptions,
    parse_options,
)
from cmc_market.services.normalizer import OptionValue, build_query, select_identifier
from cmc_market.services.pagination import RankWindow, fetch_all
from cmc_market.services.validator import validate_id_map_options, validate_listing_options


class CoinMarketCap(BaseClient):
    """
    Async client for https://pro-api.coinmarketcap.com.

    Every method returns the parsed JSON body as-is, apart from
    ``get_tickers(limit=0)`` which merges the pages of the whole listing.

    Example::

        async with CoinMarketCap("api key") as client:
            await client.get_quotes(symbol=["BTC", "ETH"], convert="EUR")
    """

    BASE_URL = DEFAULT_BASE_URL
    DEFAULT_VERSION = "v1"

    def __init__(self, api_key: Optional[str] = None, **kwargs: Any) -> None:
        super().__init__(api_key=api_key, **kwargs)

    @classmethod
    def from_settings(cls, settings: Settings | None = None, **kwargs: Any) -> "CoinMarketCap":
        s = settings or get_settings()
        kwargs.setdefault("base_url", s.CMC_BASE_URL)
        kwargs.setdefault("version", s.CMC_API_VERSION)
        kwargs.setdefault("timeout", s.CMC_TIMEOUT_SECONDS)
        kwargs.setdefault("page_size", s.CMC_PAGE_SIZE)
        return cls(s.CMC_API_KEY, **kwargs)

    async def get_id_map(
        self,
        *,
        listing_status: Optional[str] = None,
        start: Optional[int] = None,
        limit: Any = None,
        symbol: OptionValue = None,
        sort: Optional[str] = None,
    ) -> Any:
        """
        Paginated map of cryptocurrencies to CoinMarketCap ids.
        ``limit=0`` leaves the limit out so the API returns the full map.
        """
        options = parse_options(
            IdMapOptions,
            listing_status=listing_status,
            start=start,
            limit=limit,
            symbol=symbol,
            sort=sort,
        )
        validate_id_map_options(options)
        query = build_query(
            listing_status=options.listing_status,
            start=options.start,
            limit=options.limit_count,
            symbol=options.symbol,
            sort=options.sort,
        )
        return await self._get("cryptocurrency/map", query)

    async def get_metadata(self, *, id: OptionValue = None, symbol: OptionValue = None) -> Any:
        """Static metadata (logo, urls, description) for one or more cryptocurrencies."""
        options = parse_options(SelectorOptions, id=id, symbol=symbol)
        selector = select_identifier(options.id, options.symbol)
        return await self._get("cryptocurrency/info", build_query(id=selector.id, symbol=selector.symbol))

    async def get_tickers(
        self,
        *,
        start: Optional[int] = None,
        limit: Any = None,
        convert: OptionValue = None,
        sort: Optional[str] = None,
        sort_dir: Optional[str] = None,
        cryptocurrency_type: Optional[str] = None,
    ) -> Any:
        options = parse_options(
            ListingOptions,
            start=start,
            limit=limit,
            convert=convert,
            sort=sort,
            sort_dir=sort_dir,
            cryptocurrency_type=cryptocurrency_type,
        )
        validate_listing_options(options)

        def query_for(start_rank: Optional[int], count: Optional[int]) -> dict[str, Any]:
            return build_query(
                start=start_rank,
                limit=count,
                convert=options.convert,
                sort=options.sort,
                sort_dir=options.sort_dir,
                cryptocurrency_type=options.cryptocurrency_type,
            )

        if options.wants_all:
            total = await self.get_total_active_cryptocurrencies()

            async def fetch_page(window: RankWindow) -> Any:
                return await self._get("cryptocurrency/listings/latest", query_for(window.start, window.size))

            merged = await fetch_all(
                total,
                self.config.page_size,
                fetch_page,
                shape="array",
                meta_key="status",
            )
            return merged.to_dict()

        return await self._get(
            "cryptocurrency/listings/latest",
            query_for(options.start, options.limit_count),
        )

    async def get_quotes(
        self,
        *,
        id: OptionValue = None,
        symbol: OptionValue = None,
        convert: OptionValue = None,
    ) -> Any:
        options = parse_options(SelectorOptions, id=id, symbol=symbol, convert=convert)
        selector = select_identifier(options.id, options.symbol)
        query = build_query(id=selector.id, symbol=selector.symbol, convert=options.convert)
        return await self._get("cryptocurrency/quotes/latest", query)

    async def get_global(self, convert: OptionValue = None) -> Any:
        options = parse_options(GlobalOptions, convert=convert)
        return await self._get("global-metrics/quotes/latest", build_query(convert=options.convert))

    async def get_total_active_cryptocurrencies(self) -> int:
        return self._active_cryptocurrencies(await self.get_global())
