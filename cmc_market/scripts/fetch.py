# cmc_market/scripts/fetch.py
from __future__ import annotations

import argparse
import asyncio
import json
from typing import Any, Optional, Sequence

from cmc_market.clients.pro import CoinMarketCap
from cmc_market.config.settings import get_settings
from cmc_market.services.errors import CoinMarketCapError
from cmc_market.utils.logging_setup import configure_logging


OPERATIONS = ("map", "metadata", "tickers", "quotes", "global")


async def run_operation(client: CoinMarketCap, args: argparse.Namespace) -> Any:
    if args.operation == "map":
        return await client.get_id_map(
            listing_status=args.listing_status,
            start=args.start,
            limit=args.limit,
            symbol=args.symbol,
            sort=args.sort,
        )
    if args.operation == "metadata":
        return await client.get_metadata(id=args.id, symbol=args.symbol)
    if args.operation == "tickers":
        return await client.get_tickers(
            start=args.start,
            limit=args.limit,
            convert=args.convert,
            sort=args.sort,
        )
    if args.operation == "quotes":
        return await client.get_quotes(id=args.id, symbol=args.symbol, convert=args.convert)
    return await client.get_global(convert=args.convert)


async def _execute(args: argparse.Namespace) -> Any:
    async with CoinMarketCap.from_settings() as client:
        return await run_operation(client, args)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Fetch CoinMarketCap market data as JSON")
    parser.add_argument("operation", choices=OPERATIONS)
    parser.add_argument("--symbol", nargs="+", default=None)
    parser.add_argument("--id", nargs="+", default=None)
    parser.add_argument("--convert", nargs="+", default=None)
    parser.add_argument("--start", type=int, default=None)
    parser.add_argument("--limit", type=int, default=None, help="0 fetches the whole listing (tickers)")
    parser.add_argument("--sort", default=None)
    parser.add_argument("--listing-status", dest="listing_status", default=None)
    return parser


def main(argv: Optional[Sequence[str]] = None) -> None:
    args = build_parser().parse_args(argv)
    configure_logging(get_settings().LOG_LEVEL)

    try:
        result = asyncio.run(_execute(args))
    except CoinMarketCapError as exc:
        print(json.dumps({"error": {"code": type(exc).__name__, "message": str(exc)}}))
        raise SystemExit(1)

    print(json.dumps(result, indent=2, sort_keys=True))


if __name__ == "__main__":
    main()
