# cmc_market/main.py
from __future__ import annotations

from fastapi import FastAPI

from cmc_market.api.health import router as health_router
from cmc_market.api.market import close_client, router as market_router
from cmc_market.config.settings import get_settings
from cmc_market.utils.logging_setup import configure_logging


app = FastAPI(title="CoinMarketCap Market API")

# Routers
app.include_router(health_router)
app.include_router(market_router)


@app.on_event("startup")
async def on_startup() -> None:
    configure_logging(get_settings().LOG_LEVEL)


@app.on_event("shutdown")
async def on_shutdown() -> None:
    await close_client()
