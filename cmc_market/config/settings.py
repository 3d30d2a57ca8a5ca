# cmc_market/config/settings.py
from __future__ import annotations

import os
from dataclasses import dataclass
from typing import List, Optional


DEFAULT_BASE_URL = "https://pro-api.coinmarketcap.com"


def parse_csv(value: str | None, default: List[str]) -> List[str]:
    if not value:
        return default
    items = [x.strip() for x in value.split(",")]
    return [x for x in items if x]


def parse_int(value: str | None, default: int) -> int:
    if value is None or value.strip() == "":
        return default
    return int(value)


def parse_float(value: str | None, default: float) -> float:
    if value is None or value.strip() == "":
        return default
    return float(value)


def parse_optional(value: str | None) -> Optional[str]:
    if value is None:
        return None
    value = value.strip()
    return value or None


@dataclass(frozen=True)
class Settings:
    CMC_API_KEY: Optional[str]
    CMC_BASE_URL: str
    CMC_API_VERSION: str
    CMC_TIMEOUT_SECONDS: float
    CMC_PAGE_SIZE: int
    CMC_DEFAULT_CONVERT: List[str]
    LOG_LEVEL: str

    @staticmethod
    def from_env() -> "Settings":
        page_size = parse_int(os.getenv("CMC_PAGE_SIZE"), 100)
        if page_size <= 0:
            raise ValueError(f"CMC_PAGE_SIZE must be positive, got {page_size}")

        return Settings(
            CMC_API_KEY=parse_optional(os.getenv("CMC_API_KEY")),
            CMC_BASE_URL=os.getenv("CMC_BASE_URL", DEFAULT_BASE_URL).rstrip("/"),
            CMC_API_VERSION=os.getenv("CMC_API_VERSION", "v1").strip("/"),
            CMC_TIMEOUT_SECONDS=parse_float(os.getenv("CMC_TIMEOUT_SECONDS"), 10.0),
            CMC_PAGE_SIZE=page_size,
            CMC_DEFAULT_CONVERT=[c.upper() for c in parse_csv(os.getenv("CMC_DEFAULT_CONVERT"), ["USD"])],
            LOG_LEVEL=os.getenv("LOG_LEVEL", "INFO").upper(),
        )


_settings: Settings | None = None


def get_settings() -> Settings:
    global _settings
    if _settings is None:
        _settings = Settings.from_env()
    return _settings


def reset_settings() -> None:
    """Drop the cached settings so the next get_settings() re-reads the env."""
    global _settings
    _settings = None
