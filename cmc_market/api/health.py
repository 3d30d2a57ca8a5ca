# cmc_market/api/health.py
from __future__ import annotations

import time
from datetime import datetime, timezone
from typing import Any, Dict

from fastapi import APIRouter

from cmc_market.config.settings import get_settings

router = APIRouter(tags=["health"])

APP_STARTED_AT = time.time()


def _now_meta() -> Dict[str, Any]:
    now_ts = time.time()
    now_dt = datetime.fromtimestamp(now_ts, tz=timezone.utc)
    return {
        "now_unix": int(now_ts),
        "now_iso": now_dt.isoformat().replace("+00:00", "Z"),
        "uptime_s": int(now_ts - APP_STARTED_AT),
    }


@router.get("/health")
def health() -> Dict[str, Any]:
    s = get_settings()
    return {
        "ok": True,
        **_now_meta(),
        "upstream": {
            "base_url": s.CMC_BASE_URL,
            "version": s.CMC_API_VERSION,
            "api_key_configured": bool(s.CMC_API_KEY),
        },
    }
