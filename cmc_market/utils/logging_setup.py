from __future__ import annotations

import logging


LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s | %(message)s"


def configure_logging(level: str = "INFO") -> None:
    """
    Attach one stream handler to the cmc_market logger tree.
    Calling it again only updates the level.
    """
    root = logging.getLogger("cmc_market")
    root.setLevel(level.upper())

    if any(getattr(h, "_cmc_market", False) for h in root.handlers):
        return

    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    handler._cmc_market = True  # type: ignore[attr-defined]
    root.addHandler(handler)
