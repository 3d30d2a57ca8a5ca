"""Fetch a whole ranked listing as concurrent rank windows and merge the pages."""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Dict, List, Literal, Mapping, Sequence, Union

logger = logging.getLogger("cmc_market.pagination")

Shape = Literal["map", "array"]


@dataclass(frozen=True)
class RankWindow:
    start: int
    size: int


@dataclass
class MergedResult:
    data: Union[Dict[Any, Any], List[Any]]
    metadata: Any = None
    meta_key: str = "metadata"

    def to_dict(self) -> Dict[str, Any]:
        return {"data": self.data, self.meta_key: self.metadata}


PageFetcher = Callable[[RankWindow], Awaitable[Mapping[str, Any]]]


def rank_windows(total_count: int, window_size: int) -> list[RankWindow]:
    """
    Windows starting at 1, 1+size, 1+2*size, ... while start <= total_count.
    """
    if total_count < 0:
        raise ValueError(f"total_count must be >= 0, got {total_count}")
    if window_size <= 0:
        raise ValueError(f"window_size must be > 0, got {window_size}")

    return [RankWindow(start=start, size=window_size) for start in range(1, total_count + 1, window_size)]


def _records(page_data: Any) -> list[Any]:
    if isinstance(page_data, Mapping):
        return list(page_data.values())
    if isinstance(page_data, list):
        return page_data
    return []


def merge_pages(
    pages: Sequence[Mapping[str, Any]],
    shape: Shape = "map",
    meta_key: str = "metadata",
    id_key: str = "id",
) -> MergedResult:
    """
    ``pages`` must be in window order. Map shape re-keys every record by
    ``id_key`` (a later page wins on a duplicate id); array shape
    concatenates. Metadata is the last window's.
    """
    merged: Union[Dict[Any, Any], List[Any]] = [] if shape == "array" else {}
    metadata: Any = None

    for page in pages:
        records = _records(page.get("data"))
        if meta_key in page:
            metadata = page[meta_key]

        if isinstance(merged, list):
            merged.extend(records)
        else:
            for record in records:
                merged[record[id_key]] = record

    return MergedResult(data=merged, metadata=metadata, meta_key=meta_key)


async def fetch_all(
    total_count: int,
    window_size: int,
    page_fetcher: PageFetcher,
    *,
    shape: Shape = "map",
    meta_key: str = "metadata",
) -> MergedResult:
    windows = rank_windows(total_count, window_size)
    logger.info("fetch all | total=%s | windows=%s | shape=%s", total_count, len(windows), shape)

    # gather keeps window order regardless of completion order; first failure aborts
    pages = await asyncio.gather(*(page_fetcher(w) for w in windows))

    return merge_pages(pages, shape=shape, meta_key=meta_key)
