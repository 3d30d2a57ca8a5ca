from __future__ import annotations

from typing import Any, Callable

import httpx
import pytest


class FakeResponse:
    def __init__(self, payload: Any = None, error: Exception | None = None):
        self._payload = payload
        self._error = error

    def json(self) -> Any:
        if self._error is not None:
            raise self._error
        return self._payload


class RecordingTransport:
    """
    Transport stub: records every (url, config) and answers through
    ``handler(httpx.URL) -> payload``. Returning an exception raises it
    from the transport; returning a FakeResponse sends it as-is.
    """

    def __init__(self, handler: Callable[[httpx.URL], Any]):
        self.handler = handler
        self.calls: list[tuple[str, Any]] = []

    async def __call__(self, url: str, config: Any) -> Any:
        self.calls.append((url, config))
        result = self.handler(httpx.URL(url))
        if isinstance(result, Exception):
            raise result
        if isinstance(result, FakeResponse):
            return result
        return FakeResponse(result)

    @property
    def urls(self) -> list[httpx.URL]:
        return [httpx.URL(url) for url, _ in self.calls]


def ranked_records(start: int, size: int, total: int) -> list[dict[str, Any]]:
    end = min(start + size - 1, total)
    return [{"id": rank, "rank": rank, "symbol": f"C{rank}"} for rank in range(start, end + 1)]


@pytest.fixture()
def make_transport():
    return RecordingTransport
