"""Error hierarchy for the CoinMarketCap client."""
from __future__ import annotations


class CoinMarketCapError(Exception):
    """Base error for everything raised by the client."""


class InvalidRequestError(CoinMarketCapError):
    """Raised before dispatch when the caller combined options incorrectly."""


class ConflictingSelectorError(InvalidRequestError):
    """Raised when both id and symbol (or currency and id) are given."""


class MissingSelectorError(InvalidRequestError):
    """Raised when an endpoint needs an id or symbol and neither was given."""


class IncompatibleOptionsError(InvalidRequestError):
    """Raised when listing-window options are mixed with single-asset options."""


class InvalidOptionsError(InvalidRequestError):
    """Raised when an option value has the wrong type or range."""


class NotFoundError(CoinMarketCapError):
    """Raised when a symbol cannot be resolved to a CoinMarketCap id."""

    def __init__(self, symbol: str):
        super().__init__(f"Symbol '{symbol}' was not found in the listings")
        self.symbol = symbol


class TransportError(CoinMarketCapError):
    """Raised when the transport fails or the body is not JSON."""

    def __init__(self, message: str, url: str | None = None):
        super().__init__(message)
        self.url = url
