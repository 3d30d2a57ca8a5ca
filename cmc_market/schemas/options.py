"""Pydantic models for per-endpoint request options."""

from __future__ import annotations

from typing import Any, Literal, Optional, Type, TypeVar

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from cmc_market.services.errors import InvalidOptionsError
from cmc_market.services.normalizer import join_values, normalize_currency


class Limit(BaseModel):
    """
    Result-count option.

    ``Limit(count=n)`` asks for at most n rows; ``LIMIT_ALL`` (no count)
    asks for the whole listing. The wire-level ``limit=0`` sentinel is only
    accepted at the parsing boundary and never travels further as a number.
    """

    model_config = ConfigDict(frozen=True)

    count: Optional[int] = Field(default=None, gt=0)

    @property
    def is_all(self) -> bool:
        return self.count is None

    @classmethod
    def coerce(cls, value: Any) -> Optional["Limit"]:
        if value is None or value == "":
            return None
        if isinstance(value, Limit):
            return value
        if isinstance(value, bool):
            raise ValueError("limit must be a number")

        count = int(str(value).strip())
        if count < 0:
            raise ValueError(f"limit must be >= 0, got {count}")
        if count == 0:
            return LIMIT_ALL
        return cls(count=count)


LIMIT_ALL = Limit()


class _Options(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)

    @field_validator("limit", mode="before", check_fields=False)
    @classmethod
    def coerce_limit(cls, value: Any) -> Optional[Limit]:
        return Limit.coerce(value)

    @field_validator("convert", "currency", mode="before", check_fields=False)
    @classmethod
    def coerce_currency(cls, value: Any) -> Optional[str]:
        return normalize_currency(value)

    @field_validator(
        "sort",
        "structure",
        "listing_status",
        "sort_dir",
        "cryptocurrency_type",
        mode="before",
        check_fields=False,
    )
    @classmethod
    def blank_to_none(cls, value: Any) -> Any:
        if isinstance(value, str) and not value.strip():
            return None
        return value

    @property
    def limit_count(self) -> Optional[int]:
        limit = getattr(self, "limit", None)
        if limit is None or limit.is_all:
            return None
        return limit.count

    @property
    def wants_all(self) -> bool:
        limit = getattr(self, "limit", None)
        return limit is not None and limit.is_all


class TickerOptions(_Options):
    """Options of the legacy /ticker endpoint."""

    start: Optional[int] = Field(default=None, ge=0)
    limit: Optional[Limit] = None
    sort: Optional[str] = None
    structure: Optional[Literal["dictionary", "array"]] = None
    convert: Optional[str] = None
    currency: Optional[str] = None
    id: Optional[int] = Field(default=None, gt=0)


def _rank_start(value: Optional[int]) -> Optional[int]:
    # pro ranks start at 1; start=0 means "from the top"
    return value or None


class IdMapOptions(_Options):
    listing_status: Optional[str] = None
    start: Optional[int] = Field(default=None, ge=0)
    limit: Optional[Limit] = None
    symbol: Optional[str] = None
    sort: Optional[str] = None

    @field_validator("start")
    @classmethod
    def start_from_top(cls, value: Optional[int]) -> Optional[int]:
        return _rank_start(value)

    @field_validator("symbol", mode="before")
    @classmethod
    def join_symbol(cls, value: Any) -> Optional[str]:
        joined = join_values(value)
        return str(joined) if joined is not None else None


class ListingOptions(_Options):
    """Options of /cryptocurrency/listings/latest."""

    start: Optional[int] = Field(default=None, ge=0)
    limit: Optional[Limit] = None
    convert: Optional[str] = None
    sort: Optional[str] = None
    sort_dir: Optional[Literal["asc", "desc"]] = None
    cryptocurrency_type: Optional[Literal["all", "coins", "tokens"]] = None

    @field_validator("start")
    @classmethod
    def start_from_top(cls, value: Optional[int]) -> Optional[int]:
        return _rank_start(value)


class SelectorOptions(_Options):
    # id / symbol keep their raw shape; select_identifier() normalizes them
    id: Any = None
    symbol: Any = None
    convert: Optional[str] = None


class GlobalOptions(_Options):
    convert: Optional[str] = None


OptionsT = TypeVar("OptionsT", bound=_Options)


def parse_options(model: Type[OptionsT], **options: Any) -> OptionsT:
    try:
        return model(**options)
    except ValidationError as exc:
        raise InvalidOptionsError(str(exc)) from exc
