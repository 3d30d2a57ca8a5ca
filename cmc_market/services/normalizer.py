"""Turn per-endpoint option values into canonical query parameters."""

from __future__ import annotations

from typing import Any, NamedTuple, Optional, Sequence, Union

from cmc_market.services.errors import ConflictingSelectorError, MissingSelectorError


OptionValue = Union[str, int, Sequence[Union[str, int]], None]


class IdentifierSelector(NamedTuple):
    id: Optional[Union[str, int]]
    symbol: Optional[str]


def _is_empty(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, (str, list, tuple)):
        return len(value) == 0
    return False


def join_values(value: OptionValue) -> Optional[Union[str, int]]:
    """
    Lists and tuples become one comma-joined string in their original order.
    Scalars pass through unchanged; empty input becomes None.
    """
    if _is_empty(value):
        return None
    if isinstance(value, (list, tuple)):
        return ",".join(str(v).strip() for v in value)
    return value


def normalize_currency(value: OptionValue) -> Optional[str]:
    joined = join_values(value)
    if joined is None:
        return None
    return str(joined).upper()


def build_query(**params: Any) -> dict[str, Any]:
    # absent options must never be serialized as "None" or ""
    return {k: v for k, v in params.items() if v is not None and v != ""}


def select_identifier(
    id: OptionValue = None,
    symbol: OptionValue = None,
    *,
    required: bool = True,
) -> IdentifierSelector:
    """
    Exactly one of id / symbol identifies the assets of a request.
    Both given -> ConflictingSelectorError; neither given (when required)
    -> MissingSelectorError.
    """
    has_id = not _is_empty(id)
    has_symbol = not _is_empty(symbol)

    if has_id and has_symbol:
        raise ConflictingSelectorError("ID and symbol cannot be passed in at the same time.")
    if required and not (has_id or has_symbol):
        raise MissingSelectorError("Either ID or symbol is required to be passed in.")

    symbol_value = join_values(symbol)
    return IdentifierSelector(
        id=join_values(id),
        symbol=str(symbol_value) if symbol_value is not None else None,
    )
