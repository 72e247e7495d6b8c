"""Typed comparators keyed by `SortKey`.

Each entity profile maps its supported sort keys to a `SortField`: a value
extractor plus the kind of value it yields. Comparison is always computed
ascending first and the direction is applied as one final sign flip, with
missing values kept last in both directions.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
from typing import Any

from core.models import SortDirection, SortKey
from core.services.collation import compare_text


class ValueKind(Enum):
    TEXT = "text"
    NUMBER = "number"
    BOOLEAN = "boolean"
    DATETIME = "datetime"


@dataclass(frozen=True)
class SortField:
    """How to read and compare one sortable value of a record."""

    extract: Callable[[Any], Any]
    kind: ValueKind


SortTable = Mapping[SortKey, SortField]


def _ascending(a_val: Any, b_val: Any, kind: ValueKind) -> int:
    if kind is ValueKind.TEXT:
        return compare_text(str(a_val), str(b_val))
    if kind is ValueKind.BOOLEAN:
        if bool(a_val) == bool(b_val):
            return 0
        return -1 if a_val else 1
    if kind is ValueKind.DATETIME:
        a_val, b_val = as_utc(a_val), as_utc(b_val)
    return (a_val > b_val) - (a_val < b_val)


def as_utc(value: datetime) -> datetime:
    """Naive datetimes are read as UTC so they order against aware ones."""
    return value if value.tzinfo is not None else value.replace(tzinfo=timezone.utc)


def compare_values(a_val: Any, b_val: Any, kind: ValueKind, direction: SortDirection) -> int:
    """Compare two extracted values; `None` sorts after any defined value."""
    if a_val is None and b_val is None:
        return 0
    if a_val is None:
        return 1
    if b_val is None:
        return -1
    result = _ascending(a_val, b_val, kind)
    return -result if direction is SortDirection.DESC else result


def compare(
    a: Any,
    b: Any,
    sort_key: SortKey,
    direction: SortDirection,
    table: SortTable,
) -> int:
    """Three-way comparison of two records for `sort_key`.

    Raises:
        KeyError: if `sort_key` is not in `table`.
    """
    sort_field = table[sort_key]
    return compare_values(sort_field.extract(a), sort_field.extract(b), sort_field.kind, direction)


# Extractors shared by the entity profiles.


def attr(name: str) -> Callable[[Any], Any]:
    def _read(record: Any) -> Any:
        return getattr(record, name, None)

    return _read


def count_of(name: str) -> Callable[[Any], int]:
    """Length of a list attribute; missing lists count as zero."""

    def _count(record: Any) -> int:
        return len(getattr(record, name, None) or ())

    return _count


def effective_start(record: Any) -> int | None:
    """First targeted day: `min_day`, else `day`, else missing."""
    min_day = getattr(record, "min_day", None)
    if min_day is not None:
        return min_day
    return getattr(record, "day", None)


def full_name(record: Any) -> str | None:
    name = f"{getattr(record, 'name', '') or ''} {getattr(record, 'lastname', '') or ''}".strip()
    return name or None


def owner_name(record: Any) -> str | None:
    owner = getattr(record, "user", None)
    if owner is None:
        return None
    return owner.name or None
