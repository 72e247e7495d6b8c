"""Filter predicates for list pages.

A record is visible when every predicate accepts it. Each filter fails open
when its selected value is the `ALL` sentinel, so the order in which
predicates run never changes the result.
"""

from __future__ import annotations

from collections.abc import Callable, Sequence
from dataclasses import dataclass
from typing import Any, Protocol

from core.models import ALL, QueryState

SIX_TO_NINE_START = 180
SIX_TO_NINE_END = 270


class Filter(Protocol):
    """A named filter matching a record against the selected value."""

    name: str

    def matches(self, record: Any, value: str) -> bool:
        raise NotImplementedError


@dataclass(frozen=True)
class EqualityFilter:
    """Selected value must equal the extracted field.

    With `strip`, surrounding whitespace of the field is ignored, matching
    how derived dropdown options are normalized.
    """

    name: str
    extract: Callable[[Any], Any]
    strip: bool = False

    def matches(self, record: Any, value: str) -> bool:
        field_value = self.extract(record)
        if self.strip and isinstance(field_value, str):
            field_value = field_value.strip()
        return field_value == value


@dataclass(frozen=True)
class BooleanFilter:
    """Yes/no filter over a flag that may be unset.

    An unset flag reads as `default`; with no default it matches neither
    selection.
    """

    name: str
    extract: Callable[[Any], bool | None]
    default: bool | None = None
    true_value: str = "active"
    false_value: str = "inactive"

    def matches(self, record: Any, value: str) -> bool:
        flag = self.extract(record)
        if flag is None:
            flag = self.default
        if flag is None:
            return False
        if value == self.true_value:
            return flag is True
        if value == self.false_value:
            return flag is False
        return False


@dataclass(frozen=True)
class MembershipFilter:
    """Trimmed, case-insensitive equality against any one of several text fields."""

    name: str
    extractors: tuple[Callable[[Any], str | None], ...]

    def matches(self, record: Any, value: str) -> bool:
        term = value.strip().lower()
        return any((extract(record) or "").strip().lower() == term for extract in self.extractors)


@dataclass(frozen=True)
class TabSpec:
    """One tab of a mutually exclusive partition."""

    id: str
    label: str
    predicate: Callable[[Any], bool]


def matches_search(
    record: Any, term: str, fields: Sequence[Callable[[Any], str | None]]
) -> bool:
    """Literal case-insensitive substring match on any configured field."""
    if not term:
        return True
    needle = term.lower()
    return any(needle in (extract(record) or "").lower() for extract in fields)


def _as_number(value: Any) -> float | None:
    if value is None or isinstance(value, bool):
        return None
    try:
        return float(value)
    except (TypeError, ValueError):
        return None


def in_day_window(record: Any, start: int = SIX_TO_NINE_START, end: int = SIX_TO_NINE_END) -> bool:
    """True if the record's single day, or its whole day range, lies in [start, end]."""
    day = _as_number(getattr(record, "day", None))
    if day is not None and start <= day <= end:
        return True
    min_day = _as_number(getattr(record, "min_day", None))
    max_day = _as_number(getattr(record, "max_day", None))
    return min_day is not None and max_day is not None and min_day >= start and max_day <= end


def outside_day_window(record: Any) -> bool:
    return not in_day_window(record)


def matches(
    record: Any,
    query: QueryState,
    search_fields: Sequence[Callable[[Any], str | None]],
    filters: Sequence[Filter],
    tabs: Sequence[TabSpec] = (),
) -> bool:
    """AND-composition of search, every filter and the active tab."""
    if not matches_search(record, query.search_term, search_fields):
        return False
    for flt in filters:
        value = query.filter_value(flt.name)
        if value != ALL and not flt.matches(record, value):
            return False
    if query.active_tab is not None:
        for tab in tabs:
            if tab.id == query.active_tab:
                return tab.predicate(record)
    return True
