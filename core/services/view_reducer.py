"""Derives the visible page of a collection from the operator's query state.

Filter, then stable sort, then slice. Nothing is cached here and nothing is
clamped: a page past the end yields no rows, and callers bring the page back
into range with `clamp_page` after the collection shrinks.
"""

from __future__ import annotations

from collections.abc import Sequence
import math
from typing import Any

from core.models import QueryState, VisibleRows
from core.profiles import EntityProfile
from core.services.predicates import matches
from core.services.sort_service import SortService

DEFAULT_PAGE_SIZE = 10


class ViewReducer:
    """Turns (collection, query) into `VisibleRows` for one entity profile."""

    def __init__(
        self,
        profile: EntityProfile,
        page_size: int = DEFAULT_PAGE_SIZE,
        sorter: SortService | None = None,
    ) -> None:
        if page_size < 1:
            raise ValueError("page_size must be positive")
        self.profile = profile
        self.page_size = page_size
        self._sorter = sorter or SortService()

    def filter(self, collection: Sequence[Any], query: QueryState) -> list[Any]:
        """Records accepted by the search term, every filter and the active tab."""
        p = self.profile
        return [r for r in collection if matches(r, query, p.search_fields, p.filters, p.tabs)]

    def sort(self, records: Sequence[Any], query: QueryState) -> list[Any]:
        if query.sort_key is None or not self.profile.supports_sort(query.sort_key):
            return list(records)
        return self._sorter.sort(
            records, [(query.sort_key, query.sort_direction)], self.profile.sort_fields
        )

    def derive(self, collection: Sequence[Any], query: QueryState) -> VisibleRows:
        ordered = self.sort(self.filter(collection, query), query)
        page = max(1, query.page)
        start = (page - 1) * self.page_size
        rows = tuple(ordered[start : start + self.page_size])
        return VisibleRows(rows=rows, total_count=len(ordered), page=page, page_size=self.page_size)

    def tab_counts(self, collection: Sequence[Any], query: QueryState) -> dict[str, int]:
        """Filtered record count per tab, ignoring the currently active tab."""
        counts: dict[str, int] = {}
        for tab in self.profile.tabs:
            counts[tab.id] = len(self.filter(collection, query.with_tab(tab.id)))
        return counts


def derive_view(
    collection: Sequence[Any],
    query: QueryState,
    profile: EntityProfile,
    page_size: int = DEFAULT_PAGE_SIZE,
) -> VisibleRows:
    return ViewReducer(profile, page_size).derive(collection, query)


def clamp_page(query: QueryState, total_count: int, page_size: int = DEFAULT_PAGE_SIZE) -> QueryState:
    """Return `query` with its page moved into [1, page_count]."""
    page_count = max(1, math.ceil(total_count / page_size))
    if 1 <= query.page <= page_count:
        return query
    return query.with_page(min(max(1, query.page), page_count))
