"""Sorting service for record collections.

The service performs multi-key sorting across records, keeping records with
a missing value last and honouring per-key ascending/descending order
without mutating the input sequence.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from functools import cmp_to_key
from typing import Any

from core.models import SortDirection, SortKey
from core.services.comparators import SortTable, compare


class SortService:
    """Provides stable sorting for record lists."""

    def sort(
        self,
        records: Iterable[Any],
        sort_keys: Sequence[tuple[SortKey, SortDirection]],
        table: SortTable,
    ) -> list[Any]:
        """Return a new list of `records` ordered by `sort_keys`.

        Args:
            records: Records to order.
            sort_keys: List of tuples (sort_key, direction), most significant first.
            table: Sort fields supported by the records' entity profile.

        Records that compare equal on every key keep their input order.
        """
        items = list(records)
        if not sort_keys:
            return items

        def _cmp(a: Any, b: Any) -> int:
            for sort_key, direction in sort_keys:
                result = compare(a, b, sort_key, direction, table)
                if result:
                    return result
            return 0

        return sorted(items, key=cmp_to_key(_cmp))
