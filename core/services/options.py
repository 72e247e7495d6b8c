"""Filter dropdown contents derived from the current collection.

Options are recomputed from whatever records are loaded, so a dropdown never
offers a value no record holds. The generic "all" entry is added by the view
layer, not here.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable
from typing import Any

from core.models import Category
from core.services.collation import collation_key

HEALTH_PLACEHOLDERS = frozenset({"aucune", "aucun", "none"})

Selector = Callable[[Any], "str | Iterable[str] | None"]


def _trim(value: str) -> str:
    return value.strip()


def _trim_upper(value: str) -> str:
    return value.strip().upper()


def derive_options(
    collection: Iterable[Any],
    selector: Selector,
    normalize: Callable[[str], str] = _trim,
    excluded: frozenset[str] = frozenset(),
) -> list[str]:
    """Distinct normalized values picked by `selector`, in collation order.

    Args:
        collection: Records to scan.
        selector: Returns one value, several values, or None for a record.
        normalize: Applied before de-duplication (exact string equality).
        excluded: Placeholder values to drop, compared case-insensitively.
    """
    seen: set[str] = set()
    values: list[str] = []
    for record in collection:
        picked = selector(record)
        if picked is None:
            continue
        if isinstance(picked, str):
            picked = (picked,)
        for raw in picked:
            if not isinstance(raw, str):
                continue
            value = normalize(raw)
            if not value or value.casefold() in excluded or value in seen:
                continue
            seen.add(value)
            values.append(value)
    return sorted(values, key=lambda v: (collation_key(v), v))


def city_options(doctors: Iterable[Any]) -> list[str]:
    return derive_options(doctors, lambda d: d.city)


def specialty_options(doctors: Iterable[Any]) -> list[str]:
    return derive_options(doctors, lambda d: d.specialty)


def source_options(records: Iterable[Any]) -> list[str]:
    return derive_options(records, lambda r: r.sources, normalize=_trim_upper)


def ingredient_options(recipes: Iterable[Any]) -> list[str]:
    return derive_options(recipes, lambda r: [i.name for i in r.ingredients])


def health_issue_options(babies: Iterable[Any]) -> list[str]:
    return derive_options(
        babies, lambda b: [b.allergy, b.disease], excluded=HEALTH_PLACEHOLDERS
    )


def categories_in_use(records: Iterable[Any]) -> list[tuple[str, str]]:
    """(id, name) of every category referenced by `records`.

    Unresolved references show their id as the label.
    """
    labels: dict[str, str] = {}
    for record in records:
        ref = getattr(record, "category", None)
        if ref is None or ref.id in labels:
            continue
        labels[ref.id] = ref.name or ref.id
    return sorted(labels.items(), key=lambda item: (collation_key(item[1]), item[0]))


def category_options(categories: Iterable[Category], content_type: str) -> list[tuple[str, str]]:
    """(id, name) of the categories usable for `content_type`, in load order."""
    return [(c.id, c.name) for c in categories if content_type in (c.content_types or [])]
