"""Folds confirmed mutation results into an in-memory collection.

Every method returns a new list and leaves the input untouched, so a failed
call upstream simply never reaches the reconciler and the prior collection
stays current.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping, Sequence
from dataclasses import fields, replace
from typing import Any

from loguru import logger

from core.models import Category, ResolvedCategory, UnresolvedCategory
from core.services.interfaces import MutationKind, MutationOutcome


def _merge(record: Any, changes: Mapping[str, Any]) -> Any:
    """Shallow merge of `changes` over `record`; unknown and id keys are ignored."""
    names = {f.name for f in fields(record)}
    updates = {k: v for k, v in changes.items() if k in names and k != "id"}
    return replace(record, **updates) if updates else record


class MutationReconciler:
    """Applies create/update/delete/status outcomes to a collection."""

    def __init__(self, categories: Iterable[Category] = ()) -> None:
        self._categories = {c.id: c for c in categories}

    def set_categories(self, categories: Iterable[Category]) -> None:
        self._categories = {c.id: c for c in categories}

    def resolve_category(self, record: Any) -> Any:
        """Replace an unresolved category reference by the loaded category, if known."""
        ref = getattr(record, "category", None)
        if isinstance(ref, UnresolvedCategory) and ref.id in self._categories:
            return replace(record, category=ResolvedCategory(self._categories[ref.id]))
        return record

    def created(self, collection: Sequence[Any], record: Any) -> list[Any]:
        """Prepend `record`; newest first regardless of the active sort."""
        return [self.resolve_category(record), *collection]

    def updated(self, collection: Sequence[Any], record_id: str, changes: Mapping[str, Any]) -> list[Any]:
        target = changes.get("id") or record_id
        result: list[Any] = []
        found = False
        for record in collection:
            if record.id == target:
                found = True
                record = self.resolve_category(_merge(record, changes))
            result.append(record)
        if not found:
            logger.warning("Update for unknown record {} left the collection unchanged", target)
        return result

    def deleted(self, collection: Sequence[Any], record_id: str) -> list[Any]:
        result = [r for r in collection if r.id != record_id]
        if len(result) == len(collection):
            logger.warning("Delete for unknown record {} left the collection unchanged", record_id)
        return result

    def status_changed(
        self, collection: Sequence[Any], record_id: str, changes: Mapping[str, Any]
    ) -> list[Any]:
        """Status toggles merge like updates; the flag arrives in `changes`."""
        return self.updated(collection, record_id, changes)

    def apply(self, collection: Sequence[Any], outcome: MutationOutcome) -> list[Any]:
        """Dispatch `outcome` to the matching fold."""
        if outcome.kind is MutationKind.CREATE:
            return self.created(collection, outcome.record)
        if outcome.kind is MutationKind.UPDATE:
            return self.updated(collection, outcome.record_id, outcome.changes)
        if outcome.kind is MutationKind.STATUS:
            return self.status_changed(collection, outcome.record_id, outcome.changes)
        return self.deleted(collection, outcome.record_id)
