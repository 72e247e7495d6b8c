"""Lightweight view model wrapper around one list record."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any

from core.models import effective_active
from core.services.comparators import full_name

EMPTY = "-"
NO_CATEGORY = "N/A"


def format_date(value: datetime | None) -> str:
    """dd/mm/YYYY in local time, or "-" when missing."""
    if value is None:
        return EMPTY
    return value.astimezone().strftime("%d/%m/%Y")


@dataclass
class RecordVM:
    """Expose display strings for table bindings."""

    record: Any

    @property
    def id(self) -> str:
        return self.record.id

    @property
    def title(self) -> str:
        """Title, or the (full) name for records without one."""
        title = getattr(self.record, "title", None)
        if title:
            return title
        return full_name(self.record) or EMPTY

    @property
    def category_label(self) -> str:
        ref = getattr(self.record, "category", None)
        if ref is None:
            return NO_CATEGORY
        return ref.name or NO_CATEGORY

    @property
    def targeting_label(self) -> str:
        """Day range as "min - max j", a single day as "Jour N"."""
        min_day = getattr(self.record, "min_day", None)
        max_day = getattr(self.record, "max_day", None)
        if min_day is not None and max_day is not None:
            return f"{min_day} - {max_day} j"
        day = getattr(self.record, "day", None)
        if day is not None:
            return f"Jour {day}"
        return EMPTY

    @property
    def is_active(self) -> bool:
        return effective_active(self.record)

    @property
    def status_label(self) -> str:
        return "Actif" if self.is_active else "Inactif"

    @property
    def viewers(self) -> int:
        return len(getattr(self.record, "viewers", None) or ())

    @property
    def likes(self) -> int:
        return len(getattr(self.record, "likes", None) or ())

    @property
    def dislikes(self) -> int:
        return len(getattr(self.record, "dislikes", None) or ())

    @property
    def stats_label(self) -> str:
        return f"{self.viewers} vues · {self.likes} j'aime · {self.dislikes} je n'aime pas"

    @property
    def owner_label(self) -> str:
        owner = getattr(self.record, "user", None)
        if owner is None:
            return EMPTY
        return owner.name or owner.email or EMPTY

    @property
    def created_label(self) -> str:
        return format_date(getattr(self.record, "created_at", None))

    @property
    def scheduled_label(self) -> str:
        return format_date(getattr(self.record, "scheduled_at", None))

    def text(self, attr_name: str) -> str:
        """Any other attribute as display text."""
        value = getattr(self.record, attr_name, None)
        if value is None or value == "":
            return EMPTY
        if isinstance(value, bool):
            return "Oui" if value else "Non"
        if isinstance(value, datetime):
            return format_date(value)
        return str(value)
