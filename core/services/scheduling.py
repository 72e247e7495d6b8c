"""Scheduled publication for articles and recipes.

A future `scheduled_at` keeps a record inactive. Otherwise the operator's
explicit toggle wins; without one, setting a past or present schedule
suggests activating the record.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any

from core.errors import ValidationError
from core.models import effective_active

MSG_SCHEDULED_INACTIVE = "Un contenu planifié dans le futur reste inactif jusqu'à sa date de publication."


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def _aware(value: datetime) -> datetime:
    return value if value.tzinfo is not None else value.replace(tzinfo=timezone.utc)


def suggested_active(scheduled_at: datetime | None, now: datetime) -> bool | None:
    """False for a future schedule, True for a past one, None without schedule."""
    if scheduled_at is None:
        return None
    return _aware(scheduled_at) <= _aware(now)


@dataclass
class ActivationDraft:
    """Activity flag and schedule being edited for one record."""

    is_active: bool = True
    scheduled_at: datetime | None = None
    manual_override: bool = False

    @classmethod
    def from_record(cls, record: Any | None) -> ActivationDraft:
        if record is None:
            return cls()
        return cls(is_active=effective_active(record), scheduled_at=getattr(record, "scheduled_at", None))

    def is_future(self, now: datetime) -> bool:
        return suggested_active(self.scheduled_at, now) is False

    def schedule(self, when: datetime | None, now: datetime) -> None:
        """Set or clear the publication date and recompute the suggested flag."""
        self.scheduled_at = when
        suggestion = suggested_active(when, now)
        if suggestion is False or (suggestion is not None and not self.manual_override):
            self.is_active = suggestion

    def toggle(self, now: datetime) -> bool:
        """Flip the flag by hand and return the new value.

        Raises:
            ValidationError: while a future schedule holds the record inactive.
        """
        if self.is_future(now):
            raise ValidationError(MSG_SCHEDULED_INACTIVE)
        self.is_active = not self.is_active
        self.manual_override = True
        return self.is_active

    def effective_active(self, now: datetime) -> bool:
        if self.is_future(now):
            return False
        return self.is_active

    def to_changes(self, now: datetime) -> dict[str, Any]:
        """Field values to save at submit time."""
        return {"is_active": self.effective_active(now), "scheduled_at": self.scheduled_at}
