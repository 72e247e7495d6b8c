"""One-advice-per-day scheduling over the 6-9 month window.

A `DaySelection` is the editing state of one advice's day targeting. The
allocator moves it between states and validates it against the committed
collection; it never mutates either.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, replace
from enum import Enum
from typing import Any

from core.errors import ValidationError

MIN_DAY = 180
MAX_DAY = 270

MSG_NO_DAY = "Veuillez sélectionner un jour spécifique dans la grille."
MSG_OUT_OF_RANGE = "Le jour doit être compris entre {min} et {max} (6 - 9 mois)."
MSG_DAY_TAKEN = "Le jour {day} est déjà utilisé. Veuillez en choisir un autre."


class SelectionState(Enum):
    UNSCHEDULED = "unscheduled"
    PENDING = "pending"
    SCHEDULED = "scheduled"


class DayStatus(Enum):
    FREE = "free"
    TAKEN = "taken"
    OWN = "own"
    SELECTED = "selected"


@dataclass(frozen=True)
class DaySelection:
    """Day targeting being edited for one advice.

    Attributes:
        record_id: Advice being edited, None while creating.
        committed_day: Day the advice holds in the collection.
        enabled: Whether day targeting is switched on.
        day: Currently picked day, None until one is picked.
    """

    record_id: str | None = None
    committed_day: int | None = None
    enabled: bool = False
    day: int | None = None

    @classmethod
    def from_record(cls, record: Any | None) -> DaySelection:
        if record is None:
            return cls()
        day = getattr(record, "day", None)
        return cls(record_id=record.id, committed_day=day, enabled=day is not None, day=day)

    @property
    def state(self) -> SelectionState:
        if not self.enabled:
            return SelectionState.UNSCHEDULED
        if self.day is None:
            return SelectionState.PENDING
        return SelectionState.SCHEDULED


@dataclass(frozen=True)
class DaySlot:
    day: int
    status: DayStatus


class SlotAllocator:
    """Validates and enforces unique advice days within [min_day, max_day]."""

    def __init__(self, min_day: int = MIN_DAY, max_day: int = MAX_DAY) -> None:
        if min_day > max_day:
            raise ValueError("min_day must not exceed max_day")
        self.min_day = min_day
        self.max_day = max_day

    def claimed_days(self, collection: Iterable[Any], exclude_id: str | None = None) -> dict[int, str]:
        """Map of day -> owning record id, skipping `exclude_id`."""
        owners: dict[int, str] = {}
        for record in collection:
            day = getattr(record, "day", None)
            if day is None or record.id == exclude_id:
                continue
            owners.setdefault(day, record.id)
        return owners

    def in_range(self, day: int) -> bool:
        return self.min_day <= day <= self.max_day

    def is_available(self, collection: Iterable[Any], day: int, record_id: str | None = None) -> bool:
        return self.in_range(day) and day not in self.claimed_days(collection, record_id)

    def validate_day(self, day: int | None, record_id: str | None, collection: Iterable[Any]) -> None:
        """Commit-time check for a day about to be saved on `record_id`.

        Raises:
            ValidationError: if the day is out of range or owned by another record.
        """
        if day is None:
            return
        if not self.in_range(day):
            raise ValidationError(MSG_OUT_OF_RANGE.format(min=self.min_day, max=self.max_day))
        if day in self.claimed_days(collection, record_id):
            raise ValidationError(MSG_DAY_TAKEN.format(day=day))

    def enable(self, selection: DaySelection) -> DaySelection:
        """Switch targeting on; stays pending until a day is picked."""
        return replace(selection, enabled=True)

    def disable(self, selection: DaySelection) -> DaySelection:
        return replace(selection, enabled=False, day=None)

    def pick(self, selection: DaySelection, day: int, collection: Iterable[Any]) -> DaySelection:
        """Select `day`; on conflict the caller keeps its previous selection.

        Raises:
            ValidationError: if `day` is out of range or claimed by another record.
        """
        self.validate_day(day, selection.record_id, collection)
        return replace(selection, enabled=True, day=day)

    def commit(self, selection: DaySelection, collection: Iterable[Any]) -> dict[str, int | None]:
        """Field changes to save for `selection`.

        Day ranges are always cleared alongside the day.

        Raises:
            ValidationError: if targeting is on without a day, or the day is invalid.
        """
        if selection.state is SelectionState.PENDING:
            raise ValidationError(MSG_NO_DAY)
        day = selection.day if selection.enabled else None
        self.validate_day(day, selection.record_id, collection)
        return {"day": day, "min_day": None, "max_day": None}

    def day_grid(self, collection: Iterable[Any], selection: DaySelection) -> list[DaySlot]:
        """Every day in range with its status for the picker grid."""
        others = self.claimed_days(collection, selection.record_id)
        slots: list[DaySlot] = []
        for day in range(self.min_day, self.max_day + 1):
            if selection.enabled and day == selection.day:
                status = DayStatus.SELECTED
            elif day in others:
                status = DayStatus.TAKEN
            elif selection.committed_day == day:
                status = DayStatus.OWN
            else:
                status = DayStatus.FREE
            slots.append(DaySlot(day, status))
        return slots
