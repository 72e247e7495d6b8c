import pytest

from core.errors import ValidationError
from core.models import Advice
from core.services.slot_allocator import (
    MSG_DAY_TAKEN,
    MSG_NO_DAY,
    DayStatus,
    DaySelection,
    SelectionState,
    SlotAllocator,
)


@pytest.fixture
def scheduled():
    return [Advice(id="a", day=200), Advice(id="b", day=181), Advice(id="c")]


def test_claimed_days_skip_the_edited_record(scheduled):
    allocator = SlotAllocator()

    assert allocator.claimed_days(scheduled) == {200: "a", 181: "b"}
    assert allocator.claimed_days(scheduled, exclude_id="a") == {181: "b"}


def test_pick_rejects_a_day_owned_by_another_record(scheduled):
    allocator = SlotAllocator()
    selection = DaySelection.from_record(scheduled[1])

    with pytest.raises(ValidationError) as exc_info:
        allocator.pick(selection, 200, scheduled)

    assert exc_info.value.message == MSG_DAY_TAKEN.format(day=200)
    assert selection.day == 181


def test_record_may_keep_its_own_day(scheduled):
    allocator = SlotAllocator()
    selection = DaySelection.from_record(scheduled[0])

    assert allocator.commit(selection, scheduled) == {"day": 200, "min_day": None, "max_day": None}


@pytest.mark.parametrize("day", [179, 271])
def test_out_of_range_days_are_rejected(scheduled, day):
    with pytest.raises(ValidationError):
        SlotAllocator().pick(DaySelection(), day, scheduled)


def test_enabled_without_day_cannot_be_committed(scheduled):
    allocator = SlotAllocator()
    selection = allocator.enable(DaySelection.from_record(scheduled[2]))

    assert selection.state is SelectionState.PENDING
    with pytest.raises(ValidationError, match=MSG_NO_DAY):
        allocator.commit(selection, scheduled)


def test_disable_clears_the_day(scheduled):
    allocator = SlotAllocator()
    selection = allocator.disable(DaySelection.from_record(scheduled[0]))

    assert selection.state is SelectionState.UNSCHEDULED
    assert allocator.commit(selection, scheduled) == {"day": None, "min_day": None, "max_day": None}


def test_new_record_picks_free_day(scheduled):
    allocator = SlotAllocator()
    selection = allocator.pick(DaySelection(), 250, scheduled)

    assert selection.state is SelectionState.SCHEDULED
    assert allocator.commit(selection, scheduled)["day"] == 250
    assert not allocator.is_available(scheduled, 200)
    assert allocator.is_available(scheduled, 200, record_id="a")


def test_day_grid_statuses(scheduled):
    allocator = SlotAllocator()
    selection = allocator.pick(DaySelection.from_record(scheduled[0]), 210, scheduled)

    grid = {slot.day: slot.status for slot in allocator.day_grid(scheduled, selection)}

    assert len(grid) == 91
    assert grid[210] is DayStatus.SELECTED
    assert grid[200] is DayStatus.OWN
    assert grid[181] is DayStatus.TAKEN
    assert grid[230] is DayStatus.FREE


def test_invalid_bounds_are_rejected():
    with pytest.raises(ValueError):
        SlotAllocator(min_day=300, max_day=200)
