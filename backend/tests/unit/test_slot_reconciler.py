from datetime import date, datetime

from smarthourly.core.shift_calendar import slots_for_shift
from smarthourly.core.slot_reconciler import (
    SLOT_ACTIVE,
    SLOT_OVERDUE,
    SLOT_RECORDED,
    SLOT_UPCOMING,
    active_now_filter,
    classify_slots,
    outstanding_slots,
)


DAY = date(2026, 3, 2)


def test_outstanding_preserves_shift_order():
    slots = slots_for_shift("A", DAY)
    remaining = outstanding_slots(slots, ["08:00-09:00", "07:00-08:00"])
    assert remaining == slots[2:]


def test_outstanding_ignores_labels_from_other_shifts():
    slots = slots_for_shift("C", DAY)
    assert outstanding_slots(slots, ["15:30-16:30"]) == slots


def test_active_filter_selects_containing_slot():
    slots = slots_for_shift("A", DAY)
    now = datetime(2026, 3, 2, 9, 15)
    assert active_now_filter(slots, now, DAY) == ["09:00-10:00"]


def test_active_filter_end_is_exclusive():
    slots = slots_for_shift("A", DAY)
    now = datetime(2026, 3, 2, 10, 0)
    assert active_now_filter(slots, now, DAY) == ["10:00-11:00"]


def test_active_filter_handles_midnight_slot():
    slots = slots_for_shift("B", DAY)
    now = datetime(2026, 3, 2, 23, 45)
    assert active_now_filter(slots, now, DAY) == ["23:30-00:00"]


def test_active_filter_empty_when_slot_already_recorded():
    slots = outstanding_slots(slots_for_shift("A", DAY), ["09:00-10:00"])
    now = datetime(2026, 3, 2, 9, 15)
    assert active_now_filter(slots, now, DAY) == []


def test_classify_slots():
    slots = slots_for_shift("A", DAY)
    states = classify_slots(slots, ["07:00-08:00"], datetime(2026, 3, 2, 9, 15), DAY)
    by_slot = {s.time_slot: s.state for s in states}
    assert by_slot["07:00-08:00"] == SLOT_RECORDED
    assert by_slot["08:00-09:00"] == SLOT_OVERDUE
    assert by_slot["09:00-10:00"] == SLOT_ACTIVE
    assert by_slot["15:00-15:30"] == SLOT_UPCOMING
    assert [s.time_slot for s in states] == slots


def test_outstanding_of_everything_recorded_is_empty():
    for shift in ("A", "B", "C"):
        slots = slots_for_shift(shift, DAY)
        assert outstanding_slots(slots, slots) == []


def test_outstanding_with_nothing_recorded_is_all_slots():
    for shift in ("A", "B", "C"):
        slots = slots_for_shift(shift, DAY)
        assert outstanding_slots(slots, []) == slots
