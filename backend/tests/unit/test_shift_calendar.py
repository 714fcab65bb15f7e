from datetime import date, datetime, timedelta

import pytest

from smarthourly.core.exceptions import InvalidShiftError, ValidationError
from smarthourly.core.shift_calendar import (
    current_shift_and_date,
    shift_label,
    shift_window,
    slot_window,
    slots_for_shift,
)


DAY = date(2026, 3, 2)


def test_shift_a_has_nine_slots_ending_with_half_hour():
    slots = slots_for_shift("A", DAY)
    assert len(slots) == 9
    assert slots[0] == "07:00-08:00"
    assert slots[-1] == "15:00-15:30"


def test_shift_b_crosses_midnight():
    slots = slots_for_shift("B", DAY)
    assert slots == [
        "15:30-16:30",
        "16:30-17:30",
        "17:30-18:30",
        "18:30-19:30",
        "19:30-20:30",
        "20:30-21:30",
        "21:30-22:30",
        "22:30-23:30",
        "23:30-00:00",
    ]


def test_shift_c_has_seven_whole_hours():
    slots = slots_for_shift("C", DAY)
    assert len(slots) == 7
    assert slots[0] == "00:00-01:00"
    assert slots[-1] == "06:00-07:00"


@pytest.mark.parametrize("shift", ["A", "B", "C"])
def test_slots_tile_the_shift_window(shift):
    window = shift_window(shift, DAY)
    cursor = window.start
    for slot in slots_for_shift(shift, DAY):
        start, end = slot_window(slot, cursor.date())
        assert start == cursor
        assert end - start <= timedelta(minutes=60)
        cursor = end
    assert cursor == window.end


def test_shifts_cover_the_day_without_overlap():
    total = sum((shift_window(s, DAY).duration for s in "ABC"), timedelta())
    assert total == timedelta(hours=24)


def test_shift_is_case_insensitive():
    assert slots_for_shift("a", DAY) == slots_for_shift("A", DAY)


def test_unknown_shift_rejected():
    with pytest.raises(InvalidShiftError):
        slots_for_shift("D", DAY)


def test_bad_date_rejected():
    with pytest.raises(ValidationError):
        slots_for_shift("A", "02/03/2026")


@pytest.mark.parametrize(
    "clock, expected",
    [
        (datetime(2026, 3, 2, 0, 0), "C"),
        (datetime(2026, 3, 2, 6, 59), "C"),
        (datetime(2026, 3, 2, 7, 0), "A"),
        (datetime(2026, 3, 2, 15, 29), "A"),
        (datetime(2026, 3, 2, 15, 30), "B"),
        (datetime(2026, 3, 2, 23, 59), "B"),
    ],
)
def test_current_shift_boundaries(clock, expected):
    entry_date, shift = current_shift_and_date(clock)
    assert shift == expected
    assert entry_date == clock.date()


def test_slot_window_rolls_past_midnight():
    start, end = slot_window("23:30-00:00", DAY)
    assert start == datetime(2026, 3, 2, 23, 30)
    assert end == datetime(2026, 3, 3, 0, 0)


def test_malformed_slot_label():
    with pytest.raises(ValidationError):
        slot_window("7am-8am", DAY)


def test_shift_label():
    assert shift_label("b") == "B Shift (15:30 - 00:00)"
