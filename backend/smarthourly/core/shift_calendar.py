"""
Shift calendar: shift windows and hour-aligned time slots.

Three fixed shifts partition the operating day:

    A  07:00 - 15:30
    B  15:30 - 00:00 (next day)
    C  00:00 - 07:00

All windows are end-exclusive, so 00:00:00 belongs to shift C and 15:30:00
belongs to shift B. A shift instance belongs to the calendar date it starts on.
"""
from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, time, timedelta
from typing import List, Tuple, Union

from smarthourly.core.exceptions import InvalidShiftError, ValidationError


SHIFTS = ("A", "B", "C")
SLOT_LENGTH = timedelta(minutes=60)

# shift -> (start, end, days the end is offset from the start date)
_SHIFT_BOUNDS = {
    "A": (time(7, 0), time(15, 30), 0),
    "B": (time(15, 30), time(0, 0), 1),
    "C": (time(0, 0), time(7, 0), 0),
}

_A_START = 7 * 60
_B_START = 15 * 60 + 30

DayLike = Union[date, str]


@dataclass(frozen=True)
class ShiftWindow:
    shift: str
    operating_date: date
    start: datetime
    end: datetime

    @property
    def duration(self) -> timedelta:
        return self.end - self.start


def as_date(day: DayLike) -> date:
    if isinstance(day, datetime):
        return day.date()
    if isinstance(day, date):
        return day
    try:
        return date.fromisoformat(str(day).strip())
    except ValueError:
        raise ValidationError(f"Invalid date '{day}'. Expected YYYY-MM-DD.", field="date") from None


def normalize_shift(shift) -> str:
    value = str(shift or "").strip().upper()
    if value not in _SHIFT_BOUNDS:
        raise InvalidShiftError(shift)
    return value


def shift_window(shift, day: DayLike) -> ShiftWindow:
    code = normalize_shift(shift)
    operating_date = as_date(day)
    start_t, end_t, end_offset = _SHIFT_BOUNDS[code]
    start = datetime.combine(operating_date, start_t)
    end = datetime.combine(operating_date + timedelta(days=end_offset), end_t)
    return ShiftWindow(shift=code, operating_date=operating_date, start=start, end=end)


def shift_label(shift) -> str:
    code = normalize_shift(shift)
    start_t, end_t, _ = _SHIFT_BOUNDS[code]
    return f"{code} Shift ({start_t:%H:%M} - {end_t:%H:%M})"


def format_slot(start: datetime, end: datetime) -> str:
    return f"{start:%H:%M}-{end:%H:%M}"


def slots_for_shift(shift, day: DayLike) -> List[str]:
    """Ordered slot labels that exactly tile the shift window.

    Every slot is 60 minutes except the last, which is clipped to the shift end.
    """
    window = shift_window(shift, day)
    slots: List[str] = []
    current = window.start
    while current < window.end:
        nxt = min(current + SLOT_LENGTH, window.end)
        slots.append(format_slot(current, nxt))
        current = nxt
    return slots


def current_shift_and_date(now: datetime) -> Tuple[date, str]:
    """Classify a wall-clock instant into (operating date, shift).

    Only used to pre-select defaults; slot computation always takes an explicit
    date and shift.
    """
    minute_of_day = now.hour * 60 + now.minute
    if minute_of_day < _A_START:
        return now.date(), "C"
    if minute_of_day < _B_START:
        return now.date(), "A"
    return now.date(), "B"


def _parse_hhmm(raw: str, slot: str) -> time:
    try:
        hours, minutes = raw.strip().split(":")
        return time(int(hours), int(minutes))
    except ValueError:
        raise ValidationError(f"Invalid time slot '{slot}'. Expected HH:MM-HH:MM.", field="time_slot") from None


def slot_window(slot: str, reference_date: DayLike) -> Tuple[datetime, datetime]:
    """Absolute [start, end) instants of a slot label anchored to reference_date.

    An end earlier than the start rolls to the next calendar day.
    """
    parts = str(slot or "").split("-")
    if len(parts) != 2:
        raise ValidationError(f"Invalid time slot '{slot}'. Expected HH:MM-HH:MM.", field="time_slot")
    anchor = as_date(reference_date)
    start = datetime.combine(anchor, _parse_hhmm(parts[0], slot))
    end = datetime.combine(anchor, _parse_hhmm(parts[1], slot))
    if end < start:
        end += timedelta(days=1)
    return start, end
