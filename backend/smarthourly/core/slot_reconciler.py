"""
Slot reconciliation: which slots of a shift still need an entry.
"""
from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Iterable, List, Sequence

from smarthourly.core.shift_calendar import DayLike, slot_window


SLOT_RECORDED = "recorded"
SLOT_ACTIVE = "active"
SLOT_OVERDUE = "overdue"
SLOT_UPCOMING = "upcoming"


@dataclass(frozen=True)
class SlotState:
    time_slot: str
    state: str
    start: datetime
    end: datetime


def outstanding_slots(all_slots: Sequence[str], recorded_slots: Iterable[str]) -> List[str]:
    recorded = set(recorded_slots)
    return [slot for slot in all_slots if slot not in recorded]


def is_active(slot: str, now: datetime, reference_date: DayLike) -> bool:
    start, end = slot_window(slot, reference_date)
    return start <= now < end


def active_now_filter(slots: Sequence[str], now: datetime, reference_date: DayLike) -> List[str]:
    # An empty result means nothing is currently actionable, not an error.
    return [slot for slot in slots if is_active(slot, now, reference_date)]


def classify_slots(
    all_slots: Sequence[str],
    recorded_slots: Iterable[str],
    now: datetime,
    reference_date: DayLike,
) -> List[SlotState]:
    recorded = set(recorded_slots)
    states: List[SlotState] = []
    for slot in all_slots:
        start, end = slot_window(slot, reference_date)
        if slot in recorded:
            state = SLOT_RECORDED
        elif start <= now < end:
            state = SLOT_ACTIVE
        elif now >= end:
            state = SLOT_OVERDUE
        else:
            state = SLOT_UPCOMING
        states.append(SlotState(time_slot=slot, state=state, start=start, end=end))
    return states
