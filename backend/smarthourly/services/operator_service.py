"""
Operator Service — slot listing and entry recording (SRP / DIP)
"""
import logging
from datetime import date, datetime
from typing import Callable, List, Optional

from sqlalchemy.orm import Session

from smarthourly.config import settings
from smarthourly.core import entry_lifecycle
from smarthourly.core.shift_calendar import (
    current_shift_and_date,
    normalize_shift,
    shift_label,
    slots_for_shift,
)
from smarthourly.core.slot_reconciler import active_now_filter, classify_slots, outstanding_slots
from smarthourly.models.production_entry import ProductionEntry
from smarthourly.repositories.production_entry_repository import ProductionEntryRepository
from smarthourly.schemas.production_entry import (
    CurrentShiftResponse,
    EntryOptionsResponse,
    ProductionEntryDraft,
    ProductionEntrySkipRequest,
    SlotListResponse,
    SlotStateListResponse,
    SlotStateView,
)
from smarthourly.services.role_service import RoleResolver
from smarthourly.utils.clock import plant_now
from smarthourly.utils.events import EntryRecordedEvent, get_event_bus


logger = logging.getLogger(__name__)


class OperatorService:

    def __init__(self, db: Session, clock: Callable[[], datetime] = plant_now):
        self._repo = ProductionEntryRepository(db)
        self._roles = RoleResolver(db)
        self._clock = clock
        self._bus = get_event_bus()

    def current_shift(self) -> CurrentShiftResponse:
        now = self._clock()
        entry_date, shift = current_shift_and_date(now)
        return CurrentShiftResponse(entry_date=entry_date, shift=shift, label=shift_label(shift), now=now)

    def shift_slots(self, shift: str, entry_date: date) -> SlotListResponse:
        code = normalize_shift(shift)
        return SlotListResponse(entry_date=entry_date, shift=code, slots=slots_for_shift(code, entry_date))

    def outstanding(
        self,
        entry_date: date,
        shift: str,
        line: str,
        active_only: bool = False,
    ) -> SlotListResponse:
        code = normalize_shift(shift)
        remaining = outstanding_slots(
            slots_for_shift(code, entry_date),
            self._repo.recorded_slots(entry_date, code, line),
        )
        if active_only:
            remaining = active_now_filter(remaining, self._clock(), entry_date)
        return SlotListResponse(
            entry_date=entry_date,
            shift=code,
            line=line,
            active_only=active_only,
            slots=remaining,
        )

    def slot_states(self, entry_date: date, shift: str, line: str) -> SlotStateListResponse:
        code = normalize_shift(shift)
        states = classify_slots(
            slots_for_shift(code, entry_date),
            self._repo.recorded_slots(entry_date, code, line),
            self._clock(),
            entry_date,
        )
        return SlotStateListResponse(
            entry_date=entry_date,
            shift=code,
            line=line,
            slots=[
                SlotStateView(time_slot=s.time_slot, state=s.state, start=s.start, end=s.end)
                for s in states
            ],
        )

    def options(self) -> EntryOptionsResponse:
        return EntryOptionsResponse(
            lines=settings.production_lines,
            mo_types=list(entry_lifecycle.MO_TYPES),
            downtime_options=list(entry_lifecycle.DOWNTIME_OPTIONS),
            downtime_issues=settings.downtime_issue_list,
        )

    def submit(self, draft: ProductionEntryDraft, user_id: Optional[int] = None) -> ProductionEntry:
        values = entry_lifecycle.submit(
            draft.model_dump(),
            lines=settings.production_lines,
            atl_roster=self._roles.atl_roster(),
        )
        return self._record(values, user_id)

    def skip(self, body: ProductionEntrySkipRequest, user_id: Optional[int] = None) -> ProductionEntry:
        values = entry_lifecycle.skip(
            body.model_dump(exclude={"reason"}),
            body.reason,
            lines=settings.production_lines,
        )
        return self._record(values, user_id)

    def _record(self, values: dict, user_id: Optional[int]) -> ProductionEntry:
        values["created_by"] = user_id
        row = self._repo.insert_entry(values)
        logger.info(
            "entry_recorded id=%s date=%s shift=%s line=%s slot=%s operator_status=%s",
            row.id, row.entry_date, row.shift, row.line, row.time_slot, row.operator_status,
        )
        self._bus.publish(EntryRecordedEvent(
            entity_type="production_entry", entity_id=row.id, user_id=user_id,
            operator_status=row.operator_status, time_slot=row.time_slot, line=row.line,
        ))
        return row

    def list_entries(self, entry_date: date, shift: Optional[str] = None, line: Optional[str] = None) -> List[ProductionEntry]:
        code = normalize_shift(shift) if shift else None
        return self._repo.list_filtered(entry_date=entry_date, shift=code, line=line)
