"""
Review Queue Service — supervisor approval workflow (SRP / DIP)

Bulk actions are best-effort: every id gets its own conditional
``pending -> approved/rejected`` update inside one transaction, and the result
reports which ids moved and why the others did not. An id that another
supervisor resolved first simply fails with ``not_pending``; nothing is
applied twice.
"""
import logging
from datetime import date, datetime
from typing import Iterable, List, Optional

from sqlalchemy.orm import Session

from smarthourly.core import entry_lifecycle
from smarthourly.core.exceptions import EntryNotPendingError, NotFoundError, ValidationError
from smarthourly.core.shift_calendar import normalize_shift
from smarthourly.models.production_entry import ProductionEntry
from smarthourly.repositories.production_entry_repository import ProductionEntryRepository
from smarthourly.schemas.review import BulkFailure, BulkReviewResult, EntryEditRequest
from smarthourly.services.role_service import RoleResolver
from smarthourly.utils.events import EntryEditedEvent, EntryStatusChangedEvent, get_event_bus


logger = logging.getLogger(__name__)

FAILURE_NOT_FOUND = "not_found"
FAILURE_NOT_PENDING = "not_pending"

EDITABLE_STATUSES = (entry_lifecycle.APPROVER_PENDING, entry_lifecycle.APPROVER_REJECTED)


class ReviewQueueService:

    def __init__(self, db: Session):
        self._repo = ProductionEntryRepository(db)
        self._roles = RoleResolver(db)
        self._bus = get_event_bus()

    def pending_entries(
        self,
        entry_date: date,
        line: Optional[str] = None,
        shift: Optional[str] = None,
    ) -> List[ProductionEntry]:
        return self._repo.list_filtered(
            entry_date=entry_date,
            line=line or None,
            shift=normalize_shift(shift) if shift else None,
            operator_status=entry_lifecycle.OPERATOR_SUBMITTED,
            approver_status=entry_lifecycle.APPROVER_PENDING,
        )

    def get_entry(self, entry_id: int) -> ProductionEntry:
        entry = self._repo.get_by_id(entry_id)
        if not entry:
            raise NotFoundError("ProductionEntry", entry_id)
        return entry

    def approve(self, entry_id: int, approver_name: str, user_id: Optional[int] = None) -> ProductionEntry:
        entry = self.get_entry(entry_id)
        changes = entry_lifecycle.approve(entry, approver_name)
        return self._apply(entry, changes, user_id)

    def reject(self, entry_id: int, reason: str, user_id: Optional[int] = None) -> ProductionEntry:
        entry = self.get_entry(entry_id)
        changes = entry_lifecycle.reject(entry, reason)
        return self._apply(entry, changes, user_id)

    def reopen(self, entry_id: int, user_id: Optional[int] = None) -> ProductionEntry:
        entry = self.get_entry(entry_id)
        changes = entry_lifecycle.reopen(entry)
        return self._apply(entry, changes, user_id, expected_status=entry_lifecycle.APPROVER_REJECTED)

    def edit(self, entry_id: int, body: EntryEditRequest, user_id: Optional[int] = None) -> ProductionEntry:
        entry = self.get_entry(entry_id)
        changes = entry_lifecycle.edit(
            entry,
            body.model_dump(exclude_unset=True),
            atl_roster=self._roles.atl_roster(),
        )
        if not changes:
            return entry
        # re-checked in the UPDATE: an entry approved meanwhile must stay untouched
        if not self._repo.transition_if_status(entry_id, EDITABLE_STATUSES, changes):
            self._raise_not_transitionable(entry_id)
        logger.info("entry_edited id=%s fields=%s", entry_id, ",".join(sorted(changes)))
        self._bus.publish(EntryEditedEvent(
            entity_type="production_entry", entity_id=entry_id, user_id=user_id,
            changed_fields=sorted(changes),
        ))
        return self.get_entry(entry_id)

    def _raise_not_transitionable(self, entry_id: int) -> None:
        current = self._repo.statuses_by_id([entry_id]).get(entry_id)
        if current is None:
            raise NotFoundError("ProductionEntry", entry_id)
        raise EntryNotPendingError(entry_id, current)

    def _apply(
        self,
        entry: ProductionEntry,
        changes: dict,
        user_id: Optional[int],
        expected_status: str = entry_lifecycle.APPROVER_PENDING,
    ) -> ProductionEntry:
        old_status = entry.approver_status
        values = dict(changes)
        if values["approver_status"] != entry_lifecycle.APPROVER_PENDING:
            values["reviewed_at"] = datetime.utcnow()
        else:
            values["reviewed_at"] = None

        # Re-checked in the UPDATE itself: another supervisor may have won the race.
        if not self._repo.transition_if_status(entry.id, expected_status, values):
            self._raise_not_transitionable(entry.id)

        self._publish_status(entry.id, old_status, values, user_id)
        return self.get_entry(entry.id)

    def bulk_approve(self, entry_ids: Iterable[int], approver_name: str, user_id: Optional[int] = None) -> BulkReviewResult:
        changes = entry_lifecycle.approve({"approver_status": entry_lifecycle.APPROVER_PENDING}, approver_name)
        return self._bulk("approve", entry_ids, changes, user_id)

    def bulk_reject(self, entry_ids: Iterable[int], reason: str, user_id: Optional[int] = None) -> BulkReviewResult:
        changes = entry_lifecycle.reject({"approver_status": entry_lifecycle.APPROVER_PENDING}, reason)
        return self._bulk("reject", entry_ids, changes, user_id)

    def _bulk(self, action: str, entry_ids: Iterable[int], changes: dict, user_id: Optional[int]) -> BulkReviewResult:
        ids = list(dict.fromkeys(entry_ids))
        if not ids:
            raise ValidationError("No entries selected.", field="entry_ids")

        values = dict(changes, reviewed_at=datetime.utcnow())
        succeeded: List[int] = []
        failed_ids: List[int] = []
        for entry_id in ids:
            if self._repo.transition_if_status(entry_id, entry_lifecycle.APPROVER_PENDING, values, commit=False):
                succeeded.append(entry_id)
            else:
                failed_ids.append(entry_id)
        self._repo.commit()

        existing = self._repo.statuses_by_id(failed_ids)
        failures = [
            BulkFailure(id=i, reason=FAILURE_NOT_PENDING if i in existing else FAILURE_NOT_FOUND)
            for i in failed_ids
        ]

        logger.info(
            "bulk_review action=%s requested=%s succeeded=%s failed=%s",
            action, len(ids), len(succeeded), len(failures),
        )
        for entry_id in succeeded:
            self._publish_status(entry_id, entry_lifecycle.APPROVER_PENDING, values, user_id)

        return BulkReviewResult(
            action=action,
            requested=len(ids),
            succeeded=len(succeeded),
            failed=len(failures),
            succeeded_ids=succeeded,
            failures=failures,
        )

    def _publish_status(self, entry_id: int, old_status: str, values: dict, user_id: Optional[int]) -> None:
        self._bus.publish(EntryStatusChangedEvent(
            entity_type="production_entry", entity_id=entry_id, user_id=user_id,
            old_status=old_status, new_status=values["approver_status"],
            note=values.get("rejection_note"),
        ))

    def atl_roster(self) -> List[str]:
        return self._roles.atl_roster()
