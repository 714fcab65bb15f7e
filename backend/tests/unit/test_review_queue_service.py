from datetime import date

import pytest
from sqlalchemy import text
from sqlalchemy.exc import OperationalError
from sqlalchemy.orm import sessionmaker

from smarthourly.core import entry_lifecycle
from smarthourly.core.exceptions import (
    EntryNotPendingError,
    InvalidTransitionError,
    NotFoundError,
    RemoteUnavailableError,
    ValidationError,
)
from smarthourly.schemas.production_entry import ProductionEntryDraft
from smarthourly.schemas.review import EntryEditRequest
from smarthourly.services.operator_service import OperatorService
from smarthourly.services.review_queue_service import ReviewQueueService
from smarthourly.utils.events import EntryStatusChangedEvent


DAY = date(2026, 3, 2)
SLOTS = ["07:00-08:00", "08:00-09:00", "09:00-10:00", "10:00-11:00"]


def _seed(db, draft, count=3):
    operator = OperatorService(db)
    ids = []
    for slot in SLOTS[:count]:
        entry = operator.submit(ProductionEntryDraft(**dict(draft, time_slot=slot)))
        ids.append(entry.id)
    return ids


def test_pending_entries_filtered_by_date(db, draft):
    _seed(db, draft)
    service = ReviewQueueService(db)
    assert len(service.pending_entries(entry_date=DAY)) == 3
    assert service.pending_entries(entry_date=date(2026, 3, 3)) == []


def test_approve_sets_approver(db, draft):
    entry_id = _seed(db, draft, 1)[0]
    entry = ReviewQueueService(db).approve(entry_id, approver_name="Sam Supervisor")
    assert entry.approver_status == "approved"
    assert entry.approved is True
    assert entry.approved_by == "Sam Supervisor"
    assert entry.reviewed_at is not None


def test_second_approve_fails(db, draft):
    entry_id = _seed(db, draft, 1)[0]
    service = ReviewQueueService(db)
    service.approve(entry_id, approver_name="Sam")
    with pytest.raises(EntryNotPendingError):
        service.approve(entry_id, approver_name="Sam")


def test_approve_missing_entry(db):
    with pytest.raises(NotFoundError):
        ReviewQueueService(db).approve(999, approver_name="Sam")


def test_reject_then_reopen(db, draft):
    entry_id = _seed(db, draft, 1)[0]
    service = ReviewQueueService(db)
    rejected = service.reject(entry_id, reason="Wrong MO number")
    assert rejected.rejection_note == "Wrong MO number"
    assert rejected.rejected is True

    reopened = service.reopen(entry_id)
    assert reopened.approver_status == "pending"
    assert reopened.rejection_note is None

    with pytest.raises(InvalidTransitionError):
        service.reopen(entry_id)


def test_edit_does_not_touch_status(db, draft):
    entry_id = _seed(db, draft, 1)[0]
    entry = ReviewQueueService(db).edit(entry_id, EntryEditRequest(ok_qty=80, remarks="recount"))
    assert entry.ok_qty == 80
    assert entry.remarks == "recount"
    assert entry.approver_status == "pending"


def test_bulk_reject_all_pending(db, draft, event_bus):
    ids = _seed(db, draft)
    seen = []
    event_bus.subscribe(EntryStatusChangedEvent, seen.append)

    result = ReviewQueueService(db).bulk_reject(ids, reason="Shift data wrong")
    assert result.requested == 3
    assert result.succeeded == 3
    assert result.failed == 0
    assert sorted(result.succeeded_ids) == sorted(ids)
    assert len(seen) == 3

    db.expire_all()
    assert ReviewQueueService(db).pending_entries(entry_date=DAY) == []


def test_bulk_approve_reports_partial_failure(db, draft):
    ids = _seed(db, draft)
    service = ReviewQueueService(db)
    service.reject(ids[0], reason="bad")

    result = service.bulk_approve(ids + [ids[1], 999], approver_name="Sam")
    assert result.policy == "best_effort"
    assert result.requested == 4
    assert result.succeeded_ids == ids[1:]
    reasons = {f.id: f.reason for f in result.failures}
    assert reasons == {ids[0]: "not_pending", 999: "not_found"}


def test_bulk_with_no_ids(db):
    with pytest.raises(ValidationError):
        ReviewQueueService(db).bulk_approve([], approver_name="Sam")


def test_bulk_reject_requires_reason(db, draft):
    ids = _seed(db, draft, 1)
    with pytest.raises(ValidationError):
        ReviewQueueService(db).bulk_reject(ids, reason=" ")


def test_edit_loses_to_concurrent_approval(engine, db, draft, monkeypatch):
    entry_id = _seed(db, draft, 1)[0]
    rival = sessionmaker(bind=engine)()
    real_edit = entry_lifecycle.edit

    def edit_then_rival_approves(entry, fields, **kwargs):
        changes = real_edit(entry, fields, **kwargs)
        ReviewQueueService(rival).approve(entry_id, approver_name="Rival")
        return changes

    monkeypatch.setattr(entry_lifecycle, "edit", edit_then_rival_approves)
    try:
        with pytest.raises(EntryNotPendingError):
            ReviewQueueService(db).edit(entry_id, EntryEditRequest(ok_qty=1))
    finally:
        rival.close()

    db.expire_all()
    stored = ReviewQueueService(db).get_entry(entry_id)
    assert stored.approver_status == "approved"
    assert stored.ok_qty == draft["ok_qty"]


def test_edit_cannot_blank_required_fields(db, draft):
    entry_id = _seed(db, draft, 1)[0]
    service = ReviewQueueService(db)
    with pytest.raises(ValidationError):
        service.edit(entry_id, EntryEditRequest(mo_number="", customer_name=""))

    db.expire_all()
    stored = service.get_entry(entry_id)
    assert stored.mo_number == draft["mo_number"]
    assert stored.customer_name == draft["customer_name"]


def test_database_outage_surfaces_as_remote_unavailable(db, draft):
    entry_id = _seed(db, draft, 1)[0]
    db.execute(text("DROP TABLE production_entries"))
    db.commit()

    service = ReviewQueueService(db)
    with pytest.raises(RemoteUnavailableError):
        service.approve(entry_id, approver_name="Sam")
    with pytest.raises(RemoteUnavailableError):
        service.pending_entries(entry_date=DAY)


def test_bulk_commit_failure_rolls_back_every_id(db, draft, monkeypatch):
    ids = _seed(db, draft)

    def locked():
        raise OperationalError("COMMIT", {}, Exception("database is locked"))

    monkeypatch.setattr(db, "commit", locked)
    with pytest.raises(RemoteUnavailableError):
        ReviewQueueService(db).bulk_approve(ids, approver_name="Sam")
    monkeypatch.undo()

    db.expire_all()
    assert len(ReviewQueueService(db).pending_entries(entry_date=DAY)) == 3
