"""
Review Router — supervisor approval panel (Thin Controller)
"""
from datetime import date
from typing import List, Optional

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from smarthourly.database import get_db
from smarthourly.dependencies import get_current_user, require_roles
from smarthourly.models.user import User
from smarthourly.schemas.production_entry import ProductionEntryResponse
from smarthourly.schemas.review import (
    AtlRosterResponse,
    BulkApproveRequest,
    BulkRejectRequest,
    BulkReviewResult,
    EntryEditRequest,
    RejectRequest,
)
from smarthourly.services.review_queue_service import ReviewQueueService


router = APIRouter(prefix="/review", tags=["Supervisor Review"])

REVIEWER_ROLES = ["supervisor", "admin"]


def get_review_service(db: Session = Depends(get_db)) -> ReviewQueueService:
    return ReviewQueueService(db)


@router.get("/pending", response_model=List[ProductionEntryResponse])
def pending_entries(
    entry_date: date,
    line: Optional[str] = None,
    shift: Optional[str] = None,
    service: ReviewQueueService = Depends(get_review_service),
    _: User = Depends(require_roles(REVIEWER_ROLES)),
):
    return service.pending_entries(entry_date=entry_date, line=line, shift=shift)


@router.get("/atl-roster", response_model=AtlRosterResponse)
def atl_roster(
    service: ReviewQueueService = Depends(get_review_service),
    _: User = Depends(get_current_user),
):
    return AtlRosterResponse(names=service.atl_roster())


@router.post("/entries/{entry_id}/approve", response_model=ProductionEntryResponse)
def approve_entry(
    entry_id: int,
    service: ReviewQueueService = Depends(get_review_service),
    current_user: User = Depends(require_roles(REVIEWER_ROLES)),
):
    return service.approve(entry_id, approver_name=current_user.name, user_id=current_user.id)


@router.post("/entries/{entry_id}/reject", response_model=ProductionEntryResponse)
def reject_entry(
    entry_id: int,
    body: RejectRequest,
    service: ReviewQueueService = Depends(get_review_service),
    current_user: User = Depends(require_roles(REVIEWER_ROLES)),
):
    return service.reject(entry_id, reason=body.reason, user_id=current_user.id)


@router.post("/entries/{entry_id}/reopen", response_model=ProductionEntryResponse)
def reopen_entry(
    entry_id: int,
    service: ReviewQueueService = Depends(get_review_service),
    current_user: User = Depends(require_roles(REVIEWER_ROLES)),
):
    return service.reopen(entry_id, user_id=current_user.id)


@router.patch("/entries/{entry_id}", response_model=ProductionEntryResponse)
def edit_entry(
    entry_id: int,
    body: EntryEditRequest,
    service: ReviewQueueService = Depends(get_review_service),
    current_user: User = Depends(require_roles(REVIEWER_ROLES)),
):
    return service.edit(entry_id, body, user_id=current_user.id)


@router.post("/bulk-approve", response_model=BulkReviewResult)
def bulk_approve(
    body: BulkApproveRequest,
    service: ReviewQueueService = Depends(get_review_service),
    current_user: User = Depends(require_roles(REVIEWER_ROLES)),
):
    return service.bulk_approve(body.entry_ids, approver_name=current_user.name, user_id=current_user.id)


@router.post("/bulk-reject", response_model=BulkReviewResult)
def bulk_reject(
    body: BulkRejectRequest,
    service: ReviewQueueService = Depends(get_review_service),
    current_user: User = Depends(require_roles(REVIEWER_ROLES)),
):
    return service.bulk_reject(body.entry_ids, reason=body.reason, user_id=current_user.id)
