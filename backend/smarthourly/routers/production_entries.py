from datetime import date
from typing import List, Optional

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from smarthourly.database import get_db
from smarthourly.dependencies import get_current_user, require_roles
from smarthourly.models.user import User
from smarthourly.schemas.production_entry import (
    EntryOptionsResponse,
    ProductionEntryDraft,
    ProductionEntryResponse,
    ProductionEntrySkipRequest,
    SlotListResponse,
    SlotStateListResponse,
)
from smarthourly.services.operator_service import OperatorService


router = APIRouter(prefix="/production-entries", tags=["Production Entry"])

OPERATOR_ROLES = ["operator", "admin"]


def get_operator_service(db: Session = Depends(get_db)) -> OperatorService:
    return OperatorService(db)


@router.get("/options", response_model=EntryOptionsResponse)
def entry_options(
    service: OperatorService = Depends(get_operator_service),
    _: User = Depends(get_current_user),
):
    return service.options()


@router.get("/lines", response_model=List[str])
def production_lines(
    service: OperatorService = Depends(get_operator_service),
    _: User = Depends(get_current_user),
):
    return service.options().lines


@router.get("/downtime-options", response_model=List[int])
def downtime_options(
    service: OperatorService = Depends(get_operator_service),
    _: User = Depends(get_current_user),
):
    return service.options().downtime_options


@router.get("/slots", response_model=SlotListResponse)
def outstanding_slots(
    entry_date: date,
    shift: str,
    line: str,
    active_only: bool = False,
    service: OperatorService = Depends(get_operator_service),
    _: User = Depends(require_roles(OPERATOR_ROLES)),
):
    return service.outstanding(entry_date=entry_date, shift=shift, line=line, active_only=active_only)


@router.get("/slot-states", response_model=SlotStateListResponse)
def slot_states(
    entry_date: date,
    shift: str,
    line: str,
    service: OperatorService = Depends(get_operator_service),
    _: User = Depends(require_roles(OPERATOR_ROLES)),
):
    return service.slot_states(entry_date=entry_date, shift=shift, line=line)


@router.get("", response_model=List[ProductionEntryResponse])
def list_entries(
    entry_date: date,
    shift: Optional[str] = None,
    line: Optional[str] = None,
    service: OperatorService = Depends(get_operator_service),
    _: User = Depends(require_roles(OPERATOR_ROLES)),
):
    return service.list_entries(entry_date=entry_date, shift=shift, line=line)


@router.post("/submit", response_model=ProductionEntryResponse, status_code=201)
def submit_entry(
    body: ProductionEntryDraft,
    service: OperatorService = Depends(get_operator_service),
    current_user: User = Depends(require_roles(OPERATOR_ROLES)),
):
    return service.submit(body, user_id=current_user.id)


@router.post("/skip", response_model=ProductionEntryResponse, status_code=201)
def skip_entry(
    body: ProductionEntrySkipRequest,
    service: OperatorService = Depends(get_operator_service),
    current_user: User = Depends(require_roles(OPERATOR_ROLES)),
):
    return service.skip(body, user_id=current_user.id)
