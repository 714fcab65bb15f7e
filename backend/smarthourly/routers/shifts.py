from datetime import date

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from smarthourly.database import get_db
from smarthourly.dependencies import get_current_user
from smarthourly.models.user import User
from smarthourly.schemas.production_entry import CurrentShiftResponse, SlotListResponse
from smarthourly.services.operator_service import OperatorService


router = APIRouter(prefix="/shifts", tags=["Shift Calendar"])


def get_operator_service(db: Session = Depends(get_db)) -> OperatorService:
    return OperatorService(db)


@router.get("/current", response_model=CurrentShiftResponse)
def current_shift(
    service: OperatorService = Depends(get_operator_service),
    _: User = Depends(get_current_user),
):
    return service.current_shift()


@router.get("/{shift}/slots", response_model=SlotListResponse)
def shift_slots(
    shift: str,
    entry_date: date,
    service: OperatorService = Depends(get_operator_service),
    _: User = Depends(get_current_user),
):
    return service.shift_slots(shift=shift, entry_date=entry_date)
