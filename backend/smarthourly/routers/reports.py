from datetime import date
from typing import List, Optional

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from smarthourly.database import get_db
from smarthourly.dependencies import require_roles
from smarthourly.models.user import User
from smarthourly.schemas.production_entry import ProductionEntryResponse
from smarthourly.schemas.report import ProductionReportSummary
from smarthourly.services.report_service import ReportService


router = APIRouter(prefix="/reports", tags=["Reports"])

REPORT_ROLES = ["admin", "supervisor"]


def get_report_service(db: Session = Depends(get_db)) -> ReportService:
    return ReportService(db)


@router.get("/entries", response_model=List[ProductionEntryResponse])
def approved_entries(
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
    line: Optional[str] = None,
    shift: Optional[str] = None,
    search: Optional[str] = None,
    service: ReportService = Depends(get_report_service),
    _: User = Depends(require_roles(REPORT_ROLES)),
):
    return service.approved_entries(start_date, end_date, line, shift, search)


@router.get("/summary", response_model=ProductionReportSummary)
def report_summary(
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
    line: Optional[str] = None,
    shift: Optional[str] = None,
    search: Optional[str] = None,
    service: ReportService = Depends(get_report_service),
    _: User = Depends(require_roles(REPORT_ROLES)),
):
    return service.summary(start_date, end_date, line, shift, search)
