from datetime import date, datetime
from typing import Optional, List

from pydantic import BaseModel, Field


class ProductionEntryDraft(BaseModel):
    entry_date: date
    shift: str
    line: str
    time_slot: str
    customer_name: Optional[str] = None
    mo_type: Optional[str] = None
    mo_number: Optional[str] = None
    meter_from: Optional[str] = None
    meter_to: Optional[str] = None
    ok_qty: int = Field(default=0, ge=0)
    nok_qty: int = Field(default=0, ge=0)
    downtime: int = 0
    downtime_detail: Optional[str] = None
    downtime_issue: Optional[str] = None
    downtime_other: Optional[str] = None
    atl: Optional[str] = None
    remarks: Optional[str] = None


class ProductionEntrySkipRequest(ProductionEntryDraft):
    reason: str


class ProductionEntryResponse(BaseModel):
    id: int
    entry_date: date
    shift: str
    line: str
    time_slot: str
    customer_name: Optional[str] = None
    mo_type: Optional[str] = None
    mo_number: Optional[str] = None
    meter_from: Optional[str] = None
    meter_to: Optional[str] = None
    ok_qty: int
    nok_qty: int
    downtime: int
    downtime_detail: Optional[str] = None
    atl: Optional[str] = None
    remarks: Optional[str] = None
    operator_status: str
    skip_reason: Optional[str] = None
    approver_status: str
    approved: bool
    rejected: bool
    rejection_note: Optional[str] = None
    approved_by: Optional[str] = None
    reviewed_at: Optional[datetime] = None
    created_by: Optional[int] = None
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class SlotListResponse(BaseModel):
    entry_date: date
    shift: str
    line: Optional[str] = None
    active_only: bool = False
    slots: List[str]


class SlotStateView(BaseModel):
    time_slot: str
    state: str
    start: datetime
    end: datetime


class SlotStateListResponse(BaseModel):
    entry_date: date
    shift: str
    line: str
    slots: List[SlotStateView]


class CurrentShiftResponse(BaseModel):
    entry_date: date
    shift: str
    label: str
    now: datetime


class EntryOptionsResponse(BaseModel):
    lines: List[str]
    mo_types: List[str]
    downtime_options: List[int]
    downtime_issues: List[str]
