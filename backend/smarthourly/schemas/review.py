from typing import Optional, List

from pydantic import BaseModel, Field


class RejectRequest(BaseModel):
    reason: str


class EntryEditRequest(BaseModel):
    customer_name: Optional[str] = None
    mo_number: Optional[str] = None
    mo_type: Optional[str] = None
    ok_qty: Optional[int] = Field(default=None, ge=0)
    nok_qty: Optional[int] = Field(default=None, ge=0)
    downtime: Optional[int] = None
    downtime_detail: Optional[str] = None
    atl: Optional[str] = None
    remarks: Optional[str] = None


class BulkApproveRequest(BaseModel):
    entry_ids: List[int] = Field(min_length=1)


class BulkRejectRequest(BaseModel):
    entry_ids: List[int] = Field(min_length=1)
    reason: str


class BulkFailure(BaseModel):
    id: int
    reason: str


class BulkReviewResult(BaseModel):
    action: str
    policy: str = "best_effort"
    requested: int
    succeeded: int
    failed: int
    succeeded_ids: List[int]
    failures: List[BulkFailure]


class AtlRosterResponse(BaseModel):
    names: List[str]
