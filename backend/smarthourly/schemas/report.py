from datetime import date
from typing import Optional, List

from pydantic import BaseModel


class SlotOutput(BaseModel):
    time_slot: str
    total: int


class LineDowntime(BaseModel):
    line: str
    minutes: int


class ProductionReportSummary(BaseModel):
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    line: Optional[str] = None
    shift: Optional[str] = None
    entry_count: int
    total_ok: int
    total_nok: int
    total_produced: int
    ok_pct: float
    output_by_slot: List[SlotOutput]
    downtime_by_line: List[LineDowntime]
