"""
Report Service — approved production figures and aggregates.
"""
from datetime import date
from typing import List, Optional

import pandas as pd
from sqlalchemy.orm import Session

from smarthourly.core import entry_lifecycle
from smarthourly.core.exceptions import ValidationError
from smarthourly.core.shift_calendar import normalize_shift
from smarthourly.models.production_entry import ProductionEntry
from smarthourly.repositories.production_entry_repository import ProductionEntryRepository
from smarthourly.schemas.report import LineDowntime, ProductionReportSummary, SlotOutput


TOP_DOWNTIME_LINES = 8

_FRAME_COLUMNS = ["entry_date", "shift", "line", "time_slot", "ok_qty", "nok_qty", "downtime"]


class ReportService:

    def __init__(self, db: Session):
        self._repo = ProductionEntryRepository(db)

    def approved_entries(
        self,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        line: Optional[str] = None,
        shift: Optional[str] = None,
        search: Optional[str] = None,
    ) -> List[ProductionEntry]:
        if start_date and end_date and start_date > end_date:
            raise ValidationError("start_date must be on or before end_date.", field="start_date")
        return self._repo.list_filtered(
            start_date=start_date,
            end_date=end_date,
            line=line or None,
            shift=normalize_shift(shift) if shift else None,
            approver_status=entry_lifecycle.APPROVER_APPROVED,
            search=search or None,
            newest_first=True,
        )

    def summary(
        self,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        line: Optional[str] = None,
        shift: Optional[str] = None,
        search: Optional[str] = None,
    ) -> ProductionReportSummary:
        rows = self.approved_entries(start_date, end_date, line, shift, search)
        df = pd.DataFrame(
            [{col: getattr(r, col) for col in _FRAME_COLUMNS} for r in rows],
            columns=_FRAME_COLUMNS,
        )
        for col in ("ok_qty", "nok_qty", "downtime"):
            df[col] = pd.to_numeric(df[col], errors="coerce").fillna(0).astype(int)

        total_ok = int(df["ok_qty"].sum())
        total_nok = int(df["nok_qty"].sum())
        total_produced = total_ok + total_nok
        ok_pct = round(total_ok / total_produced * 100, 1) if total_produced else 0.0

        output_by_slot: List[SlotOutput] = []
        downtime_by_line: List[LineDowntime] = []
        if not df.empty:
            df["total"] = df["ok_qty"] + df["nok_qty"]
            per_slot = df.groupby("time_slot")["total"].sum().sort_index()
            output_by_slot = [SlotOutput(time_slot=slot, total=int(total)) for slot, total in per_slot.items()]

            per_line = (
                df.groupby("line")["downtime"].sum()
                .sort_values(ascending=False, kind="stable")
                .head(TOP_DOWNTIME_LINES)
            )
            downtime_by_line = [LineDowntime(line=ln, minutes=int(m)) for ln, m in per_line.items()]

        return ProductionReportSummary(
            start_date=start_date,
            end_date=end_date,
            line=line,
            shift=shift,
            entry_count=len(rows),
            total_ok=total_ok,
            total_nok=total_nok,
            total_produced=total_produced,
            ok_pct=ok_pct,
            output_by_slot=output_by_slot,
            downtime_by_line=downtime_by_line,
        )
