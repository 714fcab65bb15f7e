from datetime import date, datetime
from typing import Dict, Iterable, List, Optional, Sequence, Union

from sqlalchemy import or_, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from smarthourly.core.exceptions import DuplicateSlotError
from smarthourly.models.production_entry import ProductionEntry
from smarthourly.repositories.base import BaseRepository


class ProductionEntryRepository(BaseRepository[ProductionEntry]):
    def __init__(self, db: Session):
        super().__init__(ProductionEntry, db)

    def recorded_slots(self, entry_date: date, shift: str, line: str) -> List[str]:
        with self.guarded():
            rows = (
                self.db.query(ProductionEntry.time_slot)
                .filter(
                    ProductionEntry.entry_date == entry_date,
                    ProductionEntry.shift == shift,
                    ProductionEntry.line == line,
                )
                .all()
            )
        return [r.time_slot for r in rows]

    def insert_entry(self, values: Dict) -> ProductionEntry:
        row = ProductionEntry(**values)
        self.db.add(row)
        try:
            self.commit()
        except IntegrityError as exc:
            raise DuplicateSlotError(
                values["entry_date"], values["shift"], values["line"], values["time_slot"]
            ) from exc
        with self.guarded():
            self.db.refresh(row)
        return row

    def list_filtered(
        self,
        entry_date: Optional[date] = None,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        line: Optional[str] = None,
        shift: Optional[str] = None,
        operator_status: Optional[str] = None,
        approver_status: Optional[str] = None,
        search: Optional[str] = None,
        newest_first: bool = False,
    ) -> List[ProductionEntry]:
        q = self.db.query(ProductionEntry)
        if entry_date is not None:
            q = q.filter(ProductionEntry.entry_date == entry_date)
        if start_date is not None:
            q = q.filter(ProductionEntry.entry_date >= start_date)
        if end_date is not None:
            q = q.filter(ProductionEntry.entry_date <= end_date)
        if line:
            q = q.filter(ProductionEntry.line == line)
        if shift:
            q = q.filter(ProductionEntry.shift == shift)
        if operator_status:
            q = q.filter(ProductionEntry.operator_status == operator_status)
        if approver_status:
            q = q.filter(ProductionEntry.approver_status == approver_status)
        if search:
            pattern = f"%{search.strip()}%"
            q = q.filter(
                or_(
                    ProductionEntry.mo_number.ilike(pattern),
                    ProductionEntry.customer_name.ilike(pattern),
                    ProductionEntry.line.ilike(pattern),
                )
            )
        date_order = ProductionEntry.entry_date.desc() if newest_first else ProductionEntry.entry_date.asc()
        with self.guarded():
            return q.order_by(date_order, ProductionEntry.time_slot.asc(), ProductionEntry.line.asc()).all()

    def transition_if_status(
        self,
        entry_id: int,
        expected_status: Union[str, Sequence[str]],
        values: Dict,
        commit: bool = True,
    ) -> bool:
        """Conditional update; False when the row is gone or not in any expected status."""
        statuses = [expected_status] if isinstance(expected_status, str) else list(expected_status)
        stmt = (
            update(ProductionEntry)
            .where(
                ProductionEntry.id == entry_id,
                ProductionEntry.approver_status.in_(statuses),
            )
            .values(**values, updated_at=datetime.utcnow())
            .execution_options(synchronize_session=False)
        )
        with self.guarded():
            result = self.db.execute(stmt)
        if commit:
            self.commit()
        return result.rowcount == 1

    def statuses_by_id(self, entry_ids: Iterable[int]) -> Dict[int, str]:
        ids = list(entry_ids)
        if not ids:
            return {}
        with self.guarded():
            rows = (
                self.db.query(ProductionEntry.id, ProductionEntry.approver_status)
                .filter(ProductionEntry.id.in_(ids))
                .all()
            )
        return {r.id: r.approver_status for r in rows}
