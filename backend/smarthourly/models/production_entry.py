from sqlalchemy import (
    Column,
    Integer,
    String,
    Boolean,
    Date,
    DateTime,
    Text,
    ForeignKey,
    CheckConstraint,
    UniqueConstraint,
    Index,
    func,
)
from smarthourly.database import Base


class ProductionEntry(Base):
    __tablename__ = "production_entries"
    __table_args__ = (
        UniqueConstraint(
            "entry_date",
            "shift",
            "line",
            "time_slot",
            name="uq_production_entries_slot",
        ),
        CheckConstraint("ok_qty >= 0", name="ck_production_entries_ok_qty_non_negative"),
        CheckConstraint("nok_qty >= 0", name="ck_production_entries_nok_qty_non_negative"),
        CheckConstraint(
            "downtime IN (0, 5, 10, 15, 20, 30, 45, 60)",
            name="ck_production_entries_downtime_options",
        ),
        CheckConstraint("shift IN ('A', 'B', 'C')", name="ck_production_entries_shift"),
        CheckConstraint(
            "mo_type IS NULL OR mo_type IN ('Fresh', 'Rework')",
            name="ck_production_entries_mo_type",
        ),
        CheckConstraint(
            "operator_status IN ('submitted', 'skipped')",
            name="ck_production_entries_operator_status",
        ),
        CheckConstraint(
            "approver_status IN ('pending', 'approved', 'rejected')",
            name="ck_production_entries_approver_status",
        ),
        Index("ix_production_entries_review", "entry_date", "approver_status", "operator_status"),
        Index("ix_production_entries_date_line_shift", "entry_date", "line", "shift"),
    )

    id = Column(Integer, primary_key=True, index=True)
    entry_date = Column(Date, nullable=False, index=True)
    shift = Column(String(1), nullable=False)
    line = Column(String(50), nullable=False)
    time_slot = Column(String(11), nullable=False)

    customer_name = Column(String(200), nullable=True)
    mo_type = Column(String(10), nullable=True)
    mo_number = Column(String(100), nullable=True)
    meter_from = Column(String(100), nullable=True)
    meter_to = Column(String(100), nullable=True)

    ok_qty = Column(Integer, nullable=False, default=0)
    nok_qty = Column(Integer, nullable=False, default=0)
    downtime = Column(Integer, nullable=False, default=0)
    downtime_detail = Column(Text, nullable=True)
    atl = Column(String(200), nullable=True)
    remarks = Column(Text, nullable=True)

    operator_status = Column(String(20), nullable=False)
    skip_reason = Column(Text, nullable=True)

    approver_status = Column(String(20), nullable=False, default="pending", index=True)
    approved = Column(Boolean, nullable=False, default=False)
    rejected = Column(Boolean, nullable=False, default=False)
    rejection_note = Column(Text, nullable=True)
    approved_by = Column(String(200), nullable=True)
    reviewed_at = Column(DateTime, nullable=True)

    created_by = Column(Integer, ForeignKey("users.id"), nullable=True, index=True)
    created_at = Column(DateTime, default=func.now(), nullable=False)
    updated_at = Column(DateTime, default=func.now(), onupdate=func.now(), nullable=False)
