"""create users, roles, profiles and production entries

Revision ID: 20261018_0001
Revises:
Create Date: 2026-10-18 09:00:00
"""

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = "20261018_0001"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        "users",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("email", sa.String(length=255), nullable=False),
        sa.Column("hashed_password", sa.String(length=255), nullable=False),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("created_at", sa.DateTime(), nullable=False, server_default=sa.func.now()),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_users_id", "users", ["id"], unique=False)
    op.create_index("ix_users_email", "users", ["email"], unique=True)

    op.create_table(
        "user_roles",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("role", sa.String(length=20), nullable=False, server_default="operator"),
        sa.Column("updated_at", sa.DateTime(), nullable=False, server_default=sa.func.now()),
        sa.ForeignKeyConstraint(["id"], ["users.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
        sa.CheckConstraint("role IN ('operator', 'supervisor', 'admin')", name="ck_user_roles_role"),
    )
    op.create_index("ix_user_roles_role", "user_roles", ["role"], unique=False)

    op.create_table(
        "profiles",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("name", sa.String(length=200), nullable=True),
        sa.Column("department", sa.String(length=100), nullable=True),
        sa.Column("phone", sa.String(length=50), nullable=True),
        sa.ForeignKeyConstraint(["id"], ["users.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
    )

    op.create_table(
        "production_entries",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("entry_date", sa.Date(), nullable=False),
        sa.Column("shift", sa.String(length=1), nullable=False),
        sa.Column("line", sa.String(length=50), nullable=False),
        sa.Column("time_slot", sa.String(length=11), nullable=False),
        sa.Column("customer_name", sa.String(length=200), nullable=True),
        sa.Column("mo_type", sa.String(length=10), nullable=True),
        sa.Column("mo_number", sa.String(length=100), nullable=True),
        sa.Column("meter_from", sa.String(length=100), nullable=True),
        sa.Column("meter_to", sa.String(length=100), nullable=True),
        sa.Column("ok_qty", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("nok_qty", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("downtime", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("downtime_detail", sa.Text(), nullable=True),
        sa.Column("atl", sa.String(length=200), nullable=True),
        sa.Column("remarks", sa.Text(), nullable=True),
        sa.Column("operator_status", sa.String(length=20), nullable=False),
        sa.Column("skip_reason", sa.Text(), nullable=True),
        sa.Column("approver_status", sa.String(length=20), nullable=False, server_default="pending"),
        sa.Column("approved", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("rejected", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("rejection_note", sa.Text(), nullable=True),
        sa.Column("approved_by", sa.String(length=200), nullable=True),
        sa.Column("reviewed_at", sa.DateTime(), nullable=True),
        sa.Column("created_by", sa.Integer(), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False, server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(), nullable=False, server_default=sa.func.now()),
        sa.ForeignKeyConstraint(["created_by"], ["users.id"]),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("entry_date", "shift", "line", "time_slot", name="uq_production_entries_slot"),
        sa.CheckConstraint("ok_qty >= 0", name="ck_production_entries_ok_qty_non_negative"),
        sa.CheckConstraint("nok_qty >= 0", name="ck_production_entries_nok_qty_non_negative"),
        sa.CheckConstraint(
            "downtime IN (0, 5, 10, 15, 20, 30, 45, 60)",
            name="ck_production_entries_downtime_options",
        ),
        sa.CheckConstraint("shift IN ('A', 'B', 'C')", name="ck_production_entries_shift"),
        sa.CheckConstraint(
            "mo_type IS NULL OR mo_type IN ('Fresh', 'Rework')",
            name="ck_production_entries_mo_type",
        ),
        sa.CheckConstraint(
            "operator_status IN ('submitted', 'skipped')",
            name="ck_production_entries_operator_status",
        ),
        sa.CheckConstraint(
            "approver_status IN ('pending', 'approved', 'rejected')",
            name="ck_production_entries_approver_status",
        ),
    )
    op.create_index("ix_production_entries_id", "production_entries", ["id"], unique=False)
    op.create_index("ix_production_entries_entry_date", "production_entries", ["entry_date"], unique=False)
    op.create_index("ix_production_entries_approver_status", "production_entries", ["approver_status"], unique=False)
    op.create_index("ix_production_entries_created_by", "production_entries", ["created_by"], unique=False)
    op.create_index(
        "ix_production_entries_review",
        "production_entries",
        ["entry_date", "approver_status", "operator_status"],
        unique=False,
    )
    op.create_index(
        "ix_production_entries_date_line_shift",
        "production_entries",
        ["entry_date", "line", "shift"],
        unique=False,
    )


def downgrade() -> None:
    op.drop_index("ix_production_entries_date_line_shift", table_name="production_entries")
    op.drop_index("ix_production_entries_review", table_name="production_entries")
    op.drop_index("ix_production_entries_created_by", table_name="production_entries")
    op.drop_index("ix_production_entries_approver_status", table_name="production_entries")
    op.drop_index("ix_production_entries_entry_date", table_name="production_entries")
    op.drop_index("ix_production_entries_id", table_name="production_entries")
    op.drop_table("production_entries")
    op.drop_table("profiles")
    op.drop_index("ix_user_roles_role", table_name="user_roles")
    op.drop_table("user_roles")
    op.drop_index("ix_users_email", table_name="users")
    op.drop_index("ix_users_id", table_name="users")
    op.drop_table("users")
