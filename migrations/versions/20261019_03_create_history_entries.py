"""create history entries

Revision ID: 20261019_03
Revises: 20261019_02
Create Date: 2026-10-19 09:20:00
"""

from collections.abc import Sequence

import sqlalchemy as sa
from alembic import op

# revision identifiers, used by Alembic.
revision: str = "20261019_03"
down_revision: str | None = "20261019_02"
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def upgrade() -> None:
    op.create_table(
        "history_entries",
        sa.Column("id", sa.Integer(), sa.Identity(), primary_key=True, nullable=False),
        sa.Column("reservation_id", sa.Integer(), nullable=False),
        sa.Column("specialization_id", sa.Integer(), nullable=False),
        sa.Column("patient_name", sa.String(length=120), nullable=False),
        sa.Column("appointment_date", sa.Date(), nullable=False),
        sa.Column("appointment_time", sa.String(length=5), nullable=False),
        sa.Column("status", sa.String(length=20), nullable=False, server_default="pending"),
        sa.Column("queue_number", sa.Integer(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.text("now()")),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.text("now()")),
        sa.ForeignKeyConstraint(["reservation_id"], ["reservations.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["specialization_id"], ["specializations.id"], ondelete="CASCADE"),
        sa.UniqueConstraint("reservation_id", name="uq_history_entries_reservation_id"),
        sa.UniqueConstraint(
            "specialization_id",
            "appointment_date",
            "queue_number",
            name="uq_history_entries_scope_queue_number",
        ),
        sa.CheckConstraint("queue_number >= 1", name="ck_history_entries_queue_number_positive"),
    )
    op.create_index(op.f("ix_history_entries_id"), "history_entries", ["id"], unique=False)
    op.create_index(
        op.f("ix_history_entries_specialization_id"), "history_entries", ["specialization_id"], unique=False
    )
    op.create_index(op.f("ix_history_entries_appointment_date"), "history_entries", ["appointment_date"], unique=False)


def downgrade() -> None:
    op.drop_index(op.f("ix_history_entries_appointment_date"), table_name="history_entries")
    op.drop_index(op.f("ix_history_entries_specialization_id"), table_name="history_entries")
    op.drop_index(op.f("ix_history_entries_id"), table_name="history_entries")
    op.drop_table("history_entries")
