from datetime import date, datetime
from enum import Enum

from sqlalchemy import CheckConstraint, Date, DateTime, ForeignKey, String, UniqueConstraint, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.db.base import Base


class HistoryStatus(str, Enum):
    PENDING = "pending"
    COMPLETED = "completed"
    CANCELED = "canceled"


# Every status must have an entry; completed and canceled are terminal.
ALLOWED_TRANSITIONS: dict[HistoryStatus, frozenset[HistoryStatus]] = {
    HistoryStatus.PENDING: frozenset({HistoryStatus.COMPLETED, HistoryStatus.CANCELED}),
    HistoryStatus.COMPLETED: frozenset(),
    HistoryStatus.CANCELED: frozenset(),
}


class HistoryEntry(Base):
    __tablename__ = "history_entries"
    __table_args__ = (
        UniqueConstraint(
            "specialization_id",
            "appointment_date",
            "queue_number",
            name="uq_history_entries_scope_queue_number",
        ),
        CheckConstraint("queue_number >= 1", name="ck_history_entries_queue_number_positive"),
    )

    id: Mapped[int] = mapped_column(primary_key=True, index=True)
    reservation_id: Mapped[int] = mapped_column(
        ForeignKey("reservations.id", ondelete="CASCADE"), unique=True, nullable=False
    )
    specialization_id: Mapped[int] = mapped_column(
        ForeignKey("specializations.id", ondelete="CASCADE"), nullable=False, index=True
    )
    patient_name: Mapped[str] = mapped_column(String(120), nullable=False)
    appointment_date: Mapped[date] = mapped_column(Date, nullable=False, index=True)
    appointment_time: Mapped[str] = mapped_column(String(5), nullable=False)
    status: Mapped[str] = mapped_column(String(20), nullable=False, default=HistoryStatus.PENDING.value)
    queue_number: Mapped[int] = mapped_column(nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, server_default=func.now()
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, server_default=func.now(), onupdate=func.now()
    )

    reservation = relationship("Reservation", back_populates="history_entry")

    def can_transition_to(self, target: HistoryStatus) -> bool:
        return target in ALLOWED_TRANSITIONS[HistoryStatus(self.status)]
