from datetime import date

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from app.db.models import HistoryEntry, HistoryStatus, Reservation


def insert_history_entry(db: Session, reservation: Reservation, queue_number: int) -> HistoryEntry:
    entry = HistoryEntry(
        reservation_id=reservation.id,
        specialization_id=reservation.specialization_id,
        patient_name=reservation.patient_name,
        appointment_date=reservation.appointment_date,
        appointment_time=reservation.appointment_time,
        status=HistoryStatus.PENDING.value,
        queue_number=queue_number,
    )
    db.add(entry)
    db.flush()
    return entry


def get_history_entry(db: Session, history_id: int, for_update: bool = False) -> HistoryEntry | None:
    query = select(HistoryEntry).where(HistoryEntry.id == history_id)
    if for_update:
        query = query.with_for_update()
    return db.scalar(query)


def highest_queue_number(db: Session, specialization_id: int, appointment_date: date) -> int:
    """Highest number issued in the scope, canceled entries included; 0 when empty."""
    return db.scalar(
        select(func.coalesce(func.max(HistoryEntry.queue_number), 0)).where(
            HistoryEntry.specialization_id == specialization_id,
            HistoryEntry.appointment_date == appointment_date,
        )
    ) or 0


def list_scope_entries(db: Session, specialization_id: int, appointment_date: date) -> list[HistoryEntry]:
    return list(
        db.scalars(
            select(HistoryEntry)
            .where(
                HistoryEntry.specialization_id == specialization_id,
                HistoryEntry.appointment_date == appointment_date,
            )
            .order_by(HistoryEntry.queue_number)
        ).all()
    )


def list_history_entries(
    db: Session,
    specialization_id: int | None = None,
    appointment_date: date | None = None,
    status: HistoryStatus | None = None,
    limit: int = 20,
    offset: int = 0,
) -> list[HistoryEntry]:
    query = select(HistoryEntry)
    if specialization_id is not None:
        query = query.where(HistoryEntry.specialization_id == specialization_id)
    if appointment_date is not None:
        query = query.where(HistoryEntry.appointment_date == appointment_date)
    if status is not None:
        query = query.where(HistoryEntry.status == status.value)

    query = query.order_by(
        HistoryEntry.appointment_date,
        HistoryEntry.specialization_id,
        HistoryEntry.queue_number,
    )
    return list(db.scalars(query.limit(limit).offset(offset)).all())


def delete_history_entry(db: Session, entry: HistoryEntry) -> None:
    db.delete(entry)
    db.flush()
