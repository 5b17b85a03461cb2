from datetime import date
from typing import Any

from sqlalchemy import select
from sqlalchemy.orm import Session

from app.db.models import Reservation


def insert_reservation(db: Session, **fields: Any) -> Reservation:
    reservation = Reservation(**fields)
    db.add(reservation)
    db.flush()
    return reservation


def get_reservation(db: Session, reservation_id: int, for_update: bool = False) -> Reservation | None:
    query = select(Reservation).where(Reservation.id == reservation_id)
    if for_update:
        query = query.with_for_update()
    return db.scalar(query)


def list_reservations(
    db: Session,
    specialization_id: int | None = None,
    appointment_date: date | None = None,
    limit: int = 20,
    offset: int = 0,
) -> list[Reservation]:
    query = select(Reservation)
    if specialization_id is not None:
        query = query.where(Reservation.specialization_id == specialization_id)
    if appointment_date is not None:
        query = query.where(Reservation.appointment_date == appointment_date)
    return list(db.scalars(query.order_by(Reservation.id).limit(limit).offset(offset)).all())


def update_reservation_fields(db: Session, reservation: Reservation, changes: dict[str, Any]) -> Reservation:
    for field, value in changes.items():
        setattr(reservation, field, value)
    db.flush()
    return reservation


def delete_reservation(db: Session, reservation: Reservation) -> None:
    # ORM cascade removes the linked history entry as well.
    db.delete(reservation)
    db.flush()
