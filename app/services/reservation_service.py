import logging
from datetime import datetime
from typing import Any

from sqlalchemy.orm import Session

from app.core.config import settings
from app.core.errors import (
    InputValidationError,
    QueueConflictError,
    ReservationNotFoundError,
    SpecializationNotFoundError,
)
from app.core.metrics import QUEUE_CONFLICTS, RESERVATIONS_CREATED
from app.db.models import HistoryEntry, Reservation
from app.repositories import history_repository, reservation_repository
from app.repositories.specialization_repository import specialization_exists
from app.schemas.reservation import ReservationCreateRequest, ReservationFilter, ReservationUpdateRequest
from app.services.queue_sequencer import next_queue_number
from app.services.transaction import unit_of_work

logger = logging.getLogger(__name__)

APPOINTMENT_TIME_FORMAT = "%H:%M"
REQUIRED_FIELDS = ("specialization_id", "patient_name", "appointment_date", "appointment_time")


def _normalize_appointment_time(value: str) -> str:
    try:
        return datetime.strptime(value.strip(), APPOINTMENT_TIME_FORMAT).strftime(APPOINTMENT_TIME_FORMAT)
    except ValueError:
        raise InputValidationError("appointment_time must use HH:MM format") from None


def _clean_fields(fields: dict[str, Any]) -> dict[str, Any]:
    for name in REQUIRED_FIELDS:
        if name in fields and fields[name] is None:
            raise InputValidationError(f"{name} is required")

    cleaned = dict(fields)
    if "specialization_id" in cleaned and cleaned["specialization_id"] < 1:
        raise InputValidationError("specialization_id must be a positive integer")
    if "patient_name" in cleaned:
        cleaned["patient_name"] = cleaned["patient_name"].strip()
        if not cleaned["patient_name"]:
            raise InputValidationError("patient_name must not be blank")
    if cleaned.get("patient_age") is not None and cleaned["patient_age"] < 0:
        raise InputValidationError("patient_age must not be negative")
    if "appointment_time" in cleaned:
        cleaned["appointment_time"] = _normalize_appointment_time(cleaned["appointment_time"])
    return cleaned


def _insert_reservation_with_history(db: Session, fields: dict[str, Any]) -> tuple[Reservation, HistoryEntry]:
    with unit_of_work(db, "create reservation"):
        reservation = reservation_repository.insert_reservation(db, **fields)
        queue_number = next_queue_number(db, reservation.specialization_id, reservation.appointment_date)
        entry = history_repository.insert_history_entry(db, reservation, queue_number)
        db.commit()

    db.refresh(reservation)
    db.refresh(entry)
    return reservation, entry


def create_reservation(db: Session, payload: ReservationCreateRequest) -> tuple[Reservation, HistoryEntry]:
    """Books a reservation and its pending history entry as one transaction.

    A queue conflict rolls everything back and the whole transaction is
    retried ``settings.queue_conflict_retries`` times before surfacing.
    """
    fields = _clean_fields(payload.model_dump())
    with unit_of_work(db, "check specialization"):
        if not specialization_exists(db, fields["specialization_id"]):
            raise SpecializationNotFoundError()

    attempts = 1 + max(0, settings.queue_conflict_retries)
    for attempt in range(1, attempts + 1):
        try:
            reservation, entry = _insert_reservation_with_history(db, fields)
        except QueueConflictError:
            QUEUE_CONFLICTS.inc()
            logger.warning(
                "queue_conflict specialization_id=%s appointment_date=%s attempt=%s/%s",
                fields["specialization_id"],
                fields["appointment_date"],
                attempt,
                attempts,
            )
            if attempt == attempts:
                raise
            continue

        RESERVATIONS_CREATED.inc()
        logger.info(
            "reservation_created reservation_id=%s history_id=%s specialization_id=%s "
            "appointment_date=%s queue_number=%s",
            reservation.id,
            entry.id,
            entry.specialization_id,
            entry.appointment_date,
            entry.queue_number,
        )
        return reservation, entry


def get_reservation(db: Session, reservation_id: int) -> Reservation:
    with unit_of_work(db, "load reservation"):
        reservation = reservation_repository.get_reservation(db, reservation_id)
    if reservation is None:
        raise ReservationNotFoundError()
    return reservation


def list_reservations(db: Session, filters: ReservationFilter) -> list[Reservation]:
    with unit_of_work(db, "list reservations"):
        return reservation_repository.list_reservations(
            db,
            specialization_id=filters.specialization_id,
            appointment_date=filters.appointment_date,
            limit=filters.limit,
            offset=filters.offset,
        )


def update_reservation(db: Session, reservation_id: int, patch: ReservationUpdateRequest) -> Reservation:
    # The history snapshot keeps what was originally booked; only the
    # reservation row changes here.
    changes = _clean_fields(patch.model_dump(exclude_unset=True))

    with unit_of_work(db, "update reservation"):
        reservation = reservation_repository.get_reservation(db, reservation_id, for_update=True)
        if reservation is None:
            raise ReservationNotFoundError()

        new_specialization_id = changes.get("specialization_id")
        if (
            new_specialization_id is not None
            and new_specialization_id != reservation.specialization_id
            and not specialization_exists(db, new_specialization_id)
        ):
            raise SpecializationNotFoundError()

        reservation_repository.update_reservation_fields(db, reservation, changes)
        db.commit()

    db.refresh(reservation)
    logger.info("reservation_updated reservation_id=%s fields=%s", reservation.id, ",".join(sorted(changes)))
    return reservation


def delete_reservation(db: Session, reservation_id: int) -> Reservation:
    with unit_of_work(db, "delete reservation"):
        reservation = reservation_repository.get_reservation(db, reservation_id, for_update=True)
        if reservation is None:
            raise ReservationNotFoundError()

        reservation_repository.delete_reservation(db, reservation)
        db.commit()

    logger.info("reservation_deleted reservation_id=%s", reservation_id)
    return reservation
