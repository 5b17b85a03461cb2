import logging
from datetime import date

from sqlalchemy.orm import Session

from app.core.errors import HistoryEntryNotFoundError, InvalidStatusTransitionError, QueueDataNotFoundError
from app.core.metrics import HISTORY_STATUS_TRANSITIONS
from app.db.models import HistoryEntry, HistoryStatus
from app.repositories import history_repository
from app.schemas.history import HistoryFilter
from app.services.transaction import unit_of_work

logger = logging.getLogger(__name__)


def _change_status(db: Session, history_id: int, target: HistoryStatus) -> HistoryEntry:
    with unit_of_work(db, f"mark history entry {target.value}"):
        entry = history_repository.get_history_entry(db, history_id, for_update=True)
        if entry is None:
            raise HistoryEntryNotFoundError()

        current = HistoryStatus(entry.status)
        if current is target:
            db.rollback()
            return entry
        if not entry.can_transition_to(target):
            raise InvalidStatusTransitionError(current.value, target.value)

        entry.status = target.value
        db.commit()

    db.refresh(entry)
    HISTORY_STATUS_TRANSITIONS.labels(status=target.value).inc()
    logger.info(
        "history_status_changed history_id=%s from=%s to=%s queue_number=%s",
        entry.id,
        current.value,
        target.value,
        entry.queue_number,
    )
    return entry


def cancel_history_entry(db: Session, history_id: int) -> HistoryEntry:
    """Marks the entry canceled; its queue number stays taken."""
    return _change_status(db, history_id, HistoryStatus.CANCELED)


def complete_history_entry(db: Session, history_id: int) -> HistoryEntry:
    return _change_status(db, history_id, HistoryStatus.COMPLETED)


def get_queue_list(db: Session, specialization_id: int, service_date: date) -> list[HistoryEntry]:
    with unit_of_work(db, "load queue"):
        entries = history_repository.list_scope_entries(db, specialization_id, service_date)
    if not entries:
        raise QueueDataNotFoundError()
    return entries


def get_history_entry(db: Session, history_id: int) -> HistoryEntry:
    with unit_of_work(db, "load history entry"):
        entry = history_repository.get_history_entry(db, history_id)
    if entry is None:
        raise HistoryEntryNotFoundError("Data not found")
    return entry


def delete_history_entry(db: Session, history_id: int) -> HistoryEntry:
    """Removes only the history row; the reservation it belongs to is kept."""
    with unit_of_work(db, "delete history entry"):
        entry = history_repository.get_history_entry(db, history_id, for_update=True)
        if entry is None:
            raise HistoryEntryNotFoundError()

        history_repository.delete_history_entry(db, entry)
        db.commit()

    logger.info(
        "history_entry_deleted history_id=%s reservation_id=%s queue_number=%s",
        history_id,
        entry.reservation_id,
        entry.queue_number,
    )
    return entry


def list_history_entries(db: Session, filters: HistoryFilter) -> list[HistoryEntry]:
    with unit_of_work(db, "list history entries"):
        return history_repository.list_history_entries(
            db,
            specialization_id=filters.specialization_id,
            appointment_date=filters.appointment_date,
            status=filters.status,
            limit=filters.limit,
            offset=filters.offset,
        )
