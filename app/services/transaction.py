import logging
from collections.abc import Iterator
from contextlib import contextmanager

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.core.errors import ClinicError, PersistenceError, QueueConflictError
from app.services.queue_sequencer import is_queue_conflict

logger = logging.getLogger(__name__)


@contextmanager
def unit_of_work(db: Session, action: str) -> Iterator[None]:
    """Rolls ``db`` back on any failure and re-raises it as a ClinicError."""
    try:
        yield
    except ClinicError:
        db.rollback()
        raise
    except SQLAlchemyError as exc:
        db.rollback()
        if is_queue_conflict(exc):
            raise QueueConflictError() from exc
        logger.exception("persistence_failed action=%s", action)
        raise PersistenceError(f"Failed to {action}") from exc
