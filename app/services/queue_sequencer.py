"""Queue number assignment per (specialization, appointment date) scope.

The number is one past the highest number already committed in the scope,
canceled entries included. That equals ``count + 1`` until a history row is
deleted, and afterwards it still never collides with a number in the scope.
The read is only safe while the scope is locked for the rest of the
caller's transaction:

* PostgreSQL: a transaction-level advisory lock keyed on the specialization id
  and the date ordinal, bounded by ``lock_timeout``.
* SQLite: the caller has already flushed its reservation insert, which holds
  the database-wide writer lock until commit.

The unique constraint on ``(specialization_id, appointment_date, queue_number)``
catches anything that slips past the lock.
"""

import logging
from datetime import date

from sqlalchemy import Integer, cast, func, literal, select
from sqlalchemy.exc import DBAPIError, IntegrityError, OperationalError, SQLAlchemyError
from sqlalchemy.orm import Session

from app.core.config import settings
from app.core.errors import QueueConflictError
from app.repositories.history_repository import highest_queue_number

logger = logging.getLogger(__name__)

PG_LOCK_NOT_AVAILABLE_SQLSTATE = "55P03"
PG_SERIALIZATION_FAILURE_SQLSTATE = "40001"
PG_DEADLOCK_DETECTED_SQLSTATE = "40P01"
CONFLICT_SQLSTATES = frozenset(
    {
        PG_LOCK_NOT_AVAILABLE_SQLSTATE,
        PG_SERIALIZATION_FAILURE_SQLSTATE,
        PG_DEADLOCK_DETECTED_SQLSTATE,
    }
)
SCOPE_UNIQUE_CONSTRAINT = "uq_history_entries_scope_queue_number"
SQLITE_SCOPE_UNIQUE_MARKER = "history_entries.queue_number"
SQLITE_LOCKED_MARKER = "database is locked"


def _is_postgresql_session(db: Session) -> bool:
    bind = db.get_bind()
    return bind is not None and bind.dialect.name == "postgresql"


def _sqlstate(exc: DBAPIError) -> str | None:
    original_error = getattr(exc, "orig", None)
    if original_error is None:
        return None

    sqlstate = getattr(original_error, "sqlstate", None)
    if sqlstate is None:
        sqlstate = getattr(original_error, "pgcode", None)
    return sqlstate


def is_queue_conflict(exc: SQLAlchemyError) -> bool:
    """True when ``exc`` means another transaction raced us for the same scope."""
    if isinstance(exc, IntegrityError):
        message = str(exc.orig)
        return SCOPE_UNIQUE_CONSTRAINT in message or SQLITE_SCOPE_UNIQUE_MARKER in message
    if isinstance(exc, OperationalError):
        return _sqlstate(exc) in CONFLICT_SQLSTATES or SQLITE_LOCKED_MARKER in str(exc.orig)
    if isinstance(exc, DBAPIError):
        return _sqlstate(exc) in CONFLICT_SQLSTATES
    return False


def lock_queue_scope(db: Session, specialization_id: int, appointment_date: date) -> None:
    if not _is_postgresql_session(db):
        return

    db.execute(select(func.set_config("lock_timeout", f"{settings.queue_lock_timeout_ms}ms", True)))
    db.execute(
        select(
            func.pg_advisory_xact_lock(
                cast(literal(specialization_id), Integer),
                cast(literal(appointment_date.toordinal()), Integer),
            )
        )
    )


def next_queue_number(db: Session, specialization_id: int, appointment_date: date) -> int:
    """Locks the scope and returns ``max(queue_number) + 1``, not ``count + 1``.

    Row counts shrink when history rows are deleted and would re-issue a number
    still held in the scope; see ``test_deleted_entries_leave_a_gap_in_the_queue``.
    """
    try:
        lock_queue_scope(db, specialization_id, appointment_date)
        queue_number = highest_queue_number(db, specialization_id, appointment_date) + 1
    except DBAPIError as exc:
        if is_queue_conflict(exc):
            logger.warning(
                "queue_scope_lock_failed specialization_id=%s appointment_date=%s",
                specialization_id,
                appointment_date,
            )
            raise QueueConflictError() from exc
        raise

    logger.debug(
        "queue_number_assigned specialization_id=%s appointment_date=%s queue_number=%s",
        specialization_id,
        appointment_date,
        queue_number,
    )
    return queue_number
