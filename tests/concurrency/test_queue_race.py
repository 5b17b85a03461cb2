from concurrent.futures import ThreadPoolExecutor
from datetime import date

import pytest
from sqlalchemy import create_engine, select
from sqlalchemy.orm import sessionmaker

from app.db.base import Base
from app.db.models import HistoryEntry, Reservation, Specialization
from app.schemas.reservation import ReservationCreateRequest
from app.services.reservation_service import create_reservation

PARALLEL_BOOKINGS = 5


@pytest.mark.concurrent
def test_parallel_reservations_get_distinct_dense_queue_numbers(tmp_path):
    db_file = tmp_path / "queue-race.db"
    engine = create_engine(
        f"sqlite+pysqlite:///{db_file}",
        connect_args={"check_same_thread": False, "timeout": 30},
    )
    SessionLocal = sessionmaker(bind=engine, autocommit=False, autoflush=False)
    Base.metadata.create_all(bind=engine)

    seed_session = SessionLocal()
    specialization = Specialization(name="Race Clinic")
    seed_session.add(specialization)
    seed_session.commit()
    specialization_id = specialization.id
    seed_session.close()

    def attempt(index: int) -> int:
        session = SessionLocal()
        try:
            payload = ReservationCreateRequest(
                specialization_id=specialization_id,
                patient_name=f"Patient {index}",
                appointment_date=date(2025, 6, 1),
                appointment_time="09:00",
            )
            _, entry = create_reservation(db=session, payload=payload)
            return entry.queue_number
        finally:
            session.close()

    with ThreadPoolExecutor(max_workers=PARALLEL_BOOKINGS) as pool:
        numbers = list(pool.map(attempt, range(PARALLEL_BOOKINGS)))

    assert sorted(numbers) == list(range(1, PARALLEL_BOOKINGS + 1))

    check = SessionLocal()
    stored = check.scalars(select(HistoryEntry.queue_number).order_by(HistoryEntry.queue_number)).all()
    total_reservations = check.query(Reservation).count()
    check.close()
    engine.dispose()

    assert stored == list(range(1, PARALLEL_BOOKINGS + 1))
    assert total_reservations == PARALLEL_BOOKINGS
