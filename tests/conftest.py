import os
import sys
from datetime import date
from pathlib import Path

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

os.environ.setdefault("DATABASE_URL", "sqlite+pysqlite:///:memory:")

sys.path.append(str(Path(__file__).resolve().parents[1]))

from app.api.deps import get_service_date
from app.db.base import Base
from app.db.models import HistoryEntry, Reservation, Specialization  # noqa: F401
from app.db.session import get_db
from app.main import app
from app.schemas.reservation import ReservationCreateRequest

TEST_DATABASE_URL = "sqlite+pysqlite:///:memory:"
SERVICE_DATE = date(2025, 6, 1)

engine = create_engine(
    TEST_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture(autouse=True)
def reset_database() -> None:
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)


@pytest.fixture()
def db() -> Session:
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture()
def specialization_id() -> int:
    session = TestingSessionLocal()
    try:
        specialization = Specialization(name="Dental")
        session.add(specialization)
        session.commit()
        return specialization.id
    finally:
        session.close()


@pytest.fixture()
def client() -> TestClient:
    def override_get_db():
        db = TestingSessionLocal()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_service_date] = lambda: SERVICE_DATE
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture()
def make_payload():
    def build(specialization_id: int, /, **overrides) -> ReservationCreateRequest:
        fields = {
            "specialization_id": specialization_id,
            "patient_name": "Jane Doe",
            "patient_age": 25,
            "phone": "081234567890",
            "address": "Jl. Merdeka 1",
            "sex": "F",
            "appointment_date": SERVICE_DATE,
            "appointment_time": "12:00",
        }
        fields.update(overrides)
        return ReservationCreateRequest(**fields)

    return build
