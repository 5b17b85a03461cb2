from datetime import date, datetime

from pydantic import BaseModel, Field

from app.schemas.history import HistoryEntryResponse


class ReservationCreateRequest(BaseModel):
    specialization_id: int
    patient_name: str
    patient_age: int | None = None
    phone: str | None = None
    address: str | None = None
    sex: str | None = None
    appointment_date: date
    appointment_time: str


class ReservationUpdateRequest(BaseModel):
    specialization_id: int | None = None
    patient_name: str | None = None
    patient_age: int | None = None
    phone: str | None = None
    address: str | None = None
    sex: str | None = None
    appointment_date: date | None = None
    appointment_time: str | None = None


class ReservationResponse(BaseModel):
    id: int
    specialization_id: int
    patient_name: str
    patient_age: int | None
    phone: str | None
    address: str | None
    sex: str | None
    appointment_date: date
    appointment_time: str
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class ReservationCreatedResponse(BaseModel):
    reservation: ReservationResponse
    history: HistoryEntryResponse


class ReservationFilter(BaseModel):
    specialization_id: int | None = None
    appointment_date: date | None = None
    limit: int = Field(default=20, ge=1, le=100)
    offset: int = Field(default=0, ge=0)
