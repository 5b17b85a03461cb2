from datetime import date, datetime

from pydantic import BaseModel, Field

from app.db.models import HistoryStatus


class HistoryEntryResponse(BaseModel):
    id: int
    reservation_id: int
    specialization_id: int
    patient_name: str
    appointment_date: date
    appointment_time: str
    status: str
    queue_number: int
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class QueueListResponse(BaseModel):
    specialization_id: int
    service_date: date
    entries: list[HistoryEntryResponse]


class HistoryFilter(BaseModel):
    specialization_id: int | None = None
    appointment_date: date | None = None
    status: HistoryStatus | None = None
    limit: int = Field(default=20, ge=1, le=100)
    offset: int = Field(default=0, ge=0)
