from datetime import date

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from app.api.deps import LimitParam, OffsetParam, get_service_date
from app.db.models import HistoryStatus
from app.db.session import get_db
from app.schemas.history import HistoryEntryResponse, HistoryFilter, QueueListResponse
from app.services import history_service

router = APIRouter(prefix="/histories", tags=["histories"])


@router.get("", response_model=list[HistoryEntryResponse], status_code=status.HTTP_200_OK)
def list_history_entries(
    specialization_id: int | None = Query(default=None),
    appointment_date: date | None = Query(default=None),
    status_filter: HistoryStatus | None = Query(default=None, alias="status"),
    limit: LimitParam = 20,
    offset: OffsetParam = 0,
    db: Session = Depends(get_db),
) -> list[HistoryEntryResponse]:
    filters = HistoryFilter(
        specialization_id=specialization_id,
        appointment_date=appointment_date,
        status=status_filter,
        limit=limit,
        offset=offset,
    )
    entries = history_service.list_history_entries(db=db, filters=filters)
    return [HistoryEntryResponse.model_validate(entry) for entry in entries]


@router.get("/queue/{specialization_id}", response_model=QueueListResponse, status_code=status.HTTP_200_OK)
def get_queue_list(
    specialization_id: int,
    date_filter: date | None = Query(default=None, alias="date"),
    today: date = Depends(get_service_date),
    db: Session = Depends(get_db),
) -> QueueListResponse:
    service_date = date_filter or today
    entries = history_service.get_queue_list(db=db, specialization_id=specialization_id, service_date=service_date)
    return QueueListResponse(
        specialization_id=specialization_id,
        service_date=service_date,
        entries=[HistoryEntryResponse.model_validate(entry) for entry in entries],
    )


@router.get("/{history_id}", response_model=HistoryEntryResponse, status_code=status.HTTP_200_OK)
def get_history_entry(history_id: int, db: Session = Depends(get_db)) -> HistoryEntryResponse:
    entry = history_service.get_history_entry(db=db, history_id=history_id)
    return HistoryEntryResponse.model_validate(entry)


@router.patch("/{history_id}/cancel", response_model=HistoryEntryResponse, status_code=status.HTTP_200_OK)
def cancel_history_entry(history_id: int, db: Session = Depends(get_db)) -> HistoryEntryResponse:
    entry = history_service.cancel_history_entry(db=db, history_id=history_id)
    return HistoryEntryResponse.model_validate(entry)


@router.patch("/{history_id}/complete", response_model=HistoryEntryResponse, status_code=status.HTTP_200_OK)
def complete_history_entry(history_id: int, db: Session = Depends(get_db)) -> HistoryEntryResponse:
    entry = history_service.complete_history_entry(db=db, history_id=history_id)
    return HistoryEntryResponse.model_validate(entry)


@router.delete("/{history_id}", response_model=HistoryEntryResponse, status_code=status.HTTP_200_OK)
def delete_history_entry(history_id: int, db: Session = Depends(get_db)) -> HistoryEntryResponse:
    entry = history_service.delete_history_entry(db=db, history_id=history_id)
    return HistoryEntryResponse.model_validate(entry)
