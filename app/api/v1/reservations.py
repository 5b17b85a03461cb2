from datetime import date

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from app.api.deps import LimitParam, OffsetParam
from app.db.session import get_db
from app.schemas.history import HistoryEntryResponse
from app.schemas.reservation import (
    ReservationCreatedResponse,
    ReservationCreateRequest,
    ReservationFilter,
    ReservationResponse,
    ReservationUpdateRequest,
)
from app.services import reservation_service

router = APIRouter(prefix="/reservations", tags=["reservations"])


@router.post(
    "",
    response_model=ReservationCreatedResponse,
    status_code=status.HTTP_201_CREATED,
)
def create_reservation(
    payload: ReservationCreateRequest,
    db: Session = Depends(get_db),
) -> ReservationCreatedResponse:
    reservation, history = reservation_service.create_reservation(db=db, payload=payload)
    return ReservationCreatedResponse(
        reservation=ReservationResponse.model_validate(reservation),
        history=HistoryEntryResponse.model_validate(history),
    )


@router.get("", response_model=list[ReservationResponse], status_code=status.HTTP_200_OK)
def list_reservations(
    specialization_id: int | None = Query(default=None),
    appointment_date: date | None = Query(default=None),
    limit: LimitParam = 20,
    offset: OffsetParam = 0,
    db: Session = Depends(get_db),
) -> list[ReservationResponse]:
    filters = ReservationFilter(
        specialization_id=specialization_id,
        appointment_date=appointment_date,
        limit=limit,
        offset=offset,
    )
    reservations = reservation_service.list_reservations(db=db, filters=filters)
    return [ReservationResponse.model_validate(reservation) for reservation in reservations]


@router.get("/{reservation_id}", response_model=ReservationResponse, status_code=status.HTTP_200_OK)
def get_reservation(reservation_id: int, db: Session = Depends(get_db)) -> ReservationResponse:
    reservation = reservation_service.get_reservation(db=db, reservation_id=reservation_id)
    return ReservationResponse.model_validate(reservation)


@router.patch("/{reservation_id}", response_model=ReservationResponse, status_code=status.HTTP_200_OK)
def update_reservation(
    reservation_id: int,
    payload: ReservationUpdateRequest,
    db: Session = Depends(get_db),
) -> ReservationResponse:
    reservation = reservation_service.update_reservation(db=db, reservation_id=reservation_id, patch=payload)
    return ReservationResponse.model_validate(reservation)


@router.delete("/{reservation_id}", response_model=ReservationResponse, status_code=status.HTTP_200_OK)
def delete_reservation(reservation_id: int, db: Session = Depends(get_db)) -> ReservationResponse:
    reservation = reservation_service.delete_reservation(db=db, reservation_id=reservation_id)
    return ReservationResponse.model_validate(reservation)
