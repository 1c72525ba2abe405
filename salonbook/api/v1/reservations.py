# ============================================================================
# FILE: salonbook/api/v1/reservations.py
# Reservation booking endpoints
# ============================================================================
from datetime import date
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Path, Query, status
from sqlalchemy.orm import Session
import logging

from salonbook.api.dependencies import Principal, get_current_principal
from salonbook.config.database import get_db
from salonbook.core.exceptions import (
    BookingValidationError,
    NoEmployeeAvailableError,
    NotFoundError,
    SlotUnavailableError,
)
from salonbook.models.reservation import Reservation, ReservationStatus, ReservationType
from salonbook.schemas.reservation import ReservationCreate, ReservationResponse, ReservationUpdate
from salonbook.services.reservation.reservation_service import ReservationService
from salonbook.utils.time_utils import to_salon_naive

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/reservations", tags=["reservations"])


def _ensure_access(principal: Principal, reservation: Reservation) -> None:
    if not principal.is_owner and reservation.client_id != principal.user_id:
        logger.warning(
            "Unauthorized reservation access attempt",
            extra={"reservation_id": reservation.id, "user_id": principal.user_id}
        )
        raise HTTPException(status_code=403, detail="Unauthorized access")


@router.post("", response_model=ReservationResponse, status_code=status.HTTP_201_CREATED)
def create_reservation(
        payload: ReservationCreate,
        principal: Principal = Depends(get_current_principal),
        db: Session = Depends(get_db)
):
    """
    Book a service. Without employee_id the first free employee is assigned.
    Manual reservations (walk-in or phone clients) are owner-only.
    """
    if payload.type == ReservationType.MANUAL and not principal.is_owner:
        raise HTTPException(status_code=403, detail="Only the owner can create manual reservations")

    service = ReservationService(db)
    try:
        reservation = service.create_reservation(
            service_id=payload.service_id,
            start_at=to_salon_naive(payload.start_at),
            employee_id=payload.employee_id,
            client_id=principal.user_id,
            client_full_name=payload.client_full_name,
            client_phone=payload.client_phone,
            reservation_type=payload.type,
        )
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except BookingValidationError as e:
        raise HTTPException(status_code=422, detail=str(e))
    except (SlotUnavailableError, NoEmployeeAvailableError) as e:
        raise HTTPException(status_code=409, detail=str(e))
    except Exception as e:
        logger.error(f"Reservation creation failed: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail="Unable to create reservation. Please try again.")

    return ReservationResponse(**service.serialize(reservation))


@router.get("", response_model=List[ReservationResponse])
def list_reservations(
        reservation_status: Optional[ReservationStatus] = Query(None, alias="status", description="REQUESTED, CONFIRMED, CANCELLED or COMPLETED"),
        on_date: Optional[date] = Query(None, alias="date", description="Reservations starting on this day"),
        employee_id: Optional[int] = Query(None, ge=1, description="Owner only"),
        client_id: Optional[str] = Query(None, description="Owner only"),
        skip: int = Query(0, ge=0, description="Number of records to skip"),
        limit: int = Query(50, ge=1, le=100, description="Number of records to return"),
        principal: Principal = Depends(get_current_principal),
        db: Session = Depends(get_db)
):
    """
    List reservations by start time.
    Clients always get their own; owners may filter by employee or client.
    """
    if not principal.is_owner:
        client_id = principal.user_id
        employee_id = None

    service = ReservationService(db)
    reservations = service.list_reservations(
        client_id=client_id,
        employee_id=employee_id,
        status=reservation_status,
        on_date=on_date,
        skip=skip,
        limit=limit,
    )
    return [ReservationResponse(**service.serialize(r)) for r in reservations]


@router.get("/{reservation_id}", response_model=ReservationResponse)
def get_reservation(
        reservation_id: int = Path(..., ge=1),
        principal: Principal = Depends(get_current_principal),
        db: Session = Depends(get_db)
):
    """Get one reservation; clients only see their own"""
    service = ReservationService(db)
    try:
        reservation = service.get_reservation(reservation_id)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))

    _ensure_access(principal, reservation)
    return ReservationResponse(**service.serialize(reservation))


@router.post("/{reservation_id}/cancel", response_model=ReservationResponse)
def cancel_reservation(
        reservation_id: int = Path(..., ge=1),
        principal: Principal = Depends(get_current_principal),
        db: Session = Depends(get_db)
):
    """Cancel a reservation, freeing its time for other bookings"""
    service = ReservationService(db)
    try:
        _ensure_access(principal, service.get_reservation(reservation_id))
        reservation = service.cancel_reservation(reservation_id)
    except HTTPException:
        raise
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except BookingValidationError as e:
        raise HTTPException(status_code=422, detail=str(e))
    except Exception as e:
        logger.error(f"Reservation cancellation failed: {e}", exc_info=True)
        db.rollback()
        raise HTTPException(status_code=500, detail="Unable to cancel reservation")

    return ReservationResponse(**service.serialize(reservation))


@router.patch("/{reservation_id}", response_model=ReservationResponse)
def update_reservation(
        payload: ReservationUpdate,
        reservation_id: int = Path(..., ge=1),
        principal: Principal = Depends(get_current_principal),
        db: Session = Depends(get_db)
):
    """
    Change a reservation's status, employee or start time.
    Clients may only cancel their own reservations.
    """
    service = ReservationService(db)
    try:
        _ensure_access(principal, service.get_reservation(reservation_id))

        if not principal.is_owner and (
                payload.status != ReservationStatus.CANCELLED
                or payload.employee_id is not None
                or payload.start_at is not None
        ):
            raise HTTPException(status_code=403, detail="Clients can only cancel their reservations")

        reservation = service.update_reservation(
            reservation_id,
            status=payload.status,
            employee_id=payload.employee_id,
            start_at=to_salon_naive(payload.start_at) if payload.start_at else None,
        )
    except HTTPException:
        raise
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except BookingValidationError as e:
        raise HTTPException(status_code=422, detail=str(e))
    except SlotUnavailableError as e:
        raise HTTPException(status_code=409, detail=str(e))
    except Exception as e:
        logger.error(f"Reservation update failed: {e}", exc_info=True)
        db.rollback()
        raise HTTPException(status_code=500, detail="Unable to update reservation")

    return ReservationResponse(**service.serialize(reservation))
