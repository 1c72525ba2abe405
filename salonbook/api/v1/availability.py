# ============================================================================
# FILE: salonbook/api/v1/availability.py
# Availability endpoints - thin HTTP layer over AvailabilityService
# ============================================================================
from datetime import date, datetime
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session
import logging

from salonbook.api.dependencies import Principal, get_current_principal
from salonbook.config.database import get_db
from salonbook.core.exceptions import NotFoundError
from salonbook.schemas.availability import (
    AvailabilityResponse,
    EmployeeMatchResponse,
    NearestSlotResponse,
    SlotCheckRequest,
    SlotCheckResponse,
)
from salonbook.services.availability.availability_service import AvailabilityService
from salonbook.utils.time_utils import to_iso, to_salon_naive

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/availability", tags=["availability"])


@router.get("", response_model=AvailabilityResponse)
def get_availability(
        service_id: int = Query(..., ge=1),
        employee_id: Optional[int] = Query(None, ge=1),
        on_date: Optional[date] = Query(None, alias="date", description="YYYY-MM-DD, defaults to today"),
        principal: Principal = Depends(get_current_principal),
        db: Session = Depends(get_db)
):
    """
    Get bookable start times for a service on one day.
    Past dates and holidays return an empty list.
    """
    service = AvailabilityService(db)
    try:
        on_date = on_date or service.clock().date()
        slots = service.get_available_slots(service_id, employee_id, on_date)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except Exception as e:
        logger.error(f"Availability request failed: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail="Unable to check availability")

    return AvailabilityResponse(
        service_id=service_id,
        employee_id=employee_id,
        date=on_date,
        slots=slots,
    )


@router.get("/nearest", response_model=NearestSlotResponse)
def get_nearest_slot(
        service_id: int = Query(..., ge=1),
        employee_id: Optional[int] = Query(None, ge=1),
        preferred_datetime: Optional[datetime] = Query(None, description="ISO-8601, defaults to now"),
        principal: Principal = Depends(get_current_principal),
        db: Session = Depends(get_db)
):
    """Get the earliest slot on the first day with availability"""
    preferred = to_salon_naive(preferred_datetime) if preferred_datetime else None

    try:
        slot = AvailabilityService(db).get_nearest_slot(service_id, employee_id, preferred)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except Exception as e:
        logger.error(f"Nearest slot request failed: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail="Unable to find nearest slot")

    return NearestSlotResponse(
        service_id=service_id,
        employee_id=employee_id,
        preferred_datetime=to_iso(preferred),
        slot=slot,
    )


@router.get("/employee", response_model=EmployeeMatchResponse)
def match_employee(
        service_id: int = Query(..., ge=1),
        start_at: datetime = Query(..., description="ISO-8601 start instant"),
        duration: int = Query(..., ge=1, description="Duration in minutes"),
        principal: Principal = Depends(get_current_principal),
        db: Session = Depends(get_db)
):
    """Pick the first employee free and working at start_at"""
    start = to_salon_naive(start_at)

    try:
        employee_id = AvailabilityService(db).find_available_employee(service_id, start, duration)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except Exception as e:
        logger.error(f"Employee matching failed: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail="Unable to match an employee")

    return EmployeeMatchResponse(
        service_id=service_id,
        start_at=to_iso(start),
        duration=duration,
        employee_id=employee_id,
    )


@router.post("/check", response_model=SlotCheckResponse)
def check_slot(
        payload: SlotCheckRequest,
        principal: Principal = Depends(get_current_principal),
        db: Session = Depends(get_db)
):
    """Check one start time, auto-matching an employee when none is given"""
    start = to_salon_naive(payload.start_at)

    try:
        result = AvailabilityService(db).check_slot(payload.service_id, start, payload.employee_id)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except Exception as e:
        logger.error(f"Slot availability check failed: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail="Unable to check slot availability")

    return SlotCheckResponse(**result)
