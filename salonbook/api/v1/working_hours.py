# ============================================================================
# FILE: salonbook/api/v1/working_hours.py
# Owner-only working hours management
# ============================================================================
from typing import List

from fastapi import APIRouter, Depends, HTTPException, Path
from sqlalchemy.orm import Session
import logging

from salonbook.api.dependencies import Principal, require_owner
from salonbook.config.database import get_db
from salonbook.core.exceptions import BookingValidationError, NotFoundError
from salonbook.schemas.schedule import WorkingHourResponse, WorkingHourUpdate
from salonbook.services.working_hours.working_hours_service import WorkingHoursService

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/admin", tags=["working-hours"])


@router.get("/working-hours", response_model=List[WorkingHourResponse])
def list_working_hours(
        owner: Principal = Depends(require_owner),
        db: Session = Depends(get_db)
):
    """The salon-wide schedule, Sunday first"""
    return [WorkingHourResponse(**row.to_dict()) for row in WorkingHoursService(db).list_schedule()]


@router.put("/working-hours/{weekday}", response_model=WorkingHourResponse)
def update_working_hours(
        payload: WorkingHourUpdate,
        weekday: int = Path(..., ge=0, le=6, description="0=Sunday, 6=Saturday"),
        owner: Principal = Depends(require_owner),
        db: Session = Depends(get_db)
):
    """Update the salon-wide hours for one weekday"""
    try:
        row = WorkingHoursService(db).update_weekday(weekday, **payload.model_dump())
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except BookingValidationError as e:
        raise HTTPException(status_code=422, detail=str(e))

    return WorkingHourResponse(**row.to_dict())


@router.get("/employees/{employee_id}/working-hours", response_model=List[WorkingHourResponse])
def list_employee_working_hours(
        employee_id: int = Path(..., ge=1),
        owner: Principal = Depends(require_owner),
        db: Session = Depends(get_db)
):
    rows = WorkingHoursService(db).list_schedule(employee_id=employee_id)
    return [WorkingHourResponse(**row.to_dict()) for row in rows]


@router.put("/employees/{employee_id}/working-hours/{weekday}", response_model=WorkingHourResponse)
def set_employee_working_hours(
        payload: WorkingHourUpdate,
        employee_id: int = Path(..., ge=1),
        weekday: int = Path(..., ge=0, le=6),
        owner: Principal = Depends(require_owner),
        db: Session = Depends(get_db)
):
    """Set an employee's own hours, used when auto-assigning bookings"""
    try:
        row = WorkingHoursService(db).set_employee_hours(employee_id, weekday, **payload.model_dump())
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except BookingValidationError as e:
        raise HTTPException(status_code=422, detail=str(e))

    return WorkingHourResponse(**row.to_dict())
