# ============================================================================
# FILE: salonbook/api/v1/holidays.py
# Holiday listing (all users) and maintenance (owner only)
# ============================================================================
from datetime import date
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Path, Query
from sqlalchemy.orm import Session
import logging

from salonbook.api.dependencies import Principal, get_current_principal, require_owner
from salonbook.config.database import get_db
from salonbook.schemas.schedule import HolidayResponse, HolidayUpsert
from salonbook.services.holiday.holiday_service import HolidayService

logger = logging.getLogger(__name__)
router = APIRouter(tags=["holidays"])


@router.get("/holidays", response_model=List[HolidayResponse])
def list_holidays(
        year: Optional[int] = Query(None, ge=1900, le=2999),
        principal: Principal = Depends(get_current_principal),
        db: Session = Depends(get_db)
):
    """List closed dates, optionally for one year"""
    return [HolidayResponse(**h.to_dict()) for h in HolidayService(db).list_holidays(year)]


@router.put("/admin/holidays/{holiday_date}", response_model=HolidayResponse)
def upsert_holiday(
        payload: HolidayUpsert,
        holiday_date: date = Path(..., description="YYYY-MM-DD"),
        owner: Principal = Depends(require_owner),
        db: Session = Depends(get_db)
):
    """Create or rename a holiday"""
    try:
        created = HolidayService(db).upsert_holiday(holiday_date, payload.name)
    except Exception as e:
        logger.error(f"Error saving holiday {holiday_date}: {e}", exc_info=True)
        db.rollback()
        raise HTTPException(status_code=500, detail="Unable to save holiday")

    logger.info(f"{'Created' if created else 'Updated'} holiday {holiday_date}: {payload.name}")
    return HolidayResponse(date=holiday_date, name=payload.name)


@router.delete("/admin/holidays/{holiday_date}", status_code=204)
def delete_holiday(
        holiday_date: date = Path(..., description="YYYY-MM-DD"),
        owner: Principal = Depends(require_owner),
        db: Session = Depends(get_db)
):
    """Reopen a date"""
    if not HolidayService(db).delete_holiday(holiday_date):
        raise HTTPException(status_code=404, detail="Holiday not found")
