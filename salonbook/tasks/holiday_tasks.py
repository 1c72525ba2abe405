# salonbook/tasks/holiday_tasks.py
from typing import Optional

from salonbook.config.celery_config import celery_app
from salonbook.config.database import SessionLocal
from salonbook.services.holiday.holiday_service import HolidayService, HolidayImportError
from salonbook.utils.time_utils import salon_now
import logging

logger = logging.getLogger(__name__)


@celery_app.task(bind=True, max_retries=3)
def import_public_holidays(self, year: Optional[int] = None, country_code: Optional[str] = None,
                           next_year: bool = False):
    """Import public holidays for a year (defaults to the current one)"""
    if year is None:
        year = salon_now().year + (1 if next_year else 0)

    db = SessionLocal()
    try:
        counts = HolidayService(db).import_public_holidays(year, country_code)
        return {"status": "success", "year": year, **counts}

    except HolidayImportError as exc:
        logger.error(f"Holiday import failed for {year}: {exc}")
        raise self.retry(exc=exc, countdown=600 * (self.request.retries + 1))

    finally:
        db.close()
