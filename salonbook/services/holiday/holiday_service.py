# salonbook/services/holiday/holiday_service.py
"""Holiday lookups, manual edits and public-holiday import from Nager.Date"""
import time
from datetime import date, datetime
from typing import Dict, List, Optional

import requests
from sqlalchemy.orm import Session

from salonbook.config.settings import get_settings
from salonbook.models.holiday import Holiday
import logging

logger = logging.getLogger(__name__)


class HolidayImportError(Exception):
    """The holiday API could not be reached or answered with an error"""


class HolidayService:
    """Reads and maintains the holidays table"""

    def __init__(self, db: Session):
        self.db = db

    def is_holiday(self, day: date) -> bool:
        return self.db.get(Holiday, day) is not None

    def get_holiday(self, day: date) -> Optional[Holiday]:
        return self.db.get(Holiday, day)

    def list_holidays(self, year: Optional[int] = None) -> List[Holiday]:
        query = self.db.query(Holiday)
        if year is not None:
            query = query.filter(Holiday.date >= date(year, 1, 1), Holiday.date <= date(year, 12, 31))
        return query.order_by(Holiday.date.asc()).all()

    def upsert_holiday(self, day: date, name: str, commit: bool = True) -> bool:
        """Create or rename the holiday on day. Returns True when a new row was created."""
        holiday = self.db.get(Holiday, day)
        created = holiday is None

        if created:
            self.db.add(Holiday(date=day, name=name))
        else:
            holiday.name = name

        self.db.flush()
        if commit:
            self.db.commit()
        return created

    def delete_holiday(self, day: date) -> bool:
        holiday = self.db.get(Holiday, day)
        if holiday is None:
            return False

        self.db.delete(holiday)
        self.db.commit()
        return True

    def import_public_holidays(self, year: int, country_code: Optional[str] = None) -> Dict[str, int]:
        """
        Import public holidays for a year from the Nager.Date API.

        Records without a usable date are skipped and logged; the rest are
        upserted in one transaction.

        Returns:
            Dict with imported, updated and skipped counts
        """
        settings = get_settings()
        country_code = country_code or settings.HOLIDAY_COUNTRY_CODE
        url = f"{settings.HOLIDAY_API_URL}/{year}/{country_code}"

        logger.info(f"Holiday import started for {year}/{country_code}", extra={"url": url})

        records = self._fetch(url, settings.HOLIDAY_API_TIMEOUT, settings.HOLIDAY_API_RETRIES)
        if not isinstance(records, list):
            raise HolidayImportError(f"Unexpected holiday API payload: {str(records)[:200]}")

        counts = {"imported": 0, "updated": 0, "skipped": 0}
        for record in records:
            if not isinstance(record, dict):
                logger.warning(f"Skipping malformed holiday record: {record!r}")
                counts["skipped"] += 1
                continue

            raw_date = record.get("date")
            try:
                day = datetime.strptime(raw_date, "%Y-%m-%d").date()
            except (TypeError, ValueError):
                logger.warning(f"Skipping holiday with invalid date: {record}")
                counts["skipped"] += 1
                continue

            name = record.get("localName") or record.get("name") or "Unknown Holiday"
            if self.upsert_holiday(day, name, commit=False):
                counts["imported"] += 1
            else:
                counts["updated"] += 1

        self.db.commit()

        logger.info(
            "Holiday import completed",
            extra={"year": year, "country_code": country_code, **counts}
        )
        return counts

    @staticmethod
    def _fetch(url: str, timeout: int, retries: int) -> List[Dict]:
        last_error = None

        for attempt in range(1, retries + 1):
            try:
                response = requests.get(url, timeout=timeout)
                response.raise_for_status()
                # Nager.Date answers 204 with an empty body for unknown years
                if response.status_code == 204 or not response.content:
                    return []
                return response.json()
            except requests.RequestException as e:
                last_error = e
                logger.warning(f"Holiday API attempt {attempt}/{retries} failed: {e}")
                if attempt < retries:
                    time.sleep(attempt)

        raise HolidayImportError(f"Holiday API request failed: {last_error}")
