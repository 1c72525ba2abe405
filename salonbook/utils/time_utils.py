# salonbook/utils/time_utils.py
"""Salon-local time helpers. Stored date-times are naive salon wall-clock values."""
from datetime import date, datetime
from functools import lru_cache
from typing import Optional
from zoneinfo import ZoneInfo

from salonbook.config.settings import get_settings


@lru_cache()
def salon_timezone() -> ZoneInfo:
    return ZoneInfo(get_settings().SALON_TIMEZONE)


def salon_now() -> datetime:
    """Current salon wall-clock time, naive"""
    return datetime.now(salon_timezone()).replace(tzinfo=None, microsecond=0)


def to_salon_naive(value: datetime) -> datetime:
    """Convert an aware datetime into naive salon time; naive input is assumed salon-local"""
    if value.tzinfo is None:
        return value
    return value.astimezone(salon_timezone()).replace(tzinfo=None)


def to_iso(value: Optional[datetime]) -> Optional[str]:
    """Render a naive salon datetime as ISO-8601 with the salon offset"""
    if value is None:
        return None
    return value.replace(tzinfo=salon_timezone()).isoformat()


def salon_weekday(day: date) -> int:
    """Weekday index with 0=Sunday .. 6=Saturday"""
    return (day.weekday() + 1) % 7
