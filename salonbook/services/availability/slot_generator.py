# salonbook/services/availability/slot_generator.py
from datetime import date, datetime, timedelta
from typing import Iterator

from salonbook.config.settings import get_settings
from salonbook.services.availability.calendar_resolver import WorkingWindow

# Slot granularity is salon-wide, never chosen per request
SLOT_INTERVAL_MINUTES = get_settings().SLOT_INTERVAL_MINUTES


def generate_slots(
        day: date,
        window: WorkingWindow,
        duration_minutes: int,
        now: datetime
) -> Iterator[datetime]:
    """
    Yield candidate start times for one day, in ascending order.

    A candidate must finish by closing time, must not lie in the past and must
    not start inside the break. Only the start is checked against the break, so
    a slot beginning just before the break may run into it.
    """
    step = timedelta(minutes=SLOT_INTERVAL_MINUTES)
    duration = timedelta(minutes=duration_minutes)

    current = datetime.combine(day, window.start)
    day_end = datetime.combine(day, window.end)

    while current + duration <= day_end:
        if current >= now and not window.in_break(current.time()):
            yield current
        current += step
