# salonbook/services/availability/calendar_resolver.py
"""Resolve a weekday into the salon's (or an employee's) working window"""
from dataclasses import dataclass
from datetime import time
from typing import Dict, Mapping, Optional

from sqlalchemy.orm import Session

from salonbook.models.working_hour import WorkingHour
import logging

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class WorkingWindow:
    """Open/close times for one day plus an optional break"""
    start: time
    end: time
    break_start: Optional[time] = None
    break_end: Optional[time] = None

    @property
    def has_break(self) -> bool:
        return self.break_start is not None and self.break_end is not None

    def in_break(self, moment: time) -> bool:
        """True when moment falls inside the break, both ends included"""
        if not self.has_break:
            return False
        return self.break_start <= moment <= self.break_end


class CalendarResolver:
    """
    Pure lookup over a weekday-keyed schedule.

    The schedule is loaded once per request and injected, so the resolver never
    touches the database itself.
    """

    def __init__(self, schedule: Mapping[int, WorkingHour]):
        self.schedule = schedule

    @classmethod
    def for_salon(cls, db: Session) -> "CalendarResolver":
        """Resolver over the global seven-row salon schedule"""
        rows = db.query(WorkingHour).filter(WorkingHour.employee_id.is_(None)).all()
        return cls(cls._index(rows))

    @classmethod
    def for_employee(cls, db: Session, employee_id: int) -> "CalendarResolver":
        """Resolver over the rows scoped to one employee"""
        rows = db.query(WorkingHour).filter(WorkingHour.employee_id == employee_id).all()
        return cls(cls._index(rows))

    @staticmethod
    def _index(rows) -> Dict[int, WorkingHour]:
        return {row.weekday: row for row in rows}

    def resolve(self, weekday: int) -> Optional[WorkingWindow]:
        """Return the working window for weekday (0=Sunday), or None when closed"""
        if not 0 <= weekday <= 6:
            raise ValueError(f"weekday must be between 0 and 6, got {weekday}")

        record = self.schedule.get(weekday)
        if record is None or record.start_time is None or record.end_time is None:
            return None

        if record.start_time >= record.end_time:
            logger.warning(
                f"Ignoring malformed working hours for weekday {weekday}: "
                f"{record.start_time}-{record.end_time}"
            )
            return None

        break_start, break_end = record.break_start, record.break_end
        if not self._valid_break(record.start_time, record.end_time, break_start, break_end):
            if break_start is not None or break_end is not None:
                logger.warning(f"Ignoring invalid break for weekday {weekday}: {break_start}-{break_end}")
            break_start = break_end = None

        return WorkingWindow(
            start=record.start_time,
            end=record.end_time,
            break_start=break_start,
            break_end=break_end,
        )

    @staticmethod
    def _valid_break(start: time, end: time, break_start: Optional[time], break_end: Optional[time]) -> bool:
        if break_start is None or break_end is None:
            return False
        return start <= break_start < break_end <= end
