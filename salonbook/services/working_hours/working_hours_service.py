# salonbook/services/working_hours/working_hours_service.py
"""Maintenance of the salon schedule and per-employee working hours"""
from datetime import time
from typing import List, Optional

from sqlalchemy.orm import Session

from salonbook.core.exceptions import BookingValidationError, NotFoundError
from salonbook.models.employee import Employee
from salonbook.models.working_hour import WorkingHour
import logging

logger = logging.getLogger(__name__)

_OPEN = time(9, 0)
_BREAK = (time(12, 0), time(13, 0))

# weekday -> (start, end); None means closed
DEFAULT_SCHEDULE = {
    0: None,                    # Sunday
    1: (_OPEN, time(18, 0)),
    2: (_OPEN, time(18, 0)),
    3: (_OPEN, time(18, 0)),
    4: (_OPEN, time(18, 0)),
    5: (_OPEN, time(18, 0)),
    6: (_OPEN, time(17, 0)),    # Saturday
}


def validate_hours(
        start_time: Optional[time],
        end_time: Optional[time],
        break_start: Optional[time],
        break_end: Optional[time]
) -> None:
    """Raise BookingValidationError unless the hours describe a closed day or a sane window"""
    if (start_time is None) != (end_time is None):
        raise BookingValidationError("start_time and end_time must both be set or both be empty")
    if (break_start is None) != (break_end is None):
        raise BookingValidationError("break_start and break_end must both be set or both be empty")

    if start_time is None:
        if break_start is not None:
            raise BookingValidationError("A closed day cannot have a break")
        return

    if start_time >= end_time:
        raise BookingValidationError("start_time must be before end_time")

    if break_start is not None:
        if break_start >= break_end:
            raise BookingValidationError("break_start must be before break_end")
        if break_start < start_time or break_end > end_time:
            raise BookingValidationError("Break must fall within working hours")


class WorkingHoursService:
    def __init__(self, db: Session):
        self.db = db

    def setup_default_schedule(self, force: bool = False) -> List[WorkingHour]:
        """
        Seed the seven global rows, one per weekday.

        Existing global rows are left alone unless force is set, in which case
        they are replaced by the defaults.
        """
        existing = self._global_query().count()
        if existing and not force:
            logger.info(f"Global schedule already has {existing} rows, skipping setup")
            return self.list_schedule()

        for row in self._global_query().all():
            self.db.delete(row)
        # Deletes must reach the database before the replacement rows do
        self.db.flush()

        for weekday, hours in DEFAULT_SCHEDULE.items():
            start, end = hours if hours else (None, None)
            break_start, break_end = _BREAK if hours else (None, None)
            self.db.add(WorkingHour(
                employee_id=None,
                weekday=weekday,
                start_time=start,
                end_time=end,
                break_start=break_start,
                break_end=break_end,
            ))

        self.db.commit()
        logger.info("Global working hours schedule set up with 7 rows")
        return self.list_schedule()

    def list_schedule(self, employee_id: Optional[int] = None) -> List[WorkingHour]:
        if employee_id is None:
            query = self._global_query()
        else:
            query = self.db.query(WorkingHour).filter(WorkingHour.employee_id == employee_id)
        return query.order_by(WorkingHour.weekday.asc()).all()

    def update_weekday(
            self,
            weekday: int,
            start_time: Optional[time],
            end_time: Optional[time],
            break_start: Optional[time] = None,
            break_end: Optional[time] = None
    ) -> WorkingHour:
        """Update a global row; the global schedule never gains or loses rows here"""
        self._check_weekday(weekday)
        validate_hours(start_time, end_time, break_start, break_end)

        row = self._global_query().filter(WorkingHour.weekday == weekday).first()
        if row is None:
            raise NotFoundError("WorkingHour", weekday)

        self._apply(row, start_time, end_time, break_start, break_end)
        self.db.commit()
        self.db.refresh(row)

        logger.info(f"Updated global working hours for weekday {weekday}")
        return row

    def set_employee_hours(
            self,
            employee_id: int,
            weekday: int,
            start_time: Optional[time],
            end_time: Optional[time],
            break_start: Optional[time] = None,
            break_end: Optional[time] = None
    ) -> WorkingHour:
        """Create or update an employee-scoped row"""
        self._check_weekday(weekday)
        validate_hours(start_time, end_time, break_start, break_end)

        if self.db.get(Employee, employee_id) is None:
            raise NotFoundError("Employee", employee_id)

        row = self.db.query(WorkingHour).filter(
            WorkingHour.employee_id == employee_id,
            WorkingHour.weekday == weekday
        ).first()
        if row is None:
            row = WorkingHour(employee_id=employee_id, weekday=weekday)
            self.db.add(row)

        self._apply(row, start_time, end_time, break_start, break_end)
        self.db.commit()
        self.db.refresh(row)

        logger.info(f"Set working hours for employee {employee_id}, weekday {weekday}")
        return row

    # ------------------------------------------------------------------

    def _global_query(self):
        return self.db.query(WorkingHour).filter(WorkingHour.employee_id.is_(None))

    @staticmethod
    def _check_weekday(weekday: int) -> None:
        if not 0 <= weekday <= 6:
            raise BookingValidationError(f"weekday must be between 0 and 6, got {weekday}")

    @staticmethod
    def _apply(row: WorkingHour, start_time, end_time, break_start, break_end) -> None:
        row.start_time = start_time
        row.end_time = end_time
        row.break_start = break_start
        row.break_end = break_end
