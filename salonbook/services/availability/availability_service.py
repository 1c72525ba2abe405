# salonbook/services/availability/availability_service.py
from typing import Callable, Dict, List, Optional, Set
from datetime import date, datetime, timedelta
from sqlalchemy.orm import Session
from salonbook.config.settings import get_settings
from salonbook.core.exceptions import NotFoundError
from salonbook.models.employee import Employee
from salonbook.models.service import Service
from salonbook.services.availability.calendar_resolver import CalendarResolver
from salonbook.services.availability.conflict_checker import ConflictChecker
from salonbook.services.availability.slot_generator import generate_slots
from salonbook.services.holiday.holiday_service import HolidayService
from salonbook.utils.time_utils import salon_now, salon_weekday, to_iso
import logging

logger = logging.getLogger(__name__)


class AvailabilityService:
    """Computes bookable slots from working hours, holidays and reservations"""

    def __init__(self, db: Session, clock: Optional[Callable[[], datetime]] = None):
        self.db = db
        self.clock = clock or salon_now
        self.conflicts = ConflictChecker(db)
        self.holidays = HolidayService(db)

    def get_available_slots(
            self,
            service_id: int,
            employee_id: Optional[int] = None,
            on_date: Optional[date] = None
    ) -> List[str]:
        """
        Get bookable start times for a service on one day.

        Slots of every candidate employee are merged, so an instant offered by
        two employees appears once. Past dates, holidays, closed days and
        services nobody performs all yield an empty list.
        """
        logger.info(
            "Availability calculation started",
            extra={"service_id": service_id, "employee_id": employee_id, "date": str(on_date)}
        )

        service = self._get_service(service_id)
        now = self.clock()
        on_date = on_date or now.date()

        if on_date < now.date():
            logger.info(f"Date {on_date} is in the past, no slots available")
            return []

        if self.holidays.is_holiday(on_date):
            logger.info(f"Date {on_date} is a holiday, no slots available")
            return []

        employees = self._candidate_employees(service, employee_id)
        if not employees:
            logger.warning(
                f"No employees found for service {service_id}",
                extra={"service_id": service_id, "employee_id": employee_id}
            )
            return []

        # Working hours are salon-wide here, not per employee
        window = CalendarResolver.for_salon(self.db).resolve(salon_weekday(on_date))

        found: Set[datetime] = set()
        if window is not None:
            for employee in employees:
                for start in generate_slots(on_date, window, service.duration_min, now):
                    if start in found:
                        continue
                    if self.conflicts.is_slot_available(employee.id, start, service.duration_min):
                        found.add(start)

        slots = [to_iso(start) for start in sorted(found)]

        logger.info(
            "Availability calculation completed",
            extra={
                "service_id": service_id,
                "employee_id": employee_id,
                "date": on_date.isoformat(),
                "slots_count": len(slots),
                "employees_checked": len(employees),
                "working_day": window is not None,
            }
        )
        return slots

    def find_available_employee(
            self,
            service_id: int,
            start: datetime,
            duration_minutes: int
    ) -> Optional[int]:
        """
        First employee of the service who is free and working at start.

        Unlike get_available_slots this uses each employee's own working hours;
        an employee without scoped hours for the weekday never qualifies.
        """
        service = self._get_service(service_id)
        end = start + timedelta(minutes=duration_minutes)
        weekday = salon_weekday(start.date())

        for employee in service.employees:
            if not self.conflicts.is_slot_available(employee.id, start, duration_minutes):
                continue

            window = CalendarResolver.for_employee(self.db, employee.id).resolve(weekday)
            if window is None:
                continue

            opens_at = datetime.combine(start.date(), window.start)
            closes_at = datetime.combine(start.date(), window.end)
            if start < opens_at or end > closes_at:
                continue

            if window.in_break(start.time()):
                continue

            logger.info(
                "Available employee found",
                extra={"employee_id": employee.id, "service_id": service_id, "start_at": to_iso(start)}
            )
            return employee.id

        logger.warning(
            "No available employee found",
            extra={"service_id": service_id, "start_at": to_iso(start), "duration": duration_minutes}
        )
        return None

    def get_nearest_slot(
            self,
            service_id: int,
            employee_id: Optional[int] = None,
            preferred: Optional[datetime] = None
    ) -> Optional[str]:
        """Earliest slot of the first day with availability within the search horizon"""
        horizon = get_settings().NEAREST_SLOT_HORIZON_DAYS
        search_date = (preferred or self.clock()).date()

        for days_ahead in range(horizon):
            slots = self.get_available_slots(service_id, employee_id, search_date)
            if slots:
                logger.info(
                    "Nearest slot found",
                    extra={
                        "service_id": service_id,
                        "employee_id": employee_id,
                        "nearest_slot": slots[0],
                        "days_ahead": days_ahead,
                    }
                )
                return slots[0]
            search_date += timedelta(days=1)

        logger.warning(f"No available slots found in next {horizon} days for service {service_id}")
        return None

    def check_slot(
            self,
            service_id: int,
            start: datetime,
            employee_id: Optional[int] = None
    ) -> Dict:
        """Report whether start is bookable, auto-matching an employee when none is given"""
        service = self._get_service(service_id)
        duration = service.duration_min

        if employee_id is None:
            employee_id = self.find_available_employee(service_id, start, duration)
        else:
            self._get_employee(employee_id)

        is_available = False
        if employee_id is not None:
            is_available = self.conflicts.is_slot_available(employee_id, start, duration)

        return {
            "service_id": service_id,
            "employee_id": employee_id,
            "start_at": to_iso(start),
            "duration": duration,
            "is_available": is_available,
        }

    # ------------------------------------------------------------------

    def _get_service(self, service_id: int) -> Service:
        service = self.db.get(Service, service_id)
        if service is None:
            raise NotFoundError("Service", service_id)
        return service

    def _get_employee(self, employee_id: int) -> Employee:
        employee = self.db.get(Employee, employee_id)
        if employee is None:
            raise NotFoundError("Employee", employee_id)
        return employee

    def _candidate_employees(self, service: Service, employee_id: Optional[int]) -> List[Employee]:
        if employee_id is not None:
            return [self._get_employee(employee_id)]
        return list(service.employees)
