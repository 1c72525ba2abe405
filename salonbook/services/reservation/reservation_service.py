# salonbook/services/reservation/reservation_service.py
"""Creating and cancelling reservations without double-booking an employee"""
import threading
from contextlib import contextmanager
from datetime import date, datetime, timedelta, timezone
from typing import Any, Callable, Dict, List, Optional

from sqlalchemy.orm import Session

from salonbook.core.exceptions import (
    BookingValidationError,
    NoEmployeeAvailableError,
    NotFoundError,
    SlotUnavailableError,
)
from salonbook.models.employee import Employee
from salonbook.models.reservation import Reservation, ReservationStatus, ReservationType
from salonbook.models.service import Service
from salonbook.services.availability.availability_service import AvailabilityService
from salonbook.utils.time_utils import salon_now, to_iso
import logging

logger = logging.getLogger(__name__)

_locks_guard = threading.Lock()
_employee_locks: Dict[int, threading.Lock] = {}


@contextmanager
def employee_lock(employee_id: int):
    """Serialize booking work for one employee within this process"""
    with _locks_guard:
        lock = _employee_locks.setdefault(employee_id, threading.Lock())
    with lock:
        yield


class ReservationService:
    """
    Booking path for reservations.

    Conflict check and insert run under one per-employee critical section: an
    in-process lock plus a row lock on the employee inside the transaction, so
    concurrent requests for the same employee are checked one after another.
    """

    def __init__(self, db: Session, clock: Optional[Callable[[], datetime]] = None):
        self.db = db
        self.clock = clock or salon_now
        self.availability = AvailabilityService(db, clock=self.clock)

    def create_reservation(
            self,
            service_id: int,
            start_at: datetime,
            employee_id: Optional[int] = None,
            client_id: Optional[str] = None,
            client_full_name: Optional[str] = None,
            client_phone: Optional[str] = None,
            reservation_type: ReservationType = ReservationType.ONLINE
    ) -> Reservation:
        """
        Book service at start_at, auto-assigning an employee when none is given.

        Raises:
            NotFoundError: service or employee does not exist
            BookingValidationError: online booking in the past, or a holiday
            NoEmployeeAvailableError: auto-assignment found nobody
            SlotUnavailableError: the employee already has an overlapping booking
        """
        service = self.db.get(Service, service_id)
        if service is None:
            raise NotFoundError("Service", service_id)

        if reservation_type == ReservationType.ONLINE and start_at <= self.clock():
            raise BookingValidationError("Reservation start must be in the future")

        holiday = self.availability.holidays.get_holiday(start_at.date())
        if holiday is not None:
            raise BookingValidationError(
                f"Reservations cannot be made on {holiday.name} ({holiday.date.isoformat()})"
            )

        if employee_id is None:
            employee_id = self.availability.find_available_employee(
                service_id, start_at, service.duration_min
            )
            if employee_id is None:
                raise NoEmployeeAvailableError("No available employee for this time slot")

        with employee_lock(employee_id):
            try:
                # Row lock serializes bookings for this employee across processes
                employee = self.db.query(Employee).filter(
                    Employee.id == employee_id
                ).with_for_update().first()
                if employee is None:
                    raise NotFoundError("Employee", employee_id)

                conflict = self.availability.conflicts.find_conflict(
                    employee_id, start_at, service.duration_min
                )
                if conflict is not None:
                    logger.warning(
                        "Reservation conflict detected during creation",
                        extra={
                            "employee_id": employee_id,
                            "start_at": to_iso(start_at),
                            "conflicting_reservation_id": conflict.id,
                        }
                    )
                    raise SlotUnavailableError(
                        f"Time slot conflicts with existing reservation on "
                        f"{conflict.start_at:%Y-%m-%d} from {conflict.start_at:%H:%M} - {conflict.end_at:%H:%M}"
                    )

                reservation = Reservation(
                    employee_id=employee_id,
                    service_id=service_id,
                    client_id=client_id if reservation_type == ReservationType.ONLINE else None,
                    client_full_name=client_full_name,
                    client_phone=client_phone,
                    start_at=start_at,
                    end_at=start_at + timedelta(minutes=service.duration_min),
                    status=ReservationStatus.CONFIRMED.value,
                    type=reservation_type.value,
                )
                self.db.add(reservation)
                self.db.commit()
            except Exception:
                self.db.rollback()
                raise

        self.db.refresh(reservation)

        logger.info(
            "Reservation created successfully",
            extra={
                "reservation_id": reservation.id,
                "employee_id": employee_id,
                "service_id": service_id,
                "start_at": to_iso(reservation.start_at),
                "end_at": to_iso(reservation.end_at),
            }
        )
        return reservation

    def update_reservation(
            self,
            reservation_id: int,
            status: Optional[ReservationStatus] = None,
            employee_id: Optional[int] = None,
            start_at: Optional[datetime] = None
    ) -> Reservation:
        """
        Change status, reassign or reschedule a reservation.

        Any change that leaves the reservation occupying time (a move, or reviving
        a cancelled one) is re-checked for conflicts under the same per-employee
        critical section as create_reservation, ignoring the reservation itself.

        Raises:
            NotFoundError: reservation or new employee does not exist
            BookingValidationError: REQUESTED as a target status, a past or holiday
                start, or cancelling a completed reservation
            SlotUnavailableError: the target interval overlaps another booking
        """
        reservation = self.get_reservation(reservation_id)

        if status == ReservationStatus.REQUESTED:
            raise BookingValidationError("Status can only be set to CONFIRMED, CANCELLED or COMPLETED")

        current_status = ReservationStatus(reservation.status)
        new_status = status or current_status
        if new_status == ReservationStatus.CANCELLED and current_status == ReservationStatus.COMPLETED:
            raise BookingValidationError("Completed reservations cannot be cancelled")

        target_employee_id = employee_id if employee_id is not None else reservation.employee_id
        new_start = start_at if start_at is not None else reservation.start_at
        rescheduled = new_start != reservation.start_at

        if rescheduled:
            if new_start <= self.clock():
                raise BookingValidationError("Reservation start must be in the future")
            holiday = self.availability.holidays.get_holiday(new_start.date())
            if holiday is not None:
                raise BookingValidationError(
                    f"Reservations cannot be moved to {holiday.name} ({holiday.date.isoformat()})"
                )

        moved = rescheduled or target_employee_id != reservation.employee_id
        occupies_time = new_status != ReservationStatus.CANCELLED
        needs_check = occupies_time and (moved or current_status == ReservationStatus.CANCELLED)

        if needs_check:
            duration = self.db.get(Service, reservation.service_id).duration_min
            with employee_lock(target_employee_id):
                try:
                    employee = self.db.query(Employee).filter(
                        Employee.id == target_employee_id
                    ).with_for_update().first()
                    if employee is None:
                        raise NotFoundError("Employee", target_employee_id)

                    conflict = self.availability.conflicts.find_conflict(
                        target_employee_id, new_start, duration,
                        exclude_reservation_id=reservation.id
                    )
                    if conflict is not None:
                        raise SlotUnavailableError(
                            f"Time slot conflicts with existing reservation on "
                            f"{conflict.start_at:%Y-%m-%d} from {conflict.start_at:%H:%M} - {conflict.end_at:%H:%M}"
                        )

                    reservation.employee_id = target_employee_id
                    reservation.start_at = new_start
                    reservation.end_at = new_start + timedelta(minutes=duration)
                    self._apply_status(reservation, new_status)
                    self.db.commit()
                except Exception:
                    self.db.rollback()
                    raise
        else:
            if moved:
                if self.db.get(Employee, target_employee_id) is None:
                    raise NotFoundError("Employee", target_employee_id)
                duration = reservation.end_at - reservation.start_at
                reservation.employee_id = target_employee_id
                reservation.start_at = new_start
                reservation.end_at = new_start + duration
            self._apply_status(reservation, new_status)
            self.db.commit()

        self.db.refresh(reservation)

        logger.info(
            "Reservation updated",
            extra={
                "reservation_id": reservation.id,
                "employee_id": reservation.employee_id,
                "start_at": to_iso(reservation.start_at),
                "status": reservation.status,
                "old_status": current_status.value,
            }
        )
        return reservation

    def get_reservation(self, reservation_id: int) -> Reservation:
        reservation = self.db.get(Reservation, reservation_id)
        if reservation is None:
            raise NotFoundError("Reservation", reservation_id)
        return reservation

    def list_reservations(
            self,
            client_id: Optional[str] = None,
            employee_id: Optional[int] = None,
            status: Optional[ReservationStatus] = None,
            on_date: Optional[date] = None,
            skip: int = 0,
            limit: int = 50
    ) -> List[Reservation]:
        """Reservations ordered by start time, optionally filtered"""
        query = self.db.query(Reservation)

        if client_id is not None:
            query = query.filter(Reservation.client_id == client_id)
        if employee_id is not None:
            query = query.filter(Reservation.employee_id == employee_id)
        if status is not None:
            query = query.filter(Reservation.status == status.value)
        if on_date is not None:
            day_start = datetime.combine(on_date, datetime.min.time())
            query = query.filter(
                Reservation.start_at >= day_start,
                Reservation.start_at < day_start + timedelta(days=1)
            )

        return query.order_by(Reservation.start_at.asc(), Reservation.id.asc()).offset(skip).limit(limit).all()

    def cancel_reservation(self, reservation_id: int) -> Reservation:
        """Mark a reservation cancelled; its interval becomes bookable again"""
        reservation = self.get_reservation(reservation_id)

        if reservation.status == ReservationStatus.COMPLETED.value:
            raise BookingValidationError("Completed reservations cannot be cancelled")

        if reservation.status != ReservationStatus.CANCELLED.value:
            self._apply_status(reservation, ReservationStatus.CANCELLED)
            self.db.commit()
            self.db.refresh(reservation)
            logger.info(f"Reservation {reservation_id} cancelled")

        return reservation

    @staticmethod
    def serialize(reservation: Reservation) -> Dict[str, Any]:
        return {
            "id": reservation.id,
            "employee_id": reservation.employee_id,
            "service_id": reservation.service_id,
            "client_id": reservation.client_id,
            "client_full_name": reservation.client_full_name,
            "client_phone": reservation.client_phone,
            "start_at": to_iso(reservation.start_at),
            "end_at": to_iso(reservation.end_at),
            "status": reservation.status,
            "type": reservation.type,
        }

    @staticmethod
    def _apply_status(reservation: Reservation, status: ReservationStatus) -> None:
        if reservation.status == status.value:
            return
        reservation.status = status.value
        if status == ReservationStatus.CANCELLED:
            reservation.cancelled_at = datetime.now(timezone.utc)
        else:
            reservation.cancelled_at = None
