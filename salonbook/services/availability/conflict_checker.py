# salonbook/services/availability/conflict_checker.py
from datetime import datetime, timedelta
from typing import Optional

from sqlalchemy.orm import Session

from salonbook.models.reservation import Reservation, ReservationStatus


class ConflictChecker:
    """Overlap test against an employee's non-cancelled reservations"""

    def __init__(self, db: Session):
        self.db = db

    def _overlapping(
            self,
            employee_id: int,
            start: datetime,
            duration_minutes: int,
            exclude_reservation_id: Optional[int] = None
    ):
        end = start + timedelta(minutes=duration_minutes)

        # Strict comparisons: back-to-back reservations do not conflict
        query = self.db.query(Reservation).filter(
            Reservation.employee_id == employee_id,
            Reservation.status != ReservationStatus.CANCELLED.value,
            Reservation.start_at < end,
            Reservation.end_at > start,
        )
        if exclude_reservation_id is not None:
            query = query.filter(Reservation.id != exclude_reservation_id)
        return query

    def is_slot_available(
            self,
            employee_id: int,
            start: datetime,
            duration_minutes: int,
            exclude_reservation_id: Optional[int] = None
    ) -> bool:
        query = self._overlapping(employee_id, start, duration_minutes, exclude_reservation_id)
        return not self.db.query(query.exists()).scalar()

    def find_conflict(
            self,
            employee_id: int,
            start: datetime,
            duration_minutes: int,
            exclude_reservation_id: Optional[int] = None
    ) -> Optional[Reservation]:
        """First overlapping reservation by start time, if any"""
        query = self._overlapping(employee_id, start, duration_minutes, exclude_reservation_id)
        return query.order_by(Reservation.start_at.asc()).first()
