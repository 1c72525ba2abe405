# salonbook/models/__init__.py
from .base import Base
from .employee import Employee, employee_services
from .service import Service
from .working_hour import WorkingHour
from .holiday import Holiday
from .reservation import Reservation, ReservationStatus, ReservationType

__all__ = [
    "Base",
    "Employee",
    "employee_services",
    "Service",
    "WorkingHour",
    "Holiday",
    "Reservation",
    "ReservationStatus",
    "ReservationType",
]
