# salonbook/schemas/__init__.py
from .availability import (
    AvailabilityResponse,
    NearestSlotResponse,
    EmployeeMatchResponse,
    SlotCheckRequest,
    SlotCheckResponse,
)

from .reservation import (
    ReservationCreate,
    ReservationResponse,
    ReservationUpdate,
)

from .schedule import (
    WorkingHourUpdate,
    WorkingHourResponse,
    HolidayUpsert,
    HolidayResponse,
)

__all__ = [
    "AvailabilityResponse",
    "NearestSlotResponse",
    "EmployeeMatchResponse",
    "SlotCheckRequest",
    "SlotCheckResponse",
    "ReservationCreate",
    "ReservationResponse",
    "ReservationUpdate",
    "WorkingHourUpdate",
    "WorkingHourResponse",
    "HolidayUpsert",
    "HolidayResponse",
]
