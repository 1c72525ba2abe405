# salonbook/core/exceptions.py
"""Domain errors raised by the service layer and mapped to HTTP codes by the routes"""


class SalonError(Exception):
    """Base class for expected domain failures"""


class NotFoundError(SalonError):
    """A referenced service, employee or reservation does not exist"""

    def __init__(self, entity: str, entity_id):
        self.entity = entity
        self.entity_id = entity_id
        super().__init__(f"{entity} {entity_id} not found")


class BookingValidationError(SalonError):
    """Input that can never be booked or stored as given"""


class SlotUnavailableError(SalonError):
    """The requested interval overlaps an existing reservation"""


class NoEmployeeAvailableError(SalonError):
    """No employee offering the service is free at the requested time"""
