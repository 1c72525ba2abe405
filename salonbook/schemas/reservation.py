# salonbook/schemas/reservation.py
from datetime import datetime
from typing import Optional
from pydantic import BaseModel, Field, model_validator

from salonbook.models.reservation import ReservationStatus, ReservationType


class ReservationCreate(BaseModel):
    """Booking request; manual bookings carry the walk-in client's details"""
    service_id: int = Field(..., ge=1)
    employee_id: Optional[int] = Field(None, ge=1)
    start_at: datetime
    type: ReservationType = ReservationType.ONLINE
    client_full_name: Optional[str] = Field(None, max_length=120)
    client_phone: Optional[str] = Field(None, max_length=40)

    @model_validator(mode="after")
    def manual_requires_client(self):
        if self.type == ReservationType.MANUAL and not (self.client_full_name and self.client_phone):
            raise ValueError("Manual reservations require client_full_name and client_phone")
        return self


class ReservationResponse(BaseModel):
    id: int
    employee_id: int
    service_id: int
    client_id: Optional[str] = None
    client_full_name: Optional[str] = None
    client_phone: Optional[str] = None
    start_at: str
    end_at: str
    status: str
    type: str


class ReservationUpdate(BaseModel):
    """Owner edits; clients may only send status=CANCELLED"""
    status: Optional[ReservationStatus] = None
    employee_id: Optional[int] = Field(None, ge=1)
    start_at: Optional[datetime] = None

    @model_validator(mode="after")
    def has_changes(self):
        if self.status is None and self.employee_id is None and self.start_at is None:
            raise ValueError("Provide at least one of status, employee_id or start_at")
        return self
