# salonbook/schemas/availability.py
"""Request/response schemas for availability endpoints"""
from datetime import date, datetime
from typing import List, Optional
from pydantic import BaseModel, Field


class AvailabilityResponse(BaseModel):
    service_id: int
    employee_id: Optional[int] = None
    date: date
    slots: List[str] = Field(default_factory=list, description="ISO-8601 start instants")


class NearestSlotResponse(BaseModel):
    service_id: int
    employee_id: Optional[int] = None
    preferred_datetime: Optional[str] = None
    slot: Optional[str] = None


class EmployeeMatchResponse(BaseModel):
    service_id: int
    start_at: str
    duration: int
    employee_id: Optional[int] = None


class SlotCheckRequest(BaseModel):
    service_id: int = Field(..., ge=1)
    employee_id: Optional[int] = Field(None, ge=1)
    start_at: datetime


class SlotCheckResponse(BaseModel):
    service_id: int
    employee_id: Optional[int] = None
    start_at: str
    duration: int
    is_available: bool
