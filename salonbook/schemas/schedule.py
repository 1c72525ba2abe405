# salonbook/schemas/schedule.py
"""Working hours and holiday schemas"""
from datetime import date, time
from typing import Optional
from pydantic import BaseModel, Field


class WorkingHourUpdate(BaseModel):
    """Leave start/end empty to close the day"""
    start_time: Optional[time] = None
    end_time: Optional[time] = None
    break_start: Optional[time] = None
    break_end: Optional[time] = None


class WorkingHourResponse(BaseModel):
    weekday: int
    employee_id: Optional[int] = None
    start_time: Optional[str] = None
    end_time: Optional[str] = None
    break_start: Optional[str] = None
    break_end: Optional[str] = None
    is_closed: bool


class HolidayUpsert(BaseModel):
    name: str = Field(..., min_length=1, max_length=200)


class HolidayResponse(BaseModel):
    date: date
    name: str
