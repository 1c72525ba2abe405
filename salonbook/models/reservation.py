# salonbook/models/reservation.py
from sqlalchemy import Column, String, Integer, DateTime, ForeignKey, Index, CheckConstraint
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
import enum
from salonbook.models.base import Base


class ReservationStatus(str, enum.Enum):
    REQUESTED = "REQUESTED"
    CONFIRMED = "CONFIRMED"
    CANCELLED = "CANCELLED"
    COMPLETED = "COMPLETED"


class ReservationType(str, enum.Enum):
    ONLINE = "online"   # booked by an authenticated client
    MANUAL = "manual"   # entered by the owner for a walk-in or phone client


class Reservation(Base):
    __tablename__ = "reservations"
    __table_args__ = (
        Index("idx_reservations_employee_start", "employee_id", "start_at"),
        CheckConstraint("end_at > start_at", name="ck_reservations_interval"),
    )

    id = Column(Integer, primary_key=True)

    employee_id = Column(Integer, ForeignKey("employees.id"), nullable=False)
    service_id = Column(Integer, ForeignKey("services.id"), nullable=False)

    # Client info: client_id for online bookings, name/phone for manual ones
    client_id = Column(String(64), nullable=True)
    client_full_name = Column(String(120), nullable=True)
    client_phone = Column(String(40), nullable=True)

    # Half-open interval [start_at, end_at), salon wall-clock time
    start_at = Column(DateTime, nullable=False)
    end_at = Column(DateTime, nullable=False)

    status = Column(String(20), nullable=False, default=ReservationStatus.CONFIRMED.value)
    type = Column(String(20), nullable=False, default=ReservationType.ONLINE.value)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())
    cancelled_at = Column(DateTime(timezone=True), nullable=True)

    employee = relationship("Employee")
    service = relationship("Service")

    def __repr__(self):
        return f"<Reservation(id={self.id}, employee_id={self.employee_id}, start_at={self.start_at})>"
