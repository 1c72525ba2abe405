# salonbook/models/service.py
"""
Service Model - bookable salon services
Duration drives how long a reservation blocks an employee.
"""
from sqlalchemy import Column, String, Numeric, Integer, Boolean, DateTime, Text, CheckConstraint
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from salonbook.models.base import Base
from salonbook.models.employee import employee_services


class Service(Base):
    __tablename__ = "services"
    __table_args__ = (
        CheckConstraint("duration_min > 0", name="ck_services_duration_positive"),
    )

    id = Column(Integer, primary_key=True)

    name = Column(String(200), nullable=False)
    description = Column(Text, nullable=True)

    # Duration in minutes, always positive
    duration_min = Column(Integer, nullable=False)
    price = Column(Numeric(10, 2), nullable=True)

    is_active = Column(Boolean, default=True, index=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now()
    )

    employees = relationship(
        "Employee",
        secondary=employee_services,
        back_populates="services",
        order_by="Employee.id",
    )

    def __repr__(self):
        return f"<Service(id={self.id}, name={self.name}, duration_min={self.duration_min})>"
