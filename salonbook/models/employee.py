# salonbook/models/employee.py
from sqlalchemy import Column, String, Integer, Boolean, DateTime, Table, ForeignKey
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from salonbook.models.base import Base


# Association table for many-to-many Employee <-> Service
employee_services = Table(
    "employee_services",
    Base.metadata,
    Column("employee_id", Integer, ForeignKey("employees.id", ondelete="CASCADE"), primary_key=True),
    Column("service_id", Integer, ForeignKey("services.id", ondelete="CASCADE"), primary_key=True),
)


class Employee(Base):
    __tablename__ = "employees"

    id = Column(Integer, primary_key=True)
    full_name = Column(String(120), nullable=False)
    email = Column(String(255), nullable=True)
    phone = Column(String(40), nullable=True)
    is_active = Column(Boolean, default=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now())

    services = relationship(
        "Service",
        secondary=employee_services,
        back_populates="employees",
    )

    def __repr__(self):
        return f"<Employee(id={self.id}, full_name={self.full_name})>"
