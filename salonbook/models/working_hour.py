# salonbook/models/working_hour.py
from sqlalchemy import Column, Integer, Time, ForeignKey, UniqueConstraint, CheckConstraint, Index, text
from salonbook.models.base import Base


class WorkingHour(Base):
    """
    Opening hours for one weekday.

    Rows without an employee form the salon-wide schedule (exactly seven rows,
    seeded once and only updated afterwards). Rows with an employee are
    per-employee overrides used when auto-assigning an employee to a booking.
    """
    __tablename__ = "working_hours"
    __table_args__ = (
        UniqueConstraint("employee_id", "weekday", name="uq_working_hours_scope_weekday"),
        CheckConstraint("weekday >= 0 AND weekday <= 6", name="ck_working_hours_weekday"),
        # NULL employee_id never collides in the constraint above
        Index(
            "uq_working_hours_global_weekday", "weekday", unique=True,
            postgresql_where=text("employee_id IS NULL"),
            sqlite_where=text("employee_id IS NULL"),
        ),
    )

    id = Column(Integer, primary_key=True)
    employee_id = Column(Integer, ForeignKey("employees.id", ondelete="CASCADE"), nullable=True, index=True)

    weekday = Column(Integer, nullable=False)  # 0=Sunday, 6=Saturday

    # Both NULL means closed that day
    start_time = Column(Time, nullable=True)
    end_time = Column(Time, nullable=True)

    # Optional break, both-or-neither
    break_start = Column(Time, nullable=True)
    break_end = Column(Time, nullable=True)

    @property
    def is_closed(self) -> bool:
        return self.start_time is None or self.end_time is None

    def __repr__(self):
        return f"<WorkingHour(weekday={self.weekday}, employee_id={self.employee_id})>"

    def to_dict(self):
        def fmt(value):
            return value.strftime("%H:%M") if value else None

        return {
            "weekday": self.weekday,
            "employee_id": self.employee_id,
            "start_time": fmt(self.start_time),
            "end_time": fmt(self.end_time),
            "break_start": fmt(self.break_start),
            "break_end": fmt(self.break_end),
            "is_closed": self.is_closed,
        }
