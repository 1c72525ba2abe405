# salonbook/models/holiday.py
from sqlalchemy import Column, String, Date
from salonbook.models.base import Base


class Holiday(Base):
    """A closed date; presence of a row closes the salon regardless of weekday"""
    __tablename__ = "holidays"

    date = Column(Date, primary_key=True)
    name = Column(String(200), nullable=False)

    def __repr__(self):
        return f"<Holiday(date={self.date}, name={self.name})>"

    def to_dict(self):
        return {"date": self.date.isoformat(), "name": self.name}
