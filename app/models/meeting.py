# app/models/meeting.py
from datetime import datetime

from sqlalchemy import Column, Date, DateTime, Integer, String, Text, UniqueConstraint

from app.db.base import Base


class Meeting(Base):
    """
    A single persisted team meeting, identified naturally by (date, time).
    """

    __tablename__ = "meetings"

    id = Column(Integer, primary_key=True, index=True)

    date = Column(Date, nullable=False, index=True)
    # "HH:MM", zero padded; part of the natural key
    time = Column(String(5), nullable=False)

    title = Column(String(255), nullable=False)
    notes = Column(Text, nullable=False, default="")
    link = Column(String(1024), nullable=False, default="")

    created_at = Column(DateTime, nullable=False, default=datetime.now)
    updated_at = Column(
        DateTime,
        nullable=False,
        default=datetime.now,
        onupdate=datetime.now,
    )

    __table_args__ = (
        UniqueConstraint(
            "date",
            "time",
            name="uq_meetings_date_time",
        ),
    )

    def __repr__(self) -> str:
        return f"<Meeting id={self.id} date={self.date} time={self.time}>"
