# app/models/schedule_config.py
from datetime import datetime

from sqlalchemy import Column, DateTime, Integer, String

from app.db.base import Base


class ScheduleConfigRecord(Base):
    """
    Single-row table holding the recurring meeting schedule.
    """

    __tablename__ = "schedule_config"

    id = Column(Integer, primary_key=True)

    default_link = Column(String(1024), nullable=False)

    slot1_day = Column(Integer, nullable=False)
    slot1_time = Column(String(5), nullable=False)
    slot2_day = Column(Integer, nullable=False)
    slot2_time = Column(String(5), nullable=False)

    updated_at = Column(DateTime, nullable=False, default=datetime.now)

    def __repr__(self) -> str:
        return (
            f"<ScheduleConfigRecord slot1={self.slot1_day}@{self.slot1_time} "
            f"slot2={self.slot2_day}@{self.slot2_time}>"
        )
