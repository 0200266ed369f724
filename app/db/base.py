# app/db/base.py
from sqlalchemy.orm import DeclarativeBase


class Base(DeclarativeBase):
    """
    Base class for all SQLAlchemy ORM models in the Team Calendar service.
    """
    pass


# Import ORM models so that Base.metadata is aware of them
# This import should stay at the bottom to avoid circular dependencies.
from app.models.meeting import Meeting  # noqa: E402,F401
from app.models.schedule_config import ScheduleConfigRecord  # noqa: E402,F401
