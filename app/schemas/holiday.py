# app/schemas/holiday.py
from datetime import date

from pydantic import BaseModel, Field


class HolidayList(BaseModel):
    """
    Public holidays of one year (GET /admin/holidays/{year}).
    """

    year: int = Field(..., examples=[2025])
    region: str = Field("IE", examples=["IE"])
    holidays: list[date] = Field(
        ...,
        description="Dates on which no meeting is generated, ascending.",
    )
