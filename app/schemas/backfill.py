# app/schemas/backfill.py
from datetime import date
from enum import Enum

from pydantic import BaseModel, Field


class BackfillPolicy(str, Enum):
    """
    How generated meetings are reconciled against stored ones.
    """

    ADD_MISSING = "add_missing"
    REPLACE_ALL = "replace_all"


class BackfillResult(BaseModel):
    """
    Summary payload returned by POST /admin/backfill.
    """

    policy: BackfillPolicy = Field(..., examples=["add_missing"])
    start_date: date = Field(..., examples=["2019-01-01"])
    end_date: date = Field(..., examples=["2026-11-14"])
    created_count: int = Field(
        ...,
        description="Number of meetings inserted (or that would be, on a dry run).",
        examples=[712],
    )
    deleted_count: int = Field(
        0,
        description="Number of existing meetings removed by a replace_all run.",
        examples=[0],
    )
    holidays_excluded_count: int = Field(
        ...,
        description="Number of slot occurrences skipped because they fell on a public holiday.",
        examples=[23],
    )
    dry_run: bool = Field(False, description="True when nothing was written.")
    message: str = Field(
        ...,
        examples=["Created 712 meetings (Thursday 19:00 & Saturday 13:00 since 2019-01-01)"],
    )

