# app/core/exceptions.py
"""Exceptions raised by the meeting generation pipeline and its storage boundary."""


class CalendarError(Exception):
    """Base exception for team calendar errors."""


class InvalidSlotDefinition(CalendarError, ValueError):
    """
    Raised when a configured weekly slot cannot be used for generation.

    Covers a day_of_week outside [0, 6], a time that is not zero-padded
    24-hour "HH:MM", and two slots that share the same (day_of_week, time).
    """


class StorageUnavailable(CalendarError):
    """Raised when the meeting or config store cannot be reached. Retryable."""


class MeetingConflictError(CalendarError):
    """
    Raised when the store rejects a write because the (date, time) natural key
    already exists. Indicates a concurrent writer or a stale snapshot.
    """


class BackfillError(CalendarError):
    """
    Raised when applying a backfill write-set fails.

    Attributes
    ----------
    created_count:
        Number of meetings that were committed before the failure.
    partial_write:
        False when storage was left untouched, True when some batches were
        already committed. A partial write is repaired by rerunning the
        ADD_MISSING backfill.
    """

    def __init__(self, message: str, created_count: int = 0, deleted: bool = False):
        super().__init__(message)
        self.created_count = created_count
        self.partial_write = created_count > 0 or deleted
