"""Date range and reservation models used for availability checks."""

import datetime as dt
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .enums import BookingStatus


def truncate_to_day(value: Any) -> Any:
    """Drop the time-of-day component of a datetime, leave other values alone."""
    if isinstance(value, dt.datetime):
        return value.date()
    return value


class DateRange(BaseModel):
    """Half-open calendar range [start, end).

    ``end`` is the check-out / return day and is not itself occupied.
    The model does not require end > start; validate_duration does.
    """

    model_config = ConfigDict(frozen=True)

    start: dt.date = Field(..., description="First day (check-in / pickup)")
    end: dt.date = Field(..., description="Last day, exclusive (check-out / return)")

    @field_validator("start", "end", mode="before")
    @classmethod
    def _truncate(cls, value: Any) -> Any:
        return truncate_to_day(value)


class ExistingReservation(BaseModel):
    """A stored booking as seen by the conflict checker."""

    model_config = ConfigDict(frozen=True)

    start: dt.date
    end: dt.date
    status: BookingStatus
    booking_id: str | None = None

    @field_validator("start", "end", mode="before")
    @classmethod
    def _truncate(cls, value: Any) -> Any:
        return truncate_to_day(value)

    @property
    def date_range(self) -> DateRange:
        return DateRange(start=self.start, end=self.end)


class AvailabilityResult(BaseModel):
    """Outcome of an availability check for one listing."""

    listing_id: str
    start_date: dt.date
    end_date: dt.date
    is_available: bool
    units: int = Field(..., ge=0, description="Days or nights in the range")
    conflicts: list[DateRange] = Field(
        default_factory=list,
        description="Blocking reservations overlapping the range",
    )
