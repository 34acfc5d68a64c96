"""Booking models for vehicle rentals and stays."""

import datetime as dt
from decimal import Decimal
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .availability import DateRange, ExistingReservation, truncate_to_day
from .enums import BookingStatus, RentalType, Vertical
from .pricing import PriceBreakdown


class Booking(BaseModel):
    """A stored booking with its pricing snapshot.

    ``pricing`` is required: a booking without a breakdown cannot be loaded,
    so revenue code never has to guess an amount.
    """

    booking_id: str = Field(..., description="Unique booking ID")
    listing_id: str
    vertical: Vertical
    customer_id: str
    partner_id: str
    start_date: dt.date = Field(..., description="Pickup / check-in date")
    end_date: dt.date = Field(..., description="Return / check-out date")
    status: BookingStatus = BookingStatus.PENDING
    pricing: PriceBreakdown

    # Vehicle-only fields
    rental_type: RentalType | None = None
    with_driver: bool = False
    pickup_location: str | None = None
    dropoff_location: str | None = None
    notes: str | None = None

    # Stay-only fields
    guests: int | None = Field(default=None, ge=1)
    special_requests: str | None = None

    partner_confirmed: bool = False
    cancel_reason: str | None = None
    created_at: dt.datetime
    updated_at: dt.datetime

    @field_validator("start_date", "end_date", mode="before")
    @classmethod
    def _truncate(cls, value: Any) -> Any:
        return truncate_to_day(value)

    @property
    def date_range(self) -> DateRange:
        return DateRange(start=self.start_date, end=self.end_date)

    @property
    def subtotal(self) -> Decimal:
        return self.pricing.subtotal

    def to_reservation(self) -> ExistingReservation:
        """View of this booking for the conflict checker."""
        return ExistingReservation(
            start=self.start_date,
            end=self.end_date,
            status=self.status,
            booking_id=self.booking_id,
        )


class VehicleBookingCreate(BaseModel):
    """Data required to request a vehicle rental."""

    model_config = ConfigDict(strict=False)

    listing_id: str = Field(..., min_length=1)
    start_date: dt.date
    end_date: dt.date
    rental_type: RentalType = RentalType.SHORT_TERM
    with_driver: bool = False
    pickup_location: str = Field(..., min_length=1)
    # Optional for driver rentals; defaults to the pickup location
    dropoff_location: str | None = None
    notes: str | None = Field(default=None, max_length=1000)

    @field_validator("start_date", "end_date", mode="before")
    @classmethod
    def _truncate(cls, value: Any) -> Any:
        return truncate_to_day(value)


class StayBookingCreate(BaseModel):
    """Data required to request a stay."""

    model_config = ConfigDict(strict=False)

    listing_id: str = Field(..., min_length=1)
    check_in: dt.date
    check_out: dt.date
    guests: int = Field(..., ge=1)
    special_requests: str | None = Field(default=None, max_length=1000)

    @field_validator("check_in", "check_out", mode="before")
    @classmethod
    def _truncate(cls, value: Any) -> Any:
        return truncate_to_day(value)
