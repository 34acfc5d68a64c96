"""API models for booking, quote and earnings endpoints."""

from pydantic import BaseModel, ConfigDict, Field

from marketplace.models import (
    Booking,
    BookingStatus,
    StayPriceBreakdown,
    VehiclePriceBreakdown,
)


class StatusUpdateRequest(BaseModel):
    """Partner or admin request to move a booking to a new status."""

    model_config = ConfigDict(
        json_schema_extra={"examples": [{"status": "CONFIRMED"}]},
    )

    status: BookingStatus = Field(..., description="Target status")


class CancelRequest(BaseModel):
    """Customer cancellation with a mandatory reason."""

    model_config = ConfigDict(
        json_schema_extra={
            "examples": [{"reason": "Travel plans changed, no longer needed"}]
        },
    )

    reason: str = Field(
        ...,
        min_length=10,
        max_length=500,
        description="Why the booking is cancelled (at least 10 characters)",
    )


class BookingListResponse(BaseModel):
    """Bookings visible to the caller."""

    bookings: list[Booking]
    total: int = Field(..., ge=0)


class VehicleQuoteResponse(BaseModel):
    """Price quote for a vehicle rental."""

    listing_id: str
    breakdown: VehiclePriceBreakdown
    rental_type_label: str = Field(..., examples=["Short-term"])
    formatted_total: str = Field(..., examples=["Rs 15,000"])
    formatted_deposit: str = Field(..., examples=["Rs 10,000"])


class StayQuoteResponse(BaseModel):
    """Price quote for a stay."""

    listing_id: str
    breakdown: StayPriceBreakdown
    formatted_total: str = Field(..., examples=["Rs 21,000"])
    formatted_deposit: str = Field(..., examples=["Rs 0"])
