"""Listing model: a vehicle or stay offered by a partner."""

from pydantic import BaseModel, Field

from .enums import ListingStatus, Vertical
from .rates import StayRates, VehicleRates


class Listing(BaseModel):
    """A bookable resource with its current rate configuration.

    ``booking_version`` is bumped by every write that makes a booking
    block dates, so concurrent check-then-insert attempts can be detected.
    """

    listing_id: str = Field(..., description="Unique listing ID")
    vertical: Vertical
    partner_id: str = Field(..., description="Owning partner")
    name: str = Field(..., min_length=1)
    status: ListingStatus = ListingStatus.AVAILABLE
    is_approved: bool = True
    contact_only: bool = Field(
        default=False,
        description="Partner takes bookings by direct contact only",
    )
    max_guests: int | None = Field(default=None, ge=1)
    min_nights: int | None = Field(default=None, ge=1)
    max_nights: int | None = Field(default=None, ge=1)
    vehicle_rates: VehicleRates | None = None
    stay_rates: StayRates | None = None
    booking_version: int = Field(default=0, ge=0)

    @property
    def is_bookable(self) -> bool:
        """Whether the listing accepts online booking requests."""
        return (
            self.status == ListingStatus.AVAILABLE
            and self.is_approved
            and not self.contact_only
        )
