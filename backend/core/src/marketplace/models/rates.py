"""Rate configuration models for vehicle and stay listings.

Rates are stored as Decimal amounts in currency units. A required rate left
unset is representable on purpose: the calculators reject it with
MISSING_RATE instead of pricing the booking at zero.
"""

from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field


class VehicleRates(BaseModel):
    """Priced attributes of a vehicle listing."""

    model_config = ConfigDict(frozen=True)

    price_per_day: Decimal | None = Field(
        default=None,
        description="Daily rental rate (required for pricing, must be > 0)",
        examples=[Decimal("5000")],
    )
    price_per_km: Decimal | None = Field(
        default=None,
        ge=0,
        description="Rate for kilometres beyond the included allowance",
    )
    monthly_price: Decimal | None = Field(
        default=None,
        description="Rate per 30-day month for long-term rentals",
    )
    deposit_required: Decimal = Field(
        default=Decimal("0"),
        ge=0,
        description="Refundable deposit, tracked outside the total",
    )
    driver_price_per_day: Decimal | None = None
    driver_price_per_km: Decimal | None = None
    driver_price_per_month: Decimal | None = None
    included_km_per_day: int | None = Field(default=None, ge=0)
    included_km_per_month: int | None = Field(default=None, ge=0)
    unlimited_mileage: bool = False


class StayRates(BaseModel):
    """Priced attributes of a stay listing."""

    model_config = ConfigDict(frozen=True)

    price_per_night: Decimal | None = Field(
        default=None,
        description="Nightly rate (required for pricing, must be > 0)",
        examples=[Decimal("3000")],
    )
    price_per_week: Decimal | None = Field(
        default=None,
        description="Bundle price for 7 nights",
    )
    price_per_month: Decimal | None = Field(
        default=None,
        description="Bundle price for 30 nights",
    )
    cleaning_fee: Decimal | None = Field(default=None, ge=0)
    deposit_required: Decimal = Field(default=Decimal("0"), ge=0)
