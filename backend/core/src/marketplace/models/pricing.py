"""Price breakdown models produced by the calculators.

Breakdowns are immutable snapshots: they are stored on the booking record
so later rate changes never alter historical bookings. The deposit is
refundable and tracked separately, so ``total`` always equals ``subtotal``.
"""

from decimal import Decimal
from typing import Annotated, Literal

from pydantic import BaseModel, ConfigDict, Field

from .enums import PricingTier, RentalType


class VehiclePriceBreakdown(BaseModel):
    """Itemized price of a vehicle rental."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["vehicle"] = "vehicle"
    rental_type: RentalType
    with_driver: bool

    daily_rate: Decimal
    monthly_rate: Decimal
    total_days: int = Field(..., ge=0)
    total_months: int | None = Field(
        default=None,
        ge=0,
        description="30-day months billed, only for long-term rentals",
    )
    vehicle_subtotal: Decimal

    driver_daily_rate: Decimal
    driver_monthly_rate: Decimal
    driver_subtotal: Decimal

    included_km: int | None = Field(
        default=None,
        description="Kilometre allowance, None when mileage is unlimited",
    )
    extra_km_rate: Decimal | None = Field(
        default=None,
        description="Informational overage rate; overage is billed on return",
    )

    subtotal: Decimal
    deposit: Decimal
    total: Decimal

    price_per_unit: Decimal
    unit_label: Literal["day", "month"]


class StayPriceBreakdown(BaseModel):
    """Itemized price of a stay."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["stay"] = "stay"
    total_nights: int = Field(..., ge=0)
    price_per_night: Decimal
    nights_subtotal: Decimal
    weekly_discount: Decimal = Decimal("0")
    monthly_discount: Decimal = Decimal("0")
    pricing_tier: PricingTier = PricingTier.NIGHTLY
    cleaning_fee: Decimal = Decimal("0")
    subtotal: Decimal
    deposit: Decimal
    total: Decimal


PriceBreakdown = Annotated[
    VehiclePriceBreakdown | StayPriceBreakdown,
    Field(discriminator="kind"),
]
