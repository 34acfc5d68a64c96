"""Stay price calculation with tiered bundling.

Rule: choose the cheapest among
- nightly pricing
- weekly bundles + remaining nights (7+ nights, weekly price set)
- monthly bundles + remaining nights (30+ nights, monthly price set)

Ties keep the first candidate in that order, so nightly beats an equal
weekly total and weekly beats an equal monthly total.
"""

from decimal import Decimal

from marketplace.models.availability import DateRange
from marketplace.models.enums import PricingTier
from marketplace.models.errors import DomainError, ErrorCode
from marketplace.models.pricing import StayPriceBreakdown
from marketplace.models.rates import StayRates

from .duration import LONG_TERM_MONTH_DAYS, count_units

WEEK_NIGHTS = 7
MONTH_NIGHTS = LONG_TERM_MONTH_DAYS

ZERO = Decimal("0")


def _bundle_total(
    nights: int,
    bundle_nights: int,
    bundle_price: Decimal,
    nightly_rate: Decimal,
) -> Decimal:
    bundles, remaining = divmod(nights, bundle_nights)
    return bundles * bundle_price + remaining * nightly_rate


def _missing_rate(field: str) -> DomainError:
    return DomainError.from_code(ErrorCode.MISSING_RATE, details={"field": field})


def calculate_stays_booking_price(
    rates: StayRates,
    date_range: DateRange,
) -> StayPriceBreakdown | DomainError:
    """Calculate the complete price breakdown for a stay.

    Args:
        rates: Rate configuration snapshot of the property
        date_range: Check-in and check-out dates

    Returns:
        StayPriceBreakdown, or a DomainError (MISSING_RATE for an absent or
        non-positive nightly rate, or a bundle rate that is set but not
        positive, INVALID_DURATION for zero nights).
    """
    price_per_night = rates.price_per_night
    if price_per_night is None or price_per_night <= 0:
        return _missing_rate("price_per_night")

    total_nights = count_units(date_range.start, date_range.end)
    if total_nights <= 0:
        return DomainError.from_code(ErrorCode.INVALID_DURATION)

    base_total = price_per_night * total_nights

    candidates: list[tuple[PricingTier, Decimal]] = [(PricingTier.NIGHTLY, base_total)]
    if rates.price_per_week is not None and total_nights >= WEEK_NIGHTS:
        if rates.price_per_week <= 0:
            return _missing_rate("price_per_week")
        candidates.append(
            (
                PricingTier.WEEKLY,
                _bundle_total(total_nights, WEEK_NIGHTS, rates.price_per_week, price_per_night),
            )
        )
    if rates.price_per_month is not None and total_nights >= MONTH_NIGHTS:
        if rates.price_per_month <= 0:
            return _missing_rate("price_per_month")
        candidates.append(
            (
                PricingTier.MONTHLY,
                _bundle_total(total_nights, MONTH_NIGHTS, rates.price_per_month, price_per_night),
            )
        )

    # min() keeps the first of equal totals
    tier, nights_subtotal = min(candidates, key=lambda candidate: candidate[1])

    # Savings versus plain nightly pricing, display only
    savings = base_total - nights_subtotal
    weekly_discount = savings if tier == PricingTier.WEEKLY else ZERO
    monthly_discount = savings if tier == PricingTier.MONTHLY else ZERO

    cleaning_fee = rates.cleaning_fee if rates.cleaning_fee is not None else ZERO
    subtotal = nights_subtotal + cleaning_fee

    return StayPriceBreakdown(
        total_nights=total_nights,
        price_per_night=price_per_night,
        nights_subtotal=nights_subtotal,
        weekly_discount=weekly_discount,
        monthly_discount=monthly_discount,
        pricing_tier=tier,
        cleaning_fee=cleaning_fee,
        subtotal=subtotal,
        deposit=rates.deposit_required,
        total=subtotal,
    )
