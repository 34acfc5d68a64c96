"""Vehicle rental price calculation.

Pricing rule:
- SHORT_TERM: bill by days at the daily rate
- LONG_TERM with a monthly price: bill by 30-day months, rounded up
- LONG_TERM without a monthly price: fall back to daily billing

The driver surcharge follows the same billing basis as the vehicle. The
deposit is passed through and excluded from the total.
"""

from decimal import Decimal

from marketplace.models.availability import DateRange
from marketplace.models.enums import RentalType
from marketplace.models.errors import DomainError, ErrorCode
from marketplace.models.pricing import VehiclePriceBreakdown
from marketplace.models.rates import VehicleRates

from .duration import count_months, count_units

ZERO = Decimal("0")


def _is_positive(amount: Decimal | None) -> bool:
    return amount is not None and amount > 0


def _missing_rate(field: str) -> DomainError:
    return DomainError.from_code(ErrorCode.MISSING_RATE, details={"field": field})


def calculate_booking_price(
    rates: VehicleRates,
    date_range: DateRange,
    rental_type: RentalType,
    with_driver: bool = False,
) -> VehiclePriceBreakdown | DomainError:
    """Calculate the complete price breakdown for a vehicle rental.

    Args:
        rates: Rate configuration snapshot of the vehicle
        date_range: Pickup and return dates
        rental_type: SHORT_TERM or LONG_TERM
        with_driver: Whether a driver is booked with the vehicle

    Returns:
        VehiclePriceBreakdown, or a DomainError (MISSING_RATE when a
        required rate is absent or not positive, INVALID_DURATION when the
        range is empty).
    """
    if not _is_positive(rates.price_per_day):
        return _missing_rate("price_per_day")

    total_days = count_units(date_range.start, date_range.end)
    if total_days <= 0:
        return DomainError.from_code(ErrorCode.INVALID_DURATION)

    total_months = count_months(total_days, rental_type)
    is_long_term = rental_type == RentalType.LONG_TERM
    bill_monthly = is_long_term and rates.monthly_price is not None

    if bill_monthly:
        if not _is_positive(rates.monthly_price):
            return _missing_rate("monthly_price")
        daily_rate = ZERO
        monthly_rate = rates.monthly_price
        units = total_months or 0
        vehicle_subtotal = monthly_rate * units
    else:
        daily_rate = rates.price_per_day
        monthly_rate = ZERO
        units = total_days
        vehicle_subtotal = daily_rate * units

    driver_daily_rate = ZERO
    driver_monthly_rate = ZERO
    driver_subtotal = ZERO
    if with_driver:
        if bill_monthly:
            if not _is_positive(rates.driver_price_per_month):
                return _missing_rate("driver_price_per_month")
            driver_monthly_rate = rates.driver_price_per_month
            driver_subtotal = driver_monthly_rate * units
        else:
            if not _is_positive(rates.driver_price_per_day):
                return _missing_rate("driver_price_per_day")
            driver_daily_rate = rates.driver_price_per_day
            driver_subtotal = driver_daily_rate * units

    # Overage is billed on return, only the allowance and rate are surfaced
    if rates.unlimited_mileage:
        included_km = None
    elif is_long_term:
        included_km = (rates.included_km_per_month or 0) * (total_months or 0)
    else:
        included_km = (rates.included_km_per_day or 0) * total_days

    subtotal = vehicle_subtotal + driver_subtotal

    return VehiclePriceBreakdown(
        rental_type=rental_type,
        with_driver=with_driver,
        daily_rate=daily_rate,
        monthly_rate=monthly_rate,
        total_days=total_days,
        total_months=total_months,
        vehicle_subtotal=vehicle_subtotal,
        driver_daily_rate=driver_daily_rate,
        driver_monthly_rate=driver_monthly_rate,
        driver_subtotal=driver_subtotal,
        included_km=included_km,
        extra_km_rate=rates.price_per_km,
        subtotal=subtotal,
        deposit=rates.deposit_required,
        total=subtotal,
        price_per_unit=monthly_rate if bill_monthly else daily_rate,
        unit_label="month" if bill_monthly else "day",
    )
