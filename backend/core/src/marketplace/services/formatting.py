"""Display helpers for prices and rental types."""

from decimal import Decimal

from marketplace.models.enums import RentalType


def format_price(amount: Decimal | int, currency_label: str = "Rs") -> str:
    """Format an amount for display, e.g. ``Rs 15,000``.

    Whole amounts have no decimals; fractional amounts show two.
    """
    value = Decimal(amount)
    if not value.is_finite():
        value = Decimal("0")
    if value == value.to_integral_value():
        return f"{currency_label} {int(value):,}"
    return f"{currency_label} {value:,.2f}"


def rental_type_label(rental_type: RentalType) -> str:
    return "Long-term" if rental_type == RentalType.LONG_TERM else "Short-term"
