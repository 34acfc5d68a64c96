"""Partner earnings aggregation over completed bookings.

Amounts come from the subtotal of each booking's pricing snapshot. The
snapshot is a required field of Booking, so there is no fallback to zero
for a booking with missing pricing.
"""

import datetime as dt
from collections.abc import Iterable
from decimal import ROUND_FLOOR, Decimal

from marketplace.models.booking import Booking
from marketplace.models.earnings import EarningsSummary, MonthlyEarnings, RecentTransaction
from marketplace.models.enums import BookingStatus

ZERO = Decimal("0")
MONTHS_IN_CHART = 12
RECENT_LIMIT = 10
HALF = Decimal("0.5")


def _shift_month(first_of_month: dt.date, months: int) -> dt.date:
    """Move a first-of-month date by a number of months."""
    years, month_index = divmod(first_of_month.month - 1 + months, 12)
    return dt.date(first_of_month.year + years, month_index + 1, 1)


def _sum(bookings: Iterable[Booking]) -> Decimal:
    return sum((b.subtotal for b in bookings), ZERO)


def _growth(this_month: Decimal, last_month: Decimal) -> int:
    if last_month > 0:
        percent = (this_month - last_month) / last_month * 100
        # Halves round toward positive infinity: 2.5 -> 3, -2.5 -> -2
        return int((percent + HALF).to_integral_value(rounding=ROUND_FLOOR))
    return 100 if this_month > 0 else 0


def _recent(completed: list[Booking]) -> list[RecentTransaction]:
    latest = sorted(completed, key=lambda b: b.end_date, reverse=True)[:RECENT_LIMIT]
    return [
        RecentTransaction(
            booking_id=b.booking_id,
            listing_id=b.listing_id,
            amount=b.subtotal,
            start_date=b.start_date,
            end_date=b.end_date,
        )
        for b in latest
    ]


def summarize_earnings(bookings: Iterable[Booking], today: dt.date) -> EarningsSummary:
    """Summarize revenue from a partner's bookings.

    Only COMPLETED bookings count. Months are assigned by booking end date.

    Args:
        bookings: Bookings of one partner (any status)
        today: Reference date for the current month and year

    Returns:
        EarningsSummary with totals, a 12-month series, growth percent and
        the most recent completed bookings.
    """
    completed = [b for b in bookings if b.status == BookingStatus.COMPLETED]

    this_month_start = today.replace(day=1)
    last_month_start = _shift_month(this_month_start, -1)
    year_start = dt.date(today.year, 1, 1)

    monthly: list[MonthlyEarnings] = []
    for offset in range(MONTHS_IN_CHART - 1, -1, -1):
        month_start = _shift_month(this_month_start, -offset)
        next_month = _shift_month(month_start, 1)
        in_month = [b for b in completed if month_start <= b.end_date < next_month]
        monthly.append(
            MonthlyEarnings(
                month=month_start.strftime("%b %Y"),
                earnings=_sum(in_month),
                bookings=len(in_month),
            )
        )

    this_month = [b for b in completed if b.end_date >= this_month_start]
    last_month = [
        b for b in completed if last_month_start <= b.end_date < this_month_start
    ]
    this_month_earnings = _sum(this_month)
    last_month_earnings = _sum(last_month)

    return EarningsSummary(
        total_earnings=_sum(completed),
        this_month_earnings=this_month_earnings,
        last_month_earnings=last_month_earnings,
        year_earnings=_sum(b for b in completed if b.end_date >= year_start),
        this_month_bookings=len(this_month),
        total_bookings=len(completed),
        monthly=monthly,
        growth=_growth(this_month_earnings, last_month_earnings),
        recent=_recent(completed),
    )
