"""Day/night counting and duration rules.

Counts are whole calendar days: both ends are truncated to their own
calendar day before differencing, so a time-of-day component never adds a
partial unit. Long-term rentals use a fixed 30-day month, not calendar
months; billing depends on this exact constant.
"""

import datetime as dt
import math

from marketplace.models.availability import DateRange, truncate_to_day
from marketplace.models.enums import RentalType
from marketplace.models.errors import DomainError, ErrorCode

LONG_TERM_MONTH_DAYS = 30


def count_units(start: dt.date, end: dt.date) -> int:
    """Count days (vehicles) or nights (stays) between two dates.

    Example: Feb 1 -> Feb 2 is 1 unit.

    Args:
        start: Pickup / check-in date (datetimes are truncated)
        end: Return / check-out date (datetimes are truncated)

    Returns:
        Number of units, 0 when end <= start. Callers must reject 0.
    """
    start_day = truncate_to_day(start)
    end_day = truncate_to_day(end)
    diff = (end_day - start_day).days
    if diff <= 0:
        return 0
    return diff


def count_months(total_days: int, rental_type: RentalType) -> int | None:
    """Count 30-day months billed for a long-term rental.

    Returns:
        ceil(total_days / 30) for LONG_TERM, None otherwise.
    """
    if rental_type != RentalType.LONG_TERM:
        return None
    if total_days <= 0:
        return 0
    return math.ceil(total_days / LONG_TERM_MONTH_DAYS)


def _plural(count: int, word: str) -> str:
    return f"{count} {word}" if count == 1 else f"{count} {word}s"


def validate_duration(
    date_range: DateRange,
    rental_type: RentalType | None = None,
    min_nights: int | None = None,
    max_nights: int | None = None,
) -> DomainError | None:
    """Check that a date range is legal for a rental or stay.

    Vehicle rules apply when ``rental_type`` is given; stay bounds apply when
    ``min_nights`` / ``max_nights`` are given.

    Args:
        date_range: Requested range
        rental_type: Vehicle rental type, None for stays
        min_nights: Minimum stay, inclusive
        max_nights: Maximum stay, inclusive

    Returns:
        None if legal, otherwise a DomainError with INVALID_DURATION,
        DURATION_TOO_SHORT or DURATION_TOO_LONG.
    """
    units = count_units(date_range.start, date_range.end)
    requested = {"requested": str(units)}

    if units <= 0:
        return DomainError.from_code(ErrorCode.INVALID_DURATION, details=requested)

    if rental_type == RentalType.LONG_TERM and units < LONG_TERM_MONTH_DAYS:
        return DomainError.from_code(
            ErrorCode.DURATION_TOO_SHORT,
            details={**requested, "minimum": str(LONG_TERM_MONTH_DAYS)},
            message=(
                f"Long-term rentals require a minimum of {LONG_TERM_MONTH_DAYS} "
                f"days (1 month)"
            ),
        )

    if min_nights is not None and units < min_nights:
        return DomainError.from_code(
            ErrorCode.DURATION_TOO_SHORT,
            details={**requested, "minimum": str(min_nights)},
            message=f"Minimum stay is {_plural(min_nights, 'night')}",
        )

    if max_nights is not None and units > max_nights:
        return DomainError.from_code(
            ErrorCode.DURATION_TOO_LONG,
            details={**requested, "maximum": str(max_nights)},
            message=f"Maximum stay is {_plural(max_nights, 'night')}",
        )

    return None
