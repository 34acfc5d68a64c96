"""Date-range conflict detection against existing reservations.

Ranges are half-open [start, end): a booking ending on day D and another
starting on day D do not overlap, so same-day turnover is allowed.
"""

from collections.abc import Iterable

from marketplace.models.availability import DateRange, ExistingReservation
from marketplace.models.enums import BookingStatus


def overlaps(a: DateRange, b: DateRange) -> bool:
    """Return True if two half-open date ranges share at least one day."""
    return a.start < b.end and a.end > b.start


def find_conflicts(
    candidate: DateRange,
    existing: Iterable[ExistingReservation],
    blocking_statuses: Iterable[BookingStatus],
) -> list[ExistingReservation]:
    """List reservations that block the candidate range.

    Args:
        candidate: Requested range
        existing: Reservations already stored for the same listing
        blocking_statuses: Statuses that hold dates for this vertical

    Returns:
        Overlapping reservations whose status is blocking, in input order.
    """
    blocking = frozenset(blocking_statuses)
    return [
        reservation
        for reservation in existing
        if reservation.status in blocking
        and overlaps(candidate, reservation.date_range)
    ]


def has_conflict(
    candidate: DateRange,
    existing: Iterable[ExistingReservation],
    blocking_statuses: Iterable[BookingStatus],
) -> bool:
    """Return True if any blocking reservation overlaps the candidate range."""
    return bool(find_conflicts(candidate, existing, blocking_statuses))
