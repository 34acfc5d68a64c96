"""Booking status transition rules per vertical.

Vehicle bookings:
- PENDING -> CONFIRMED | REJECTED
- CONFIRMED -> ACTIVE | COMPLETED | CANCELLED
- ACTIVE -> COMPLETED

Stay bookings:
- PENDING -> CONFIRMED | REJECTED
- CONFIRMED -> ACTIVE | CANCELLED
- ACTIVE -> COMPLETED | CANCELLED

COMPLETED, CANCELLED and REJECTED are terminal. Customers may cancel
their own booking while it is PENDING or CONFIRMED.
"""

from collections.abc import Mapping

from marketplace.models.enums import BookingStatus, Vertical
from marketplace.models.errors import DomainError, ErrorCode

Transitions = Mapping[BookingStatus, frozenset[BookingStatus]]


class StatusTransitionPolicy:
    """Lookup table of allowed status changes for one vertical."""

    VEHICLE_TRANSITIONS: Transitions = {
        BookingStatus.PENDING: frozenset({BookingStatus.CONFIRMED, BookingStatus.REJECTED}),
        BookingStatus.CONFIRMED: frozenset(
            {BookingStatus.ACTIVE, BookingStatus.COMPLETED, BookingStatus.CANCELLED}
        ),
        BookingStatus.ACTIVE: frozenset({BookingStatus.COMPLETED}),
    }

    STAY_TRANSITIONS: Transitions = {
        BookingStatus.PENDING: frozenset({BookingStatus.CONFIRMED, BookingStatus.REJECTED}),
        BookingStatus.CONFIRMED: frozenset({BookingStatus.ACTIVE, BookingStatus.CANCELLED}),
        BookingStatus.ACTIVE: frozenset({BookingStatus.COMPLETED, BookingStatus.CANCELLED}),
    }

    CUSTOMER_CANCELLABLE: frozenset[BookingStatus] = frozenset(
        {BookingStatus.PENDING, BookingStatus.CONFIRMED}
    )

    def __init__(self, transitions: Transitions) -> None:
        self.transitions = transitions

    @classmethod
    def for_vertical(cls, vertical: Vertical) -> "StatusTransitionPolicy":
        """Get the policy for a vertical."""
        if vertical == Vertical.VEHICLE:
            return cls(cls.VEHICLE_TRANSITIONS)
        return cls(cls.STAY_TRANSITIONS)

    def allowed_targets(self, current: BookingStatus) -> frozenset[BookingStatus]:
        return self.transitions.get(current, frozenset())

    def can_transition(self, current: BookingStatus, target: BookingStatus) -> bool:
        return target in self.allowed_targets(current)

    def validate(
        self,
        current: BookingStatus,
        target: BookingStatus,
    ) -> DomainError | None:
        """Check a status change.

        Returns:
            None if allowed, otherwise INVALID_STATUS_TRANSITION.
        """
        if self.can_transition(current, target):
            return None
        return DomainError.from_code(
            ErrorCode.INVALID_STATUS_TRANSITION,
            details={"from": current.value, "to": target.value},
            message=f"Cannot change status from {current.value} to {target.value}",
        )

    def can_cancel(self, current: BookingStatus) -> bool:
        """Whether the customer may cancel a booking in this status."""
        return current in self.CUSTOMER_CANCELLABLE
