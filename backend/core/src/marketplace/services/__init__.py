"""Pricing, availability and booking services for the marketplace."""

from .booking import BookingService
from .conflicts import find_conflicts, has_conflict, overlaps
from .duration import LONG_TERM_MONTH_DAYS, count_months, count_units, validate_duration
from .dynamodb import DynamoDBService, get_dynamodb_service, reset_dynamodb_service
from .earnings import summarize_earnings
from .formatting import format_price, rental_type_label
from .listings import ListingService
from .pricing import calculate_booking_price
from .status_policy import StatusTransitionPolicy
from .stays_pricing import calculate_stays_booking_price

__all__ = [
    # Engine
    "LONG_TERM_MONTH_DAYS",
    "count_months",
    "count_units",
    "validate_duration",
    "calculate_booking_price",
    "calculate_stays_booking_price",
    "find_conflicts",
    "has_conflict",
    "overlaps",
    "StatusTransitionPolicy",
    "summarize_earnings",
    "format_price",
    "rental_type_label",
    # Persistence and workflow
    "DynamoDBService",
    "get_dynamodb_service",
    "reset_dynamodb_service",
    "ListingService",
    "BookingService",
]
