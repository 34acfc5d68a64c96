"""Pydantic models for marketplace data entities."""

from .availability import AvailabilityResult, DateRange, ExistingReservation
from .booking import Booking, StayBookingCreate, VehicleBookingCreate
from .earnings import EarningsSummary, MonthlyEarnings, RecentTransaction
from .enums import (
    BookingStatus,
    ListingStatus,
    PricingTier,
    RentalType,
    Role,
    Vertical,
)
from .errors import (
    ERROR_MESSAGES,
    ERROR_RECOVERY,
    BookingError,
    DomainError,
    ErrorCode,
)
from .listing import Listing
from .pricing import PriceBreakdown, StayPriceBreakdown, VehiclePriceBreakdown
from .rates import StayRates, VehicleRates

__all__ = [
    # Enums
    "BookingStatus",
    "ListingStatus",
    "PricingTier",
    "RentalType",
    "Role",
    "Vertical",
    # Rates
    "StayRates",
    "VehicleRates",
    # Availability
    "AvailabilityResult",
    "DateRange",
    "ExistingReservation",
    # Pricing
    "PriceBreakdown",
    "StayPriceBreakdown",
    "VehiclePriceBreakdown",
    # Listing / Booking
    "Listing",
    "Booking",
    "StayBookingCreate",
    "VehicleBookingCreate",
    # Earnings
    "EarningsSummary",
    "MonthlyEarnings",
    "RecentTransaction",
    # Errors
    "BookingError",
    "DomainError",
    "ErrorCode",
    "ERROR_MESSAGES",
    "ERROR_RECOVERY",
]
