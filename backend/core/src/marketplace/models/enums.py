"""Enumeration types for marketplace data models."""

from enum import Enum


class Vertical(str, Enum):
    """Marketplace vertical a listing belongs to."""

    VEHICLE = "VEHICLE"
    STAY = "STAY"


class RentalType(str, Enum):
    """Billing mode for a vehicle rental."""

    SHORT_TERM = "SHORT_TERM"
    LONG_TERM = "LONG_TERM"


class BookingStatus(str, Enum):
    """Lifecycle status of a booking."""

    PENDING = "PENDING"
    CONFIRMED = "CONFIRMED"
    ACTIVE = "ACTIVE"
    COMPLETED = "COMPLETED"
    CANCELLED = "CANCELLED"
    REJECTED = "REJECTED"


class ListingStatus(str, Enum):
    """Whether a listing accepts new bookings."""

    AVAILABLE = "AVAILABLE"
    UNAVAILABLE = "UNAVAILABLE"
    MAINTENANCE = "MAINTENANCE"


class PricingTier(str, Enum):
    """Bundle chosen by the stays calculator."""

    NIGHTLY = "nightly"
    WEEKLY = "weekly"
    MONTHLY = "monthly"


class Role(str, Enum):
    """Caller role forwarded by the identity provider."""

    CUSTOMER = "CUSTOMER"
    PARTNER = "PARTNER"
    ADMIN = "ADMIN"
