"""API-specific request/response models.

Domain models (Booking, Listing, price breakdowns) are in marketplace.models
and are reused here where appropriate.

Modules:
- common: Error envelopes, validation error formatting, health
- bookings: Booking requests, quote responses and list wrappers
"""

__all__: list[str] = []
