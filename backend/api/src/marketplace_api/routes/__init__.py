"""API routes package.

Routers are organized by domain:

- health: Health check endpoint
- pricing: Vehicle and stay quotes
- availability: Date availability per listing
- bookings: Booking lifecycle
- earnings: Partner revenue summary

All routers are registered in main.py with /api prefix.
"""

from marketplace_api.routes.availability import router as availability_router
from marketplace_api.routes.bookings import router as bookings_router
from marketplace_api.routes.earnings import router as earnings_router
from marketplace_api.routes.health import router as health_router
from marketplace_api.routes.pricing import router as pricing_router

__all__ = [
    "availability_router",
    "bookings_router",
    "earnings_router",
    "health_router",
    "pricing_router",
]
