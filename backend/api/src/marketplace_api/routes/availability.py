"""Availability endpoint for checking a listing's dates.

Only reservations in a blocking status hold dates: confirmed and active
rentals for vehicles, and also pending requests for stays. Ranges are
half-open, so a booking may start on the day another ends.
"""

import datetime as dt

from fastapi import APIRouter, Depends, Query

from marketplace.models import AvailabilityResult, DateRange
from marketplace.services.booking import BookingService
from marketplace_api.dependencies import get_booking_service

router = APIRouter(tags=["availability"])


@router.get(
    "/availability/{listing_id}",
    summary="Check listing availability",
    response_model=AvailabilityResult,
    responses={
        200: {
            "description": "Availability check completed",
            "content": {
                "application/json": {
                    "example": {
                        "listing_id": "stay-001",
                        "start_date": "2025-07-15",
                        "end_date": "2025-07-22",
                        "is_available": False,
                        "units": 7,
                        "conflicts": [{"start": "2025-07-20", "end": "2025-07-25"}],
                    }
                }
            },
        },
        400: {"description": "end_date must be after start_date"},
        404: {"description": "Listing not found"},
    },
)
async def check_availability(
    listing_id: str,
    start_date: dt.date = Query(..., description="First day (YYYY-MM-DD)"),
    end_date: dt.date = Query(..., description="Last day, exclusive (YYYY-MM-DD)"),
    service: BookingService = Depends(get_booking_service),
) -> AvailabilityResult:
    return service.check_availability(
        listing_id, DateRange(start=start_date, end=end_date)
    )
