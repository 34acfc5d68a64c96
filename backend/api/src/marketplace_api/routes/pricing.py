"""Pricing endpoints for vehicle and stay quotes.

Provides REST endpoints for:
- Vehicle rental quotes (short-term daily or long-term monthly, optional driver)
- Stay quotes with nightly, weekly and monthly tiers

Quotes are public and do not reserve anything. Amounts are decimal values
in the marketplace currency; the deposit is refundable and not part of
the total.
"""

import datetime as dt

from fastapi import APIRouter, Depends, Query

from marketplace.config import get_settings
from marketplace.models import DateRange, RentalType
from marketplace.services.booking import BookingService
from marketplace.services.formatting import format_price, rental_type_label
from marketplace_api.dependencies import get_booking_service
from marketplace_api.models.bookings import StayQuoteResponse, VehicleQuoteResponse

router = APIRouter(tags=["pricing"])


@router.get(
    "/pricing/vehicles/{listing_id}",
    summary="Quote a vehicle rental",
    description="""
Calculate the price of renting a vehicle for a date range.

**Notes:**
- end_date is the return day and is not billed
- LONG_TERM rentals need at least 30 days and bill per started 30-day month
  when the vehicle has a monthly price
- with_driver adds the driver surcharge on the same billing basis
""",
    response_model=VehicleQuoteResponse,
    responses={
        400: {"description": "Invalid or too short duration"},
        404: {"description": "Vehicle listing not found"},
        422: {"description": "Listing pricing is incomplete"},
    },
)
async def quote_vehicle(
    listing_id: str,
    start_date: dt.date = Query(..., description="Pickup date (YYYY-MM-DD)"),
    end_date: dt.date = Query(..., description="Return date (YYYY-MM-DD)"),
    rental_type: RentalType = Query(default=RentalType.SHORT_TERM),
    with_driver: bool = Query(default=False),
    service: BookingService = Depends(get_booking_service),
) -> VehicleQuoteResponse:
    breakdown = service.quote_vehicle(
        listing_id,
        DateRange(start=start_date, end=end_date),
        rental_type=rental_type,
        with_driver=with_driver,
    )
    currency = get_settings().currency_label
    return VehicleQuoteResponse(
        listing_id=listing_id,
        breakdown=breakdown,
        rental_type_label=rental_type_label(breakdown.rental_type),
        formatted_total=format_price(breakdown.total, currency),
        formatted_deposit=format_price(breakdown.deposit, currency),
    )


@router.get(
    "/pricing/stays/{listing_id}",
    summary="Quote a stay",
    description="""
Calculate the price of a stay.

The cheapest of the nightly, weekly (7+ nights) and monthly (30+ nights)
tiers is applied. The cleaning fee is added once.
""",
    response_model=StayQuoteResponse,
    responses={
        400: {"description": "Invalid duration or outside min/max nights"},
        404: {"description": "Stay listing not found"},
        422: {"description": "Listing pricing is incomplete"},
    },
)
async def quote_stay(
    listing_id: str,
    check_in: dt.date = Query(..., description="Check-in date (YYYY-MM-DD)"),
    check_out: dt.date = Query(..., description="Check-out date (YYYY-MM-DD)"),
    service: BookingService = Depends(get_booking_service),
) -> StayQuoteResponse:
    breakdown = service.quote_stay(
        listing_id, DateRange(start=check_in, end=check_out)
    )
    currency = get_settings().currency_label
    return StayQuoteResponse(
        listing_id=listing_id,
        breakdown=breakdown,
        formatted_total=format_price(breakdown.total, currency),
        formatted_deposit=format_price(breakdown.deposit, currency),
    )
