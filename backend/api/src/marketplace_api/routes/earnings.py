"""Partner earnings endpoint."""

from fastapi import APIRouter, Depends

from marketplace.models import EarningsSummary, Role
from marketplace.services.booking import BookingService
from marketplace_api.dependencies import get_booking_service
from marketplace_api.security import Caller, require_roles

router = APIRouter(tags=["earnings"])


@router.get(
    "/partners/me/earnings",
    summary="Get my earnings",
    description="""
Revenue from the partner's completed bookings: totals, this and last
month, the current year, a 12-month series and month-over-month growth.
Bookings count toward the month of their end date.
""",
    response_model=EarningsSummary,
)
async def get_my_earnings(
    caller: Caller = Depends(require_roles(Role.PARTNER)),
    service: BookingService = Depends(get_booking_service),
) -> EarningsSummary:
    # require_roles guarantees a partner ID for partners
    return service.get_partner_earnings(caller.partner_id or "")
