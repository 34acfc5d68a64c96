"""Booking endpoints for customers, partners and admins.

Provides REST endpoints for:
- Requesting vehicle rentals and stays (customers)
- Listing the caller's bookings
- Reading a booking (owner customer, owning partner or admin)
- Moving a booking through its lifecycle (partner or admin)
- Cancelling a booking (owner customer)

Identity comes from headers injected by the API gateway, see security.py.
"""

from fastapi import APIRouter, Depends, Query
from starlette.status import HTTP_201_CREATED

from marketplace.models import (
    Booking,
    BookingError,
    BookingStatus,
    ErrorCode,
    Role,
    StayBookingCreate,
    VehicleBookingCreate,
)
from marketplace.services.booking import BookingService
from marketplace_api.dependencies import get_booking_service
from marketplace_api.models.bookings import (
    BookingListResponse,
    CancelRequest,
    StatusUpdateRequest,
)
from marketplace_api.security import Caller, require_roles

router = APIRouter(tags=["bookings"])


@router.post(
    "/bookings/vehicles",
    summary="Request a vehicle rental",
    description="""
Create a PENDING vehicle rental request.

The partner confirms or rejects it. Dates are only held once the partner
confirms, so a confirmation can still fail with a conflict.
""",
    response_model=Booking,
    status_code=HTTP_201_CREATED,
    responses={
        400: {"description": "Invalid duration"},
        401: {"description": "Identity required"},
        404: {"description": "Vehicle listing not found"},
        409: {"description": "Dates taken or listing not bookable"},
    },
)
async def create_vehicle_booking(
    body: VehicleBookingCreate,
    caller: Caller = Depends(require_roles(Role.CUSTOMER)),
    service: BookingService = Depends(get_booking_service),
) -> Booking:
    return service.create_vehicle_booking(caller.user_id, body)


@router.post(
    "/bookings/stays",
    summary="Request a stay",
    description="""
Create a PENDING stay request. The dates are held immediately.
""",
    response_model=Booking,
    status_code=HTTP_201_CREATED,
    responses={
        400: {"description": "Invalid duration or too many guests"},
        401: {"description": "Identity required"},
        404: {"description": "Stay listing not found"},
        409: {"description": "Dates taken or listing not bookable"},
    },
)
async def create_stay_booking(
    body: StayBookingCreate,
    caller: Caller = Depends(require_roles(Role.CUSTOMER)),
    service: BookingService = Depends(get_booking_service),
) -> Booking:
    return service.create_stay_booking(caller.user_id, body)


@router.get(
    "/bookings/me",
    summary="Get my bookings",
    description="""
Partners get the bookings of their listings; everyone else gets the
bookings they made. Newest first.
""",
    response_model=BookingListResponse,
)
async def get_my_bookings(
    status: BookingStatus | None = Query(
        default=None,
        description="Filter by booking status",
    ),
    caller: Caller = Depends(require_roles()),
    service: BookingService = Depends(get_booking_service),
) -> BookingListResponse:
    if caller.role == Role.PARTNER and caller.partner_id:
        bookings = service.list_partner_bookings(caller.partner_id, status=status)
    else:
        bookings = service.list_customer_bookings(caller.user_id)
        if status is not None:
            bookings = [b for b in bookings if b.status == status]
    return BookingListResponse(bookings=bookings, total=len(bookings))


@router.get(
    "/bookings/{booking_id}",
    summary="Get booking by ID",
    response_model=Booking,
    responses={
        403: {"description": "Caller is not a party to this booking"},
        404: {"description": "Booking not found"},
    },
)
async def get_booking(
    booking_id: str,
    caller: Caller = Depends(require_roles()),
    service: BookingService = Depends(get_booking_service),
) -> Booking:
    booking = service.require_booking(booking_id)

    is_owner = booking.customer_id == caller.user_id
    is_partner = caller.partner_id is not None and booking.partner_id == caller.partner_id
    if not (caller.is_admin or is_owner or is_partner):
        raise BookingError(ErrorCode.UNAUTHORIZED, details={"booking_id": booking_id})

    return booking


@router.patch(
    "/bookings/{booking_id}/status",
    summary="Change booking status",
    description="""
Move a booking to a new status.

**Vehicles:** PENDING → CONFIRMED | REJECTED, CONFIRMED → ACTIVE |
COMPLETED | CANCELLED, ACTIVE → COMPLETED.

**Stays:** PENDING → CONFIRMED | REJECTED, CONFIRMED → ACTIVE | CANCELLED,
ACTIVE → COMPLETED | CANCELLED.
""",
    response_model=Booking,
    responses={
        403: {"description": "Partner does not own this booking"},
        404: {"description": "Booking not found"},
        409: {"description": "Transition not allowed or dates taken"},
    },
)
async def update_booking_status(
    booking_id: str,
    body: StatusUpdateRequest,
    caller: Caller = Depends(require_roles(Role.PARTNER, Role.ADMIN)),
    service: BookingService = Depends(get_booking_service),
) -> Booking:
    return service.update_status(
        booking_id,
        body.status,
        partner_id=caller.partner_id,
        is_admin=caller.is_admin,
    )


@router.post(
    "/bookings/{booking_id}/cancel",
    summary="Cancel my booking",
    description="""
Cancel a PENDING or CONFIRMED booking. A reason of at least 10
characters is required.
""",
    response_model=Booking,
    responses={
        403: {"description": "Booking belongs to another customer"},
        404: {"description": "Booking not found"},
        409: {"description": "Booking can no longer be cancelled"},
    },
)
async def cancel_booking(
    booking_id: str,
    body: CancelRequest,
    caller: Caller = Depends(require_roles(Role.CUSTOMER)),
    service: BookingService = Depends(get_booking_service),
) -> Booking:
    return service.cancel_booking(booking_id, caller.user_id, body.reason)
