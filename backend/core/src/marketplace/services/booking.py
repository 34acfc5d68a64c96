"""Booking workflow: quotes, availability, creation and status changes.

Wraps the pure engine (duration, pricing, conflicts, status policy) with
listing lookups and DynamoDB persistence. Bookings live in one partition
per listing, so the conflict read is a strongly consistent query.

Check-then-insert is made atomic with the listing's ``booking_version``:
every write that puts a booking into a blocking status runs in a
transaction that bumps the version under a condition on the value read
before the conflict check. A concurrent writer makes the transaction fail
and the request is reported as CONFLICT_DETECTED.
"""

import datetime as dt
import uuid
from typing import TYPE_CHECKING, Any, NoReturn

from boto3.dynamodb.conditions import Key

from marketplace.config import Settings, get_settings
from marketplace.models import (
    AvailabilityResult,
    Booking,
    BookingError,
    BookingStatus,
    DateRange,
    DomainError,
    EarningsSummary,
    ErrorCode,
    ExistingReservation,
    Listing,
    RentalType,
    StayBookingCreate,
    StayPriceBreakdown,
    VehicleBookingCreate,
    VehiclePriceBreakdown,
    Vertical,
)
from marketplace.utils.logging import get_logger, log_booking_operation

from .conflicts import find_conflicts
from .duration import count_units, validate_duration
from .earnings import summarize_earnings
from .pricing import calculate_booking_price
from .status_policy import StatusTransitionPolicy
from .stays_pricing import calculate_stays_booking_price

if TYPE_CHECKING:
    from .dynamodb import DynamoDBService
    from .listings import ListingService

logger = get_logger(__name__)


def _raise_if_error(result: Any) -> None:
    if isinstance(result, DomainError):
        raise BookingError.from_domain_error(result)


class BookingService:
    """Service for the booking lifecycle of vehicle and stay listings."""

    TABLE = "bookings"

    def __init__(
        self,
        db: "DynamoDBService",
        listings: "ListingService",
        settings: Settings | None = None,
    ) -> None:
        """Initialize booking service.

        Args:
            db: DynamoDB service instance
            listings: Listing service instance
            settings: Settings override, defaults to the cached settings
        """
        self.db = db
        self.listings = listings
        self.settings = settings or get_settings()

    def _generate_booking_id(self) -> str:
        return f"BKG-{uuid.uuid4().hex[:12].upper()}"

    # Quotes and availability

    def quote_vehicle(
        self,
        listing_id: str,
        date_range: DateRange,
        rental_type: RentalType = RentalType.SHORT_TERM,
        with_driver: bool = False,
    ) -> VehiclePriceBreakdown:
        """Price a vehicle rental without reserving it.

        Raises:
            BookingError: LISTING_NOT_FOUND, duration errors or MISSING_RATE
        """
        listing = self._load_listing(listing_id, Vertical.VEHICLE)
        return self._price_vehicle(listing, date_range, rental_type, with_driver)

    def quote_stay(self, listing_id: str, date_range: DateRange) -> StayPriceBreakdown:
        """Price a stay without reserving it.

        Raises:
            BookingError: LISTING_NOT_FOUND, duration errors or MISSING_RATE
        """
        listing = self._load_listing(listing_id, Vertical.STAY)
        return self._price_stay(listing, date_range)

    def check_availability(
        self,
        listing_id: str,
        date_range: DateRange,
    ) -> AvailabilityResult:
        """Check a date range against the listing's blocking reservations.

        Args:
            listing_id: Listing to check
            date_range: Requested range, end exclusive

        Returns:
            AvailabilityResult with the blocking ranges that overlap
        """
        listing = self.listings.require_listing(listing_id)
        _raise_if_error(validate_duration(date_range))

        conflicts = find_conflicts(
            date_range,
            self._reservations(listing_id),
            self.settings.blocking_statuses(listing.vertical),
        )
        return AvailabilityResult(
            listing_id=listing_id,
            start_date=date_range.start,
            end_date=date_range.end,
            is_available=not conflicts,
            units=count_units(date_range.start, date_range.end),
            conflicts=[c.date_range for c in conflicts],
        )

    # Creation

    def create_vehicle_booking(
        self,
        customer_id: str,
        data: VehicleBookingCreate,
    ) -> Booking:
        """Create a PENDING vehicle rental request.

        Args:
            customer_id: Requesting customer
            data: Rental request

        Returns:
            Stored booking with its price snapshot

        Raises:
            BookingError: listing, duration, rate or conflict failures
        """
        listing = self._load_listing(
            data.listing_id, Vertical.VEHICLE, consistent_read=True
        )
        self._ensure_bookable(listing)

        date_range = DateRange(start=data.start_date, end=data.end_date)
        pricing = self._price_vehicle(
            listing, date_range, data.rental_type, data.with_driver
        )

        now = dt.datetime.now(dt.UTC)
        booking = Booking(
            booking_id=self._generate_booking_id(),
            listing_id=listing.listing_id,
            vertical=Vertical.VEHICLE,
            customer_id=customer_id,
            partner_id=listing.partner_id,
            start_date=date_range.start,
            end_date=date_range.end,
            status=BookingStatus.PENDING,
            pricing=pricing,
            rental_type=data.rental_type,
            with_driver=data.with_driver,
            pickup_location=data.pickup_location,
            dropoff_location=data.dropoff_location or data.pickup_location,
            notes=data.notes,
            created_at=now,
            updated_at=now,
        )
        return self._insert(listing, booking)

    def create_stay_booking(
        self,
        customer_id: str,
        data: StayBookingCreate,
    ) -> Booking:
        """Create a PENDING stay request.

        Stays hold their dates from the moment they are requested.

        Raises:
            BookingError: listing, guests, duration, rate or conflict failures
        """
        listing = self._load_listing(data.listing_id, Vertical.STAY, consistent_read=True)
        self._ensure_bookable(listing)

        if listing.max_guests is not None and data.guests > listing.max_guests:
            raise BookingError(
                ErrorCode.MAX_GUESTS_EXCEEDED,
                details={"guests": str(data.guests), "max_guests": str(listing.max_guests)},
                message=f"This property accommodates at most {listing.max_guests} guests",
            )

        date_range = DateRange(start=data.check_in, end=data.check_out)
        pricing = self._price_stay(listing, date_range)

        now = dt.datetime.now(dt.UTC)
        booking = Booking(
            booking_id=self._generate_booking_id(),
            listing_id=listing.listing_id,
            vertical=Vertical.STAY,
            customer_id=customer_id,
            partner_id=listing.partner_id,
            start_date=date_range.start,
            end_date=date_range.end,
            status=BookingStatus.PENDING,
            pricing=pricing,
            guests=data.guests,
            special_requests=data.special_requests,
            created_at=now,
            updated_at=now,
        )
        return self._insert(listing, booking)

    # Reads

    def get_booking(self, booking_id: str) -> Booking | None:
        """Get a booking by ID.

        Args:
            booking_id: Booking ID

        Returns:
            Booking or None if not found
        """
        items = self.db.query_by_gsi(
            self.TABLE, "booking_id-index", "booking_id", booking_id
        )
        return self._item_to_booking(items[0]) if items else None

    def require_booking(self, booking_id: str) -> Booking:
        """Get a booking or raise BOOKING_NOT_FOUND."""
        booking = self.get_booking(booking_id)
        if booking is None:
            raise BookingError(
                ErrorCode.BOOKING_NOT_FOUND, details={"booking_id": booking_id}
            )
        return booking

    def list_customer_bookings(self, customer_id: str) -> list[Booking]:
        """Get a customer's bookings, newest first."""
        items = self.db.query_by_gsi(
            self.TABLE, "customer_id-index", "customer_id", customer_id
        )
        return self._sorted(items)

    def list_partner_bookings(
        self,
        partner_id: str,
        status: BookingStatus | None = None,
    ) -> list[Booking]:
        """Get bookings across a partner's listings, newest first.

        Args:
            partner_id: Partner ID
            status: Optional status filter
        """
        items = self.db.query_by_gsi(
            self.TABLE, "partner_id-index", "partner_id", partner_id
        )
        bookings = self._sorted(items)
        if status is not None:
            bookings = [b for b in bookings if b.status == status]
        return bookings

    # Status changes

    def update_status(
        self,
        booking_id: str,
        target: BookingStatus,
        partner_id: str | None = None,
        is_admin: bool = False,
    ) -> Booking:
        """Move a booking to a new status on behalf of its partner or an admin.

        Entering a blocking status re-checks availability under the
        listing version guard.

        Raises:
            BookingError: BOOKING_NOT_FOUND, UNAUTHORIZED,
                INVALID_STATUS_TRANSITION or CONFLICT_DETECTED
        """
        booking = self.require_booking(booking_id)
        if not is_admin and booking.partner_id != partner_id:
            raise BookingError(
                ErrorCode.UNAUTHORIZED, details={"booking_id": booking_id}
            )

        policy = StatusTransitionPolicy.for_vertical(booking.vertical)
        _raise_if_error(policy.validate(booking.status, target))

        now = dt.datetime.now(dt.UTC)
        updated = booking.model_copy(
            update={
                "status": target,
                "partner_confirmed": booking.partner_confirmed
                or target == BookingStatus.CONFIRMED,
                "updated_at": now,
            }
        )

        blocking = self.settings.blocking_statuses(booking.vertical)
        status_item = self._status_update(booking, updated)

        if target in blocking and booking.status not in blocking:
            listing = self.listings.require_listing(
                booking.listing_id, consistent_read=True
            )
            existing = [
                r
                for r in self._reservations(booking.listing_id)
                if r.booking_id != booking_id
            ]
            self._raise_on_conflict(updated, existing, blocking)
            if not self.db.transact_write(
                [self._version_guard(listing), status_item]
            ):
                self._conflict(updated, "version_changed")
        elif not self.db.transact_write([status_item]):
            raise BookingError(
                ErrorCode.INVALID_STATUS_TRANSITION,
                details={"booking_id": booking_id, "from": booking.status.value},
                message="Booking status changed concurrently, reload and retry",
            )

        log_booking_operation(
            logger,
            "update_status",
            booking_id=booking_id,
            listing_id=booking.listing_id,
            vertical=booking.vertical.value,
            status=target.value,
            previous_status=booking.status.value,
        )
        return updated

    def cancel_booking(self, booking_id: str, customer_id: str, reason: str) -> Booking:
        """Cancel a booking on behalf of the customer who made it.

        Allowed while the booking is PENDING or CONFIRMED.

        Raises:
            BookingError: BOOKING_NOT_FOUND, UNAUTHORIZED or
                BOOKING_NOT_CANCELLABLE
        """
        booking = self.require_booking(booking_id)
        if booking.customer_id != customer_id:
            raise BookingError(
                ErrorCode.UNAUTHORIZED, details={"booking_id": booking_id}
            )

        policy = StatusTransitionPolicy.for_vertical(booking.vertical)
        if not policy.can_cancel(booking.status):
            raise BookingError(
                ErrorCode.BOOKING_NOT_CANCELLABLE,
                details={"booking_id": booking_id, "status": booking.status.value},
            )

        now = dt.datetime.now(dt.UTC)
        result = self.db.update_item(
            self.TABLE,
            {"listing_id": booking.listing_id, "booking_id": booking_id},
            "SET #s = :cancelled, cancel_reason = :reason, updated_at = :now",
            {
                ":cancelled": BookingStatus.CANCELLED,
                ":current": booking.status,
                ":reason": reason,
                ":now": now,
            },
            expression_attribute_names={"#s": "status"},
            condition_expression="#s = :current",
        )
        if result is None:
            raise BookingError(
                ErrorCode.BOOKING_NOT_CANCELLABLE,
                details={"booking_id": booking_id},
                message="Booking status changed concurrently, reload and retry",
            )

        log_booking_operation(
            logger,
            "cancel_booking",
            booking_id=booking_id,
            listing_id=booking.listing_id,
            vertical=booking.vertical.value,
            status=BookingStatus.CANCELLED.value,
            previous_status=booking.status.value,
        )
        return booking.model_copy(
            update={
                "status": BookingStatus.CANCELLED,
                "cancel_reason": reason,
                "updated_at": now,
            }
        )

    def get_partner_earnings(
        self,
        partner_id: str,
        today: dt.date | None = None,
    ) -> EarningsSummary:
        """Summarize a partner's revenue from completed bookings."""
        return summarize_earnings(
            self.list_partner_bookings(partner_id), today or dt.date.today()
        )

    # Internals

    def _load_listing(
        self,
        listing_id: str,
        vertical: Vertical,
        consistent_read: bool = False,
    ) -> Listing:
        listing = self.listings.require_listing(listing_id, consistent_read=consistent_read)
        if listing.vertical != vertical:
            raise BookingError(
                ErrorCode.LISTING_NOT_FOUND,
                details={"listing_id": listing_id, "vertical": vertical.value},
                message=f"No {vertical.value.lower()} listing with ID {listing_id}",
            )
        return listing

    def _ensure_bookable(self, listing: Listing) -> None:
        if not listing.is_bookable:
            raise BookingError(
                ErrorCode.LISTING_NOT_BOOKABLE,
                details={
                    "listing_id": listing.listing_id,
                    "status": listing.status.value,
                },
            )

    def _price_vehicle(
        self,
        listing: Listing,
        date_range: DateRange,
        rental_type: RentalType,
        with_driver: bool,
    ) -> VehiclePriceBreakdown:
        _raise_if_error(validate_duration(date_range, rental_type=rental_type))
        if listing.vehicle_rates is None:
            raise BookingError(
                ErrorCode.MISSING_RATE, details={"listing_id": listing.listing_id}
            )
        result = calculate_booking_price(
            listing.vehicle_rates, date_range, rental_type, with_driver
        )
        _raise_if_error(result)
        return result  # type: ignore[return-value]

    def _price_stay(self, listing: Listing, date_range: DateRange) -> StayPriceBreakdown:
        _raise_if_error(
            validate_duration(
                date_range,
                min_nights=listing.min_nights,
                max_nights=listing.max_nights,
            )
        )
        if listing.stay_rates is None:
            raise BookingError(
                ErrorCode.MISSING_RATE, details={"listing_id": listing.listing_id}
            )
        result = calculate_stays_booking_price(listing.stay_rates, date_range)
        _raise_if_error(result)
        return result  # type: ignore[return-value]

    def _reservations(self, listing_id: str) -> list[ExistingReservation]:
        """Load every booking of a listing as reservations (consistent read)."""
        items = self.db.query(
            self.TABLE,
            Key("listing_id").eq(listing_id),
            consistent_read=True,
        )
        return [self._item_to_booking(item).to_reservation() for item in items]

    def _insert(self, listing: Listing, booking: Booking) -> Booking:
        """Store a new booking after the conflict check.

        ``listing`` must have been read with a consistent read before the
        reservations are loaded, so its version guards the whole check.
        """
        blocking = self.settings.blocking_statuses(listing.vertical)
        self._raise_on_conflict(booking, self._reservations(listing.listing_id), blocking)

        item = self._booking_to_item(booking)
        if booking.status in blocking:
            stored = self.db.transact_write(
                [
                    self._version_guard(listing),
                    {
                        "Put": {
                            "TableName": self.db._table_name(self.TABLE),
                            "Item": self.db.serialize_item(item),
                            "ConditionExpression": "attribute_not_exists(booking_id)",
                        }
                    },
                ]
            )
            if not stored:
                self._conflict(booking, "version_changed")
        else:
            self.db.put_item(
                self.TABLE, item, condition_expression="attribute_not_exists(booking_id)"
            )

        log_booking_operation(
            logger,
            "create_booking",
            booking_id=booking.booking_id,
            listing_id=booking.listing_id,
            vertical=booking.vertical.value,
            status=booking.status.value,
            amount=booking.pricing.total,
            customer_id=booking.customer_id,
        )
        return booking

    def _raise_on_conflict(
        self,
        booking: Booking,
        existing: list[ExistingReservation],
        blocking: frozenset[BookingStatus],
    ) -> None:
        conflicts = find_conflicts(booking.date_range, existing, blocking)
        if conflicts:
            self._conflict(
                booking,
                "overlap",
                conflicting=",".join(c.booking_id or "" for c in conflicts),
            )

    def _conflict(self, booking: Booking, reason: str, **details: str) -> NoReturn:
        log_booking_operation(
            logger,
            "conflict_check",
            booking_id=booking.booking_id,
            listing_id=booking.listing_id,
            vertical=booking.vertical.value,
            error=ErrorCode.CONFLICT_DETECTED.value,
            reason=reason,
        )
        raise BookingError(
            ErrorCode.CONFLICT_DETECTED,
            details={"listing_id": booking.listing_id, "reason": reason, **details},
        )

    def _version_guard(self, listing: Listing) -> dict[str, Any]:
        """Transaction item bumping the listing version read earlier."""
        expected = listing.booking_version
        condition = "attribute_exists(listing_id) AND booking_version = :expected"
        if expected == 0:
            condition = (
                "attribute_exists(listing_id) AND "
                "(attribute_not_exists(booking_version) OR booking_version = :expected)"
            )
        return {
            "Update": {
                "TableName": self.db._table_name(self.listings.TABLE),
                "Key": self.db.serialize_item({"listing_id": listing.listing_id}),
                "UpdateExpression": "SET booking_version = :next",
                "ConditionExpression": condition,
                "ExpressionAttributeValues": self.db.serialize_item(
                    {":expected": expected, ":next": expected + 1}
                ),
            }
        }

    def _status_update(self, current: Booking, updated: Booking) -> dict[str, Any]:
        """Transaction item moving a booking from its current status."""
        return {
            "Update": {
                "TableName": self.db._table_name(self.TABLE),
                "Key": self.db.serialize_item(
                    {"listing_id": current.listing_id, "booking_id": current.booking_id}
                ),
                "UpdateExpression": (
                    "SET #s = :status, partner_confirmed = :confirmed, updated_at = :now"
                ),
                "ConditionExpression": "#s = :current",
                "ExpressionAttributeNames": {"#s": "status"},
                "ExpressionAttributeValues": self.db.serialize_item(
                    {
                        ":status": updated.status,
                        ":current": current.status,
                        ":confirmed": updated.partner_confirmed,
                        ":now": updated.updated_at,
                    }
                ),
            }
        }

    def _sorted(self, items: list[dict[str, Any]]) -> list[Booking]:
        bookings = [self._item_to_booking(item) for item in items]
        return sorted(bookings, key=lambda b: b.created_at, reverse=True)

    def _booking_to_item(self, booking: Booking) -> dict[str, Any]:
        """Convert Booking model to DynamoDB item."""
        return booking.model_dump(exclude_none=True)

    def _item_to_booking(self, item: dict[str, Any]) -> Booking:
        """Convert DynamoDB item to Booking model."""
        return Booking.model_validate(item)
