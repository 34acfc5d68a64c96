"""Unit tests for BookingService against mocked DynamoDB tables."""

from datetime import date
from decimal import Decimal
from typing import Any
from unittest.mock import patch

import pytest

from marketplace.models import (
    BookingError,
    BookingStatus,
    DateRange,
    ErrorCode,
    ListingStatus,
    RentalType,
    StayBookingCreate,
    VehicleBookingCreate,
)
from marketplace.services.booking import BookingService
from marketplace.services.listings import ListingService


def vehicle_request(start: str = "2025-03-10", end: str = "2025-03-15", **kwargs: Any) -> VehicleBookingCreate:
    return VehicleBookingCreate(
        listing_id=kwargs.pop("listing_id", "veh-001"),
        start_date=start,
        end_date=end,
        pickup_location="Airport",
        **kwargs,
    )


def stay_request(
    check_in: str = "2025-06-01", check_out: str = "2025-06-04", guests: int = 2, **kwargs: Any
) -> StayBookingCreate:
    return StayBookingCreate(
        listing_id=kwargs.pop("listing_id", "stay-001"),
        check_in=check_in,
        check_out=check_out,
        guests=guests,
        **kwargs,
    )


@pytest.fixture
def service(booking_service: BookingService, stored_listings: None) -> BookingService:
    return booking_service


class TestQuotes:
    def test_short_term_vehicle_quote(self, service: BookingService) -> None:
        quote = service.quote_vehicle(
            "veh-001", DateRange(start=date(2025, 3, 10), end=date(2025, 3, 15))
        )

        assert quote.total_days == 5
        assert quote.subtotal == Decimal("25000")
        assert quote.deposit == Decimal("20000")
        assert quote.total == Decimal("25000")

    def test_long_term_vehicle_quote_with_driver(self, service: BookingService) -> None:
        quote = service.quote_vehicle(
            "veh-001",
            DateRange(start=date(2025, 1, 1), end=date(2025, 3, 2)),
            rental_type=RentalType.LONG_TERM,
            with_driver=True,
        )

        assert quote.total_days == 60
        assert quote.total_months == 2
        assert quote.vehicle_subtotal == Decimal("200000")
        assert quote.driver_subtotal == Decimal("80000")
        assert quote.subtotal == Decimal("280000")

    def test_stay_quote(self, service: BookingService) -> None:
        quote = service.quote_stay(
            "stay-001", DateRange(start=date(2025, 6, 1), end=date(2025, 6, 4))
        )

        assert quote.total_nights == 3
        assert quote.subtotal == Decimal("10500")

    def test_vehicle_quote_for_stay_listing(self, service: BookingService) -> None:
        with pytest.raises(BookingError) as exc_info:
            service.quote_vehicle(
                "stay-001", DateRange(start=date(2025, 6, 1), end=date(2025, 6, 4))
            )

        assert exc_info.value.code == ErrorCode.LISTING_NOT_FOUND

    def test_invalid_duration(self, service: BookingService) -> None:
        with pytest.raises(BookingError) as exc_info:
            service.quote_vehicle(
                "veh-001", DateRange(start=date(2025, 3, 10), end=date(2025, 3, 10))
            )

        assert exc_info.value.code == ErrorCode.INVALID_DURATION

    def test_stay_below_minimum_nights(self, service: BookingService) -> None:
        with pytest.raises(BookingError) as exc_info:
            service.quote_stay(
                "stay-001", DateRange(start=date(2025, 6, 1), end=date(2025, 6, 2))
            )

        assert exc_info.value.code == ErrorCode.DURATION_TOO_SHORT
        assert exc_info.value.message == "Minimum stay is 2 nights"


class TestCreateVehicleBooking:
    def test_creates_pending_booking(self, service: BookingService) -> None:
        booking = service.create_vehicle_booking("cust-1", vehicle_request())

        assert booking.booking_id.startswith("BKG-")
        assert booking.status == BookingStatus.PENDING
        assert booking.partner_id == "partner-veh"
        assert booking.dropoff_location == "Airport"
        assert booking.pricing.subtotal == Decimal("25000")

        stored = service.get_booking(booking.booking_id)
        assert stored == booking

    def test_pending_requests_do_not_block(self, service: BookingService) -> None:
        first = service.create_vehicle_booking("cust-1", vehicle_request())
        second = service.create_vehicle_booking("cust-2", vehicle_request("2025-03-12", "2025-03-14"))

        assert first.booking_id != second.booking_id
        assert service.listings.get_booking_version("veh-001") == 0

    def test_confirmed_booking_blocks_new_request(self, service: BookingService) -> None:
        first = service.create_vehicle_booking("cust-1", vehicle_request())
        service.update_status(first.booking_id, BookingStatus.CONFIRMED, partner_id="partner-veh")

        with pytest.raises(BookingError) as exc_info:
            service.create_vehicle_booking("cust-2", vehicle_request("2025-03-14", "2025-03-16"))

        assert exc_info.value.code == ErrorCode.CONFLICT_DETECTED
        assert exc_info.value.details is not None
        assert exc_info.value.details["conflicting"] == first.booking_id

    def test_return_day_is_free_for_next_pickup(self, service: BookingService) -> None:
        first = service.create_vehicle_booking("cust-1", vehicle_request())
        service.update_status(first.booking_id, BookingStatus.CONFIRMED, partner_id="partner-veh")

        booking = service.create_vehicle_booking("cust-2", vehicle_request("2025-03-15", "2025-03-17"))

        assert booking.status == BookingStatus.PENDING

    def test_missing_listing(self, service: BookingService) -> None:
        with pytest.raises(BookingError) as exc_info:
            service.create_vehicle_booking("cust-1", vehicle_request(listing_id="veh-missing"))

        assert exc_info.value.code == ErrorCode.LISTING_NOT_FOUND

    def test_listing_under_maintenance(
        self, service: BookingService, listing_service: ListingService, vehicle_listing: Any
    ) -> None:
        listing_service.put_listing(
            vehicle_listing.model_copy(update={"status": ListingStatus.MAINTENANCE})
        )

        with pytest.raises(BookingError) as exc_info:
            service.create_vehicle_booking("cust-1", vehicle_request())

        assert exc_info.value.code == ErrorCode.LISTING_NOT_BOOKABLE

    def test_listing_without_rates(
        self, service: BookingService, listing_service: ListingService, vehicle_listing: Any
    ) -> None:
        listing_service.put_listing(vehicle_listing.model_copy(update={"vehicle_rates": None}))

        with pytest.raises(BookingError) as exc_info:
            service.create_vehicle_booking("cust-1", vehicle_request())

        assert exc_info.value.code == ErrorCode.MISSING_RATE


class TestCreateStayBooking:
    def test_pending_stay_holds_dates(self, service: BookingService) -> None:
        first = service.create_stay_booking("cust-1", stay_request())

        assert first.status == BookingStatus.PENDING
        assert first.guests == 2
        assert service.listings.get_booking_version("stay-001") == 1

        with pytest.raises(BookingError) as exc_info:
            service.create_stay_booking("cust-2", stay_request("2025-06-03", "2025-06-06"))

        assert exc_info.value.code == ErrorCode.CONFLICT_DETECTED

    def test_same_day_turnover(self, service: BookingService) -> None:
        service.create_stay_booking("cust-1", stay_request())

        second = service.create_stay_booking("cust-2", stay_request("2025-06-04", "2025-06-06"))

        assert second.start_date == date(2025, 6, 4)
        assert service.listings.get_booking_version("stay-001") == 2

    def test_too_many_guests(self, service: BookingService) -> None:
        with pytest.raises(BookingError) as exc_info:
            service.create_stay_booking("cust-1", stay_request(guests=5))

        assert exc_info.value.code == ErrorCode.MAX_GUESTS_EXCEEDED
        assert exc_info.value.details == {"guests": "5", "max_guests": "4"}

    def test_cancelled_stay_releases_dates(self, service: BookingService) -> None:
        first = service.create_stay_booking("cust-1", stay_request())
        service.cancel_booking(first.booking_id, "cust-1", "Plans changed, sorry")

        second = service.create_stay_booking("cust-2", stay_request())

        assert second.status == BookingStatus.PENDING

    def test_concurrent_writer_detected(
        self, service: BookingService, db: Any, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        load_reservations = service._reservations

        def racing_reservations(listing_id: str) -> Any:
            # Another request commits between the version read and our write
            db.update_item(
                "listings",
                {"listing_id": listing_id},
                "SET booking_version = booking_version + :one",
                {":one": 1},
            )
            return load_reservations(listing_id)

        monkeypatch.setattr(service, "_reservations", racing_reservations)

        with pytest.raises(BookingError) as exc_info:
            service.create_stay_booking("cust-1", stay_request())

        assert exc_info.value.code == ErrorCode.CONFLICT_DETECTED
        assert exc_info.value.details is not None
        assert exc_info.value.details["reason"] == "version_changed"
        assert service.list_customer_bookings("cust-1") == []


class TestAvailability:
    def test_available_listing(self, service: BookingService) -> None:
        result = service.check_availability(
            "stay-001", DateRange(start=date(2025, 6, 1), end=date(2025, 6, 4))
        )

        assert result.is_available is True
        assert result.units == 3
        assert result.conflicts == []

    def test_reports_blocking_ranges(self, service: BookingService) -> None:
        service.create_stay_booking("cust-1", stay_request())

        result = service.check_availability(
            "stay-001", DateRange(start=date(2025, 6, 2), end=date(2025, 6, 10))
        )

        assert result.is_available is False
        assert result.conflicts == [
            DateRange(start=date(2025, 6, 1), end=date(2025, 6, 4))
        ]

    def test_pending_vehicle_request_does_not_block(self, service: BookingService) -> None:
        service.create_vehicle_booking("cust-1", vehicle_request())

        result = service.check_availability(
            "veh-001", DateRange(start=date(2025, 3, 10), end=date(2025, 3, 15))
        )

        assert result.is_available is True


class TestUpdateStatus:
    def test_confirm_sets_partner_confirmed(self, service: BookingService) -> None:
        booking = service.create_vehicle_booking("cust-1", vehicle_request())

        updated = service.update_status(
            booking.booking_id, BookingStatus.CONFIRMED, partner_id="partner-veh"
        )

        assert updated.status == BookingStatus.CONFIRMED
        assert updated.partner_confirmed is True
        stored = service.require_booking(booking.booking_id)
        assert stored.status == BookingStatus.CONFIRMED
        assert service.listings.get_booking_version("veh-001") == 1

    def test_confirming_overlapping_request_conflicts(self, service: BookingService) -> None:
        first = service.create_vehicle_booking("cust-1", vehicle_request())
        second = service.create_vehicle_booking("cust-2", vehicle_request("2025-03-12", "2025-03-14"))
        service.update_status(first.booking_id, BookingStatus.CONFIRMED, partner_id="partner-veh")

        with pytest.raises(BookingError) as exc_info:
            service.update_status(
                second.booking_id, BookingStatus.CONFIRMED, partner_id="partner-veh"
            )

        assert exc_info.value.code == ErrorCode.CONFLICT_DETECTED
        assert service.require_booking(second.booking_id).status == BookingStatus.PENDING

    def test_other_partner_is_rejected(self, service: BookingService) -> None:
        booking = service.create_vehicle_booking("cust-1", vehicle_request())

        with pytest.raises(BookingError) as exc_info:
            service.update_status(
                booking.booking_id, BookingStatus.CONFIRMED, partner_id="partner-other"
            )

        assert exc_info.value.code == ErrorCode.UNAUTHORIZED

    def test_admin_may_update(self, service: BookingService) -> None:
        booking = service.create_vehicle_booking("cust-1", vehicle_request())

        updated = service.update_status(booking.booking_id, BookingStatus.REJECTED, is_admin=True)

        assert updated.status == BookingStatus.REJECTED

    def test_invalid_transition(self, service: BookingService) -> None:
        booking = service.create_vehicle_booking("cust-1", vehicle_request())

        with pytest.raises(BookingError) as exc_info:
            service.update_status(
                booking.booking_id, BookingStatus.COMPLETED, partner_id="partner-veh"
            )

        assert exc_info.value.code == ErrorCode.INVALID_STATUS_TRANSITION

    def test_full_vehicle_lifecycle(self, service: BookingService) -> None:
        booking = service.create_vehicle_booking("cust-1", vehicle_request())

        for status in (BookingStatus.CONFIRMED, BookingStatus.ACTIVE, BookingStatus.COMPLETED):
            service.update_status(booking.booking_id, status, partner_id="partner-veh")

        assert service.require_booking(booking.booking_id).status == BookingStatus.COMPLETED
        # Only the move into a blocking status bumps the version
        assert service.listings.get_booking_version("veh-001") == 1

    def test_unknown_booking(self, service: BookingService) -> None:
        with pytest.raises(BookingError) as exc_info:
            service.update_status("BKG-NOPE", BookingStatus.CONFIRMED, is_admin=True)

        assert exc_info.value.code == ErrorCode.BOOKING_NOT_FOUND


class TestCancelBooking:
    def test_customer_cancels_pending(self, service: BookingService) -> None:
        booking = service.create_vehicle_booking("cust-1", vehicle_request())

        cancelled = service.cancel_booking(booking.booking_id, "cust-1", "No longer travelling")

        assert cancelled.status == BookingStatus.CANCELLED
        stored = service.require_booking(booking.booking_id)
        assert stored.status == BookingStatus.CANCELLED
        assert stored.cancel_reason == "No longer travelling"

    def test_other_customer_is_rejected(self, service: BookingService) -> None:
        booking = service.create_vehicle_booking("cust-1", vehicle_request())

        with pytest.raises(BookingError) as exc_info:
            service.cancel_booking(booking.booking_id, "cust-2", "Not my booking at all")

        assert exc_info.value.code == ErrorCode.UNAUTHORIZED

    def test_active_booking_not_cancellable(self, service: BookingService) -> None:
        booking = service.create_vehicle_booking("cust-1", vehicle_request())
        service.update_status(booking.booking_id, BookingStatus.CONFIRMED, partner_id="partner-veh")
        service.update_status(booking.booking_id, BookingStatus.ACTIVE, partner_id="partner-veh")

        with pytest.raises(BookingError) as exc_info:
            service.cancel_booking(booking.booking_id, "cust-1", "Too late to cancel this")

        assert exc_info.value.code == ErrorCode.BOOKING_NOT_CANCELLABLE


class TestListingsAndEarnings:
    def test_customer_bookings_newest_first(
        self, service: BookingService, db: Any, booking_factory: Any
    ) -> None:
        older = booking_factory("BKG-OLD")
        newer = booking_factory("BKG-NEW").model_copy(
            update={"created_at": older.created_at.replace(month=2)}
        )
        for booking in (older, newer):
            db.put_item("bookings", service._booking_to_item(booking))

        bookings = service.list_customer_bookings("cust-1")

        assert [b.booking_id for b in bookings] == ["BKG-NEW", "BKG-OLD"]

    def test_partner_bookings_status_filter(
        self, service: BookingService, db: Any, booking_factory: Any
    ) -> None:
        db.put_item("bookings", service._booking_to_item(booking_factory("BKG-1")))
        db.put_item(
            "bookings",
            service._booking_to_item(booking_factory("BKG-2", BookingStatus.CONFIRMED)),
        )

        confirmed = service.list_partner_bookings("partner-veh", BookingStatus.CONFIRMED)

        assert [b.booking_id for b in confirmed] == ["BKG-2"]
        assert len(service.list_partner_bookings("partner-veh")) == 2

    def test_partner_earnings(
        self, service: BookingService, db: Any, booking_factory: Any
    ) -> None:
        bookings = [
            booking_factory("BKG-1", start=date(2025, 3, 1), end=date(2025, 3, 5)),
            booking_factory(
                "BKG-2",
                start=date(2025, 2, 1),
                end=date(2025, 2, 3),
                subtotal=Decimal("10000"),
            ),
            booking_factory("BKG-3", BookingStatus.CONFIRMED),
            booking_factory("BKG-4", partner_id="partner-other"),
        ]
        for booking in bookings:
            db.put_item("bookings", service._booking_to_item(booking))

        summary = service.get_partner_earnings("partner-veh", today=date(2025, 3, 20))

        assert summary.total_earnings == Decimal("25000")
        assert summary.this_month_earnings == Decimal("15000")
        assert summary.last_month_earnings == Decimal("10000")
        assert summary.total_bookings == 2
        assert summary.growth == 50
        assert [r.booking_id for r in summary.recent] == ["BKG-1", "BKG-2"]

    def test_reservations_mirror_stored_bookings(
        self, service: BookingService, db: Any, booking_factory: Any
    ) -> None:
        booking = booking_factory("BKG-1", BookingStatus.CONFIRMED)
        db.put_item("bookings", service._booking_to_item(booking))

        reservations = service._reservations("veh-001")

        assert reservations == [booking.to_reservation()]
        assert reservations[0].start == date(2025, 3, 10)
        assert reservations[0].status == BookingStatus.CONFIRMED


class TestWriteRaces:
    """Transaction failures are reported, never silently dropped."""

    def test_confirm_race_reports_conflict(self, service: BookingService) -> None:
        booking = service.create_vehicle_booking("cust-1", vehicle_request())

        with patch.object(service.db, "transact_write", return_value=False) as transact:
            with pytest.raises(BookingError) as exc_info:
                service.update_status(
                    booking.booking_id, BookingStatus.CONFIRMED, partner_id="partner-veh"
                )

        assert exc_info.value.code == ErrorCode.CONFLICT_DETECTED
        items = transact.call_args.args[0]
        assert len(items) == 2
        assert items[0]["Update"]["TableName"] == "test-marketplace-listings"

    def test_concurrent_status_change(self, service: BookingService) -> None:
        booking = service.create_vehicle_booking("cust-1", vehicle_request())
        service.update_status(booking.booking_id, BookingStatus.CONFIRMED, partner_id="partner-veh")

        with patch.object(service.db, "transact_write", return_value=False):
            with pytest.raises(BookingError) as exc_info:
                service.update_status(
                    booking.booking_id, BookingStatus.ACTIVE, partner_id="partner-veh"
                )

        assert exc_info.value.code == ErrorCode.INVALID_STATUS_TRANSITION
        assert "concurrently" in exc_info.value.message

    def test_concurrent_cancel(self, service: BookingService) -> None:
        booking = service.create_vehicle_booking("cust-1", vehicle_request())

        with patch.object(service.db, "update_item", return_value=None):
            with pytest.raises(BookingError) as exc_info:
                service.cancel_booking(booking.booking_id, "cust-1", "Plans changed, sorry")

        assert exc_info.value.code == ErrorCode.BOOKING_NOT_CANCELLABLE
