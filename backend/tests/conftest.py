"""Pytest configuration and fixtures for the marketplace backend tests.

This module provides reusable fixtures for testing:
- DynamoDB mocking with moto
- Rate configurations from the pricing scenarios
- Stored vehicle and stay listings
- Services wired to the mocked tables
"""

import os
from datetime import date, datetime, timezone
from decimal import Decimal
from typing import Any, Generator

import boto3
import pytest
from moto import mock_aws

# === Environment Setup ===

# Set environment variables for testing before imports
os.environ.setdefault("AWS_DEFAULT_REGION", "eu-west-1")
os.environ["DYNAMODB_TABLE_PREFIX"] = "test-marketplace"
os.environ.setdefault("ENVIRONMENT", "test")

if not os.environ.get("AWS_PROFILE") and not os.environ.get("AWS_ACCESS_KEY_ID"):
    os.environ.setdefault("AWS_ACCESS_KEY_ID", "testing")
    os.environ.setdefault("AWS_SECRET_ACCESS_KEY", "testing")

TABLE_PREFIX = "test-marketplace"


# === Singleton Reset ===


@pytest.fixture(autouse=True)
def reset_singletons() -> Generator[None, None, None]:
    """Reset DynamoDB, settings and service singletons around each test.

    Tests using mock_aws get a fresh service instance inside the mock
    context rather than reusing one from a previous test.
    """
    from marketplace.config import get_settings
    from marketplace.services.dynamodb import reset_dynamodb_service
    from marketplace_api.dependencies import reset_services

    reset_services()
    get_settings.cache_clear()
    reset_dynamodb_service()
    yield
    reset_services()
    get_settings.cache_clear()
    reset_dynamodb_service()


# === DynamoDB Fixtures ===


@pytest.fixture
def aws_credentials() -> None:
    """Mocked AWS Credentials for moto."""
    if not os.environ.get("AWS_PROFILE"):
        os.environ["AWS_ACCESS_KEY_ID"] = "testing"
        os.environ["AWS_SECRET_ACCESS_KEY"] = "testing"
        os.environ["AWS_SECURITY_TOKEN"] = "testing"
        os.environ["AWS_SESSION_TOKEN"] = "testing"
    os.environ["AWS_DEFAULT_REGION"] = "eu-west-1"


@pytest.fixture
def dynamodb_client(aws_credentials: None) -> Generator[Any, None, None]:
    """Create a mocked DynamoDB client."""
    with mock_aws():
        client = boto3.client("dynamodb", region_name="eu-west-1")
        yield client


@pytest.fixture
def create_tables(dynamodb_client: Any) -> None:
    """Create the listings and bookings tables."""
    from marketplace.scripts.seed_data import create_tables as create_marketplace_tables

    create_marketplace_tables(dynamodb_client, TABLE_PREFIX)


@pytest.fixture
def db(create_tables: None) -> Any:
    """DynamoDBService bound to the mocked tables."""
    from marketplace.services.dynamodb import get_dynamodb_service

    return get_dynamodb_service()


@pytest.fixture
def listing_service(db: Any) -> Any:
    from marketplace.services.listings import ListingService

    return ListingService(db)


@pytest.fixture
def booking_service(db: Any, listing_service: Any) -> Any:
    from marketplace.services.booking import BookingService

    return BookingService(db, listing_service)


# === Rate Fixtures ===


@pytest.fixture
def vehicle_rates() -> Any:
    """Daily-priced vehicle: 5000/day, 10000 deposit."""
    from marketplace.models import VehicleRates

    return VehicleRates(
        price_per_day=Decimal("5000"),
        price_per_km=Decimal("25"),
        deposit_required=Decimal("10000"),
        driver_price_per_day=Decimal("2000"),
        included_km_per_day=100,
    )


@pytest.fixture
def monthly_vehicle_rates() -> Any:
    """Vehicle with a 100000 monthly price for long-term rentals."""
    from marketplace.models import VehicleRates

    return VehicleRates(
        price_per_day=Decimal("5000"),
        monthly_price=Decimal("100000"),
        deposit_required=Decimal("20000"),
        driver_price_per_day=Decimal("2000"),
        driver_price_per_month=Decimal("40000"),
        included_km_per_day=100,
        included_km_per_month=2500,
    )


@pytest.fixture
def stay_rates() -> Any:
    """Stay at 3000/night or 18000/week."""
    from marketplace.models import StayRates

    return StayRates(
        price_per_night=Decimal("3000"),
        price_per_week=Decimal("18000"),
        cleaning_fee=Decimal("1500"),
        deposit_required=Decimal("5000"),
    )


# === Listing Fixtures ===


@pytest.fixture
def vehicle_listing(monthly_vehicle_rates: Any) -> Any:
    from marketplace.models import Listing, Vertical

    return Listing(
        listing_id="veh-001",
        vertical=Vertical.VEHICLE,
        partner_id="partner-veh",
        name="Toyota Corolla",
        vehicle_rates=monthly_vehicle_rates,
    )


@pytest.fixture
def stay_listing(stay_rates: Any) -> Any:
    from marketplace.models import Listing, Vertical

    return Listing(
        listing_id="stay-001",
        vertical=Vertical.STAY,
        partner_id="partner-stay",
        name="Lakeside Villa",
        max_guests=4,
        min_nights=2,
        max_nights=60,
        stay_rates=stay_rates,
    )


@pytest.fixture
def stored_listings(listing_service: Any, vehicle_listing: Any, stay_listing: Any) -> None:
    """Store the vehicle and stay listings in the mocked table."""
    listing_service.put_listing(vehicle_listing)
    listing_service.put_listing(stay_listing)


# === Booking Helpers ===


def make_booking(
    booking_id: str = "BKG-TEST",
    status: Any = None,
    start: date = date(2025, 3, 10),
    end: date = date(2025, 3, 15),
    subtotal: Decimal = Decimal("15000"),
    partner_id: str = "partner-veh",
    customer_id: str = "cust-1",
) -> Any:
    """Build a stored-style vehicle booking with a daily price snapshot."""
    from marketplace.models import (
        Booking,
        BookingStatus,
        RentalType,
        VehiclePriceBreakdown,
        Vertical,
    )

    days = (end - start).days
    pricing = VehiclePriceBreakdown(
        rental_type=RentalType.SHORT_TERM,
        with_driver=False,
        daily_rate=subtotal / days if days else subtotal,
        monthly_rate=Decimal("0"),
        total_days=days,
        vehicle_subtotal=subtotal,
        driver_daily_rate=Decimal("0"),
        driver_monthly_rate=Decimal("0"),
        driver_subtotal=Decimal("0"),
        included_km=0,
        subtotal=subtotal,
        deposit=Decimal("0"),
        total=subtotal,
        price_per_unit=subtotal / days if days else subtotal,
        unit_label="day",
    )
    now = datetime(2025, 1, 1, tzinfo=timezone.utc)
    return Booking(
        booking_id=booking_id,
        listing_id="veh-001",
        vertical=Vertical.VEHICLE,
        customer_id=customer_id,
        partner_id=partner_id,
        start_date=start,
        end_date=end,
        status=status or BookingStatus.COMPLETED,
        pricing=pricing,
        rental_type=RentalType.SHORT_TERM,
        pickup_location="Airport",
        dropoff_location="Airport",
        created_at=now,
        updated_at=now,
    )


@pytest.fixture
def booking_factory() -> Any:
    """Factory for Booking objects, see make_booking."""
    return make_booking


# === API Fixtures ===


def identity_headers(
    user_id: str, role: str = "CUSTOMER", partner_id: str | None = None
) -> dict[str, str]:
    """Headers the API gateway injects after validating a token."""
    headers = {"x-user-sub": user_id, "x-user-role": role}
    if partner_id:
        headers["x-partner-id"] = partner_id
    return headers


@pytest.fixture
def headers() -> dict[str, dict[str, str]]:
    """Identity headers for each kind of caller."""
    return {
        "customer": identity_headers("cust-1"),
        "other_customer": identity_headers("cust-2"),
        "vehicle_partner": identity_headers("user-p1", "PARTNER", "partner-veh"),
        "stay_partner": identity_headers("user-p2", "PARTNER", "partner-stay"),
        "admin": identity_headers("admin-1", "ADMIN"),
    }


@pytest.fixture
def api_client(stored_listings: None) -> Generator[Any, None, None]:
    """TestClient for the API with both listings stored in mocked tables."""
    from fastapi.testclient import TestClient

    from marketplace_api.main import app

    with TestClient(app) as client:
        yield client
