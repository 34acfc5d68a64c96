"""Seed a development database with sample listings.

Creates (optionally) the marketplace tables and stores a few vehicle and
stay listings covering the pricing paths: daily, monthly, driver and
weekly/monthly stay tiers.

Usage:
    marketplace-seed --env dev
    marketplace-seed --env dev --create-tables
    marketplace-seed --env dev --clear-first
"""

import argparse
import os
import sys
from decimal import Decimal
from typing import Any

import boto3
from botocore.exceptions import ClientError

from marketplace.models import (
    Listing,
    ListingStatus,
    StayRates,
    VehicleRates,
    Vertical,
)
from marketplace.services.dynamodb import DynamoDBService
from marketplace.services.listings import ListingService

LISTINGS_TABLE = "listings"
BOOKINGS_TABLE = "bookings"


def _gsi(attribute: str) -> dict[str, Any]:
    return {
        "IndexName": f"{attribute}-index",
        "KeySchema": [{"AttributeName": attribute, "KeyType": "HASH"}],
        "Projection": {"ProjectionType": "ALL"},
    }


def table_definitions(prefix: str) -> list[dict[str, Any]]:
    """CreateTable requests for every marketplace table."""
    return [
        {
            "TableName": f"{prefix}-{LISTINGS_TABLE}",
            "KeySchema": [{"AttributeName": "listing_id", "KeyType": "HASH"}],
            "AttributeDefinitions": [
                {"AttributeName": "listing_id", "AttributeType": "S"},
            ],
            "BillingMode": "PAY_PER_REQUEST",
        },
        {
            "TableName": f"{prefix}-{BOOKINGS_TABLE}",
            "KeySchema": [
                {"AttributeName": "listing_id", "KeyType": "HASH"},
                {"AttributeName": "booking_id", "KeyType": "RANGE"},
            ],
            "AttributeDefinitions": [
                {"AttributeName": "listing_id", "AttributeType": "S"},
                {"AttributeName": "booking_id", "AttributeType": "S"},
                {"AttributeName": "partner_id", "AttributeType": "S"},
                {"AttributeName": "customer_id", "AttributeType": "S"},
            ],
            "GlobalSecondaryIndexes": [
                _gsi("booking_id"),
                _gsi("partner_id"),
                _gsi("customer_id"),
            ],
            "BillingMode": "PAY_PER_REQUEST",
        },
    ]


def create_tables(client: Any, prefix: str) -> list[str]:
    """Create missing tables. Returns the names that were created."""
    created = []
    for definition in table_definitions(prefix):
        try:
            client.create_table(**definition)
            created.append(definition["TableName"])
        except ClientError as e:
            if e.response["Error"]["Code"] != "ResourceInUseException":
                raise
    return created


def sample_listings() -> list[Listing]:
    """Listings that exercise each pricing path."""
    return [
        Listing(
            listing_id="veh-corolla",
            vertical=Vertical.VEHICLE,
            partner_id="partner-001",
            name="Toyota Corolla 2021",
            vehicle_rates=VehicleRates(
                price_per_day=Decimal("5000"),
                price_per_km=Decimal("25"),
                monthly_price=Decimal("120000"),
                deposit_required=Decimal("10000"),
                driver_price_per_day=Decimal("2000"),
                driver_price_per_month=Decimal("45000"),
                included_km_per_day=100,
                included_km_per_month=2500,
            ),
        ),
        Listing(
            listing_id="veh-prado",
            vertical=Vertical.VEHICLE,
            partner_id="partner-001",
            name="Toyota Prado with driver",
            vehicle_rates=VehicleRates(
                price_per_day=Decimal("15000"),
                deposit_required=Decimal("25000"),
                driver_price_per_day=Decimal("3000"),
                unlimited_mileage=True,
            ),
        ),
        Listing(
            listing_id="stay-villa",
            vertical=Vertical.STAY,
            partner_id="partner-002",
            name="Lakeside Villa",
            max_guests=6,
            min_nights=2,
            max_nights=90,
            stay_rates=StayRates(
                price_per_night=Decimal("3000"),
                price_per_week=Decimal("18000"),
                price_per_month=Decimal("60000"),
                cleaning_fee=Decimal("1500"),
                deposit_required=Decimal("5000"),
            ),
        ),
        Listing(
            listing_id="stay-cabin",
            vertical=Vertical.STAY,
            partner_id="partner-002",
            name="Hill Cabin",
            status=ListingStatus.MAINTENANCE,
            max_guests=2,
            stay_rates=StayRates(price_per_night=Decimal("2500")),
        ),
    ]


def seed_listings(listings: ListingService) -> list[Listing]:
    """Store the sample listings. Existing booking versions are kept."""
    stored = [listings.put_listing(listing) for listing in sample_listings()]
    for listing in stored:
        print(f"  ✓ {listing.listing_id}: {listing.name} ({listing.vertical.value})")
    return stored


def clear_table(resource: Any, table_name: str) -> int:
    """Clear all items from a table.

    Returns:
        Number of items deleted
    """
    table = resource.Table(table_name)
    key_attrs = [k["AttributeName"] for k in table.key_schema]

    deleted = 0
    kwargs: dict[str, Any] = {}
    while True:
        response = table.scan(**kwargs)
        with table.batch_writer() as batch:
            for item in response.get("Items", []):
                batch.delete_item(Key={k: item[k] for k in key_attrs})
                deleted += 1
        if not response.get("LastEvaluatedKey"):
            return deleted
        kwargs["ExclusiveStartKey"] = response["LastEvaluatedKey"]


def main(argv: list[str] | None = None) -> int:
    """Run the seed script."""
    parser = argparse.ArgumentParser(description="Seed the marketplace tables")
    parser.add_argument(
        "--env",
        choices=["dev", "staging", "prod"],
        default="dev",
        help="Target environment (default: dev)",
    )
    parser.add_argument(
        "--region",
        default=os.environ.get("AWS_DEFAULT_REGION", "eu-west-1"),
        help="AWS region (default: eu-west-1 or AWS_DEFAULT_REGION env var)",
    )
    parser.add_argument(
        "--create-tables",
        action="store_true",
        help="Create missing tables first (local DynamoDB)",
    )
    parser.add_argument(
        "--clear-first",
        action="store_true",
        help="Clear existing data before seeding",
    )
    args = parser.parse_args(argv)

    if args.env == "prod":
        print("Refusing to seed production data.")
        return 1

    # DynamoDBService builds its clients from the default region
    os.environ["AWS_DEFAULT_REGION"] = args.region
    prefix = f"marketplace-{args.env}"
    print(f"\n🌱 Seeding {args.env} environment (region: {args.region})\n")

    if args.create_tables:
        client = boto3.client("dynamodb", region_name=args.region)
        for name in create_tables(client, prefix):
            print(f"  Created table {name}")

    if args.clear_first:
        resource = boto3.resource("dynamodb", region_name=args.region)
        for table in (LISTINGS_TABLE, BOOKINGS_TABLE):
            count = clear_table(resource, f"{prefix}-{table}")
            print(f"  Cleared {count} items from {table}")

    try:
        seed_listings(ListingService(DynamoDBService(name_prefix=prefix)))
    except ClientError as e:
        print(f"  ❌ Failed to seed listings: {e}")
        return 1

    print("\n✅ Seed completed successfully!")
    return 0


if __name__ == "__main__":
    sys.exit(main())
