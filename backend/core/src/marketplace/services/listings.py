"""Listing service: rate configuration snapshots for vehicles and stays."""

from typing import TYPE_CHECKING, Any

from marketplace.models import BookingError, ErrorCode, Listing
from marketplace.utils.logging import get_logger

if TYPE_CHECKING:
    from .dynamodb import DynamoDBService

logger = get_logger(__name__)


class ListingService:
    """Service for reading and storing listings."""

    TABLE = "listings"
    MAX_PUT_ATTEMPTS = 3

    def __init__(self, db: "DynamoDBService") -> None:
        """Initialize listing service.

        Args:
            db: DynamoDB service instance
        """
        self.db = db

    def get_listing(self, listing_id: str, consistent_read: bool = False) -> Listing | None:
        """Get a listing by ID.

        Args:
            listing_id: Listing ID
            consistent_read: Use a strongly consistent read

        Returns:
            Listing or None if not found
        """
        item = self.db.get_item(
            self.TABLE, {"listing_id": listing_id}, consistent_read=consistent_read
        )
        return self._item_to_listing(item) if item else None

    def require_listing(self, listing_id: str, consistent_read: bool = False) -> Listing:
        """Get a listing or raise LISTING_NOT_FOUND."""
        listing = self.get_listing(listing_id, consistent_read=consistent_read)
        if listing is None:
            raise BookingError(
                ErrorCode.LISTING_NOT_FOUND, details={"listing_id": listing_id}
            )
        return listing

    def put_listing(self, listing: Listing) -> Listing:
        """Create or replace a listing.

        The stored ``booking_version`` is carried over when the listing
        already exists. The write is conditional on the version read, so a
        booking committed in between is never rolled back; the put is then
        retried against the new version.

        Raises:
            BookingError: CONFLICT_DETECTED if bookings keep committing
                through every attempt
        """
        for attempt in range(1, self.MAX_PUT_ATTEMPTS + 1):
            existing = self.get_listing(listing.listing_id, consistent_read=True)
            if existing is None:
                condition = "attribute_not_exists(listing_id)"
                values = None
                stored = listing
            else:
                seen = existing.booking_version
                condition = "booking_version = :seen"
                if seen == 0:
                    condition = "attribute_not_exists(booking_version) OR booking_version = :seen"
                values = {":seen": seen}
                stored = listing.model_copy(update={"booking_version": seen})

            if self.db.put_item(
                self.TABLE,
                self._listing_to_item(stored),
                condition_expression=condition,
                expression_attribute_values=values,
            ):
                return stored

            logger.warning(
                "Listing changed during put, retrying",
                extra={"listing_id": listing.listing_id, "attempt": attempt},
            )

        raise BookingError(
            ErrorCode.CONFLICT_DETECTED,
            details={"listing_id": listing.listing_id, "reason": "version_changed"},
        )

    def get_booking_version(self, listing_id: str) -> int:
        """Read the current booking version with a strongly consistent read.

        Raises:
            BookingError: LISTING_NOT_FOUND if the listing does not exist
        """
        return self.require_listing(listing_id, consistent_read=True).booking_version

    def _listing_to_item(self, listing: Listing) -> dict[str, Any]:
        """Convert Listing model to DynamoDB item."""
        return listing.model_dump(exclude_none=True)

    def _item_to_listing(self, item: dict[str, Any]) -> Listing:
        """Convert DynamoDB item to Listing model."""
        return Listing.model_validate(item)
