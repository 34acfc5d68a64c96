"""FastAPI dependency injection providers for marketplace services.

Services are lazily instantiated and cached with @lru_cache.

Service Dependency Graph:
    DynamoDBService (singleton via get_dynamodb_service)
        ├── ListingService
        └── BookingService (also uses ListingService and Settings)

Testing:
    Use reset_services() to clear cached instances between tests.
"""

from functools import lru_cache

from marketplace.config import get_settings
from marketplace.services.booking import BookingService
from marketplace.services.dynamodb import get_dynamodb_service
from marketplace.services.listings import ListingService


@lru_cache
def get_listing_service() -> ListingService:
    """Get cached ListingService instance."""
    return ListingService(db=get_dynamodb_service())


@lru_cache
def get_booking_service() -> BookingService:
    """Get cached BookingService instance.

    Returns:
        BookingService configured with all required dependencies.
    """
    return BookingService(
        db=get_dynamodb_service(),
        listings=get_listing_service(),
        settings=get_settings(),
    )


def reset_services() -> None:
    """Clear all cached service instances.

    Also resets the DynamoDB singleton and cached settings.
    """
    from marketplace.services.dynamodb import reset_dynamodb_service

    get_listing_service.cache_clear()
    get_booking_service.cache_clear()
    get_settings.cache_clear()

    reset_dynamodb_service()
