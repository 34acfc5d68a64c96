"""Standard error codes for the booking engine and workflow.

Engine functions return a ``DomainError`` value for expected business
failures (bad dates, missing rates, conflicts). Workflow code raises
``BookingError`` so the API layer can turn it into an HTTP response.
"""

from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict


class ErrorCode(str, Enum):
    """Error codes shared by the engine, the workflow and the API."""

    # Duration and pricing (ERR_001-ERR_005)
    INVALID_DURATION = "ERR_001"
    DURATION_TOO_SHORT = "ERR_002"
    DURATION_TOO_LONG = "ERR_003"
    MISSING_RATE = "ERR_004"
    CONFLICT_DETECTED = "ERR_005"

    # Listing and booking workflow (ERR_006-ERR_011)
    LISTING_NOT_FOUND = "ERR_006"
    LISTING_NOT_BOOKABLE = "ERR_007"
    MAX_GUESTS_EXCEEDED = "ERR_008"
    BOOKING_NOT_FOUND = "ERR_009"
    INVALID_STATUS_TRANSITION = "ERR_010"
    BOOKING_NOT_CANCELLABLE = "ERR_011"

    # Identity (ERR_AUTH_001-ERR_AUTH_002)
    AUTH_REQUIRED = "ERR_AUTH_001"
    UNAUTHORIZED = "ERR_AUTH_002"


# Human-readable error messages
ERROR_MESSAGES: dict[ErrorCode, str] = {
    ErrorCode.INVALID_DURATION: "End date must be after start date",
    ErrorCode.DURATION_TOO_SHORT: "The requested duration is shorter than allowed",
    ErrorCode.DURATION_TOO_LONG: "The requested duration is longer than allowed",
    ErrorCode.MISSING_RATE: "This listing has no valid rate for the requested booking",
    ErrorCode.CONFLICT_DETECTED: "The listing is not available for the selected dates",
    ErrorCode.LISTING_NOT_FOUND: "Listing not found",
    ErrorCode.LISTING_NOT_BOOKABLE: "This listing is not available for booking",
    ErrorCode.MAX_GUESTS_EXCEEDED: "Number of guests exceeds the listing capacity",
    ErrorCode.BOOKING_NOT_FOUND: "Booking not found",
    ErrorCode.INVALID_STATUS_TRANSITION: "This status change is not allowed",
    ErrorCode.BOOKING_NOT_CANCELLABLE: "This booking cannot be cancelled",
    ErrorCode.AUTH_REQUIRED: "Authentication required to perform this action",
    ErrorCode.UNAUTHORIZED: "You are not authorized to perform this action",
}

# Recovery suggestions for clients
ERROR_RECOVERY: dict[ErrorCode, str] = {
    ErrorCode.INVALID_DURATION: "Pick an end date after the start date",
    ErrorCode.DURATION_TOO_SHORT: "Extend the booking to meet the minimum duration",
    ErrorCode.DURATION_TOO_LONG: "Shorten the booking to the maximum duration",
    ErrorCode.MISSING_RATE: "Contact the partner; the listing pricing is incomplete",
    ErrorCode.CONFLICT_DETECTED: "Choose different dates",
    ErrorCode.LISTING_NOT_FOUND: "Verify the listing ID",
    ErrorCode.LISTING_NOT_BOOKABLE: "Choose another listing or contact the partner",
    ErrorCode.MAX_GUESTS_EXCEEDED: "Reduce the number of guests",
    ErrorCode.BOOKING_NOT_FOUND: "Verify the booking ID",
    ErrorCode.INVALID_STATUS_TRANSITION: "Check the current booking status",
    ErrorCode.BOOKING_NOT_CANCELLABLE: "Only pending or confirmed bookings can be cancelled",
    ErrorCode.AUTH_REQUIRED: "Sign in and try again",
    ErrorCode.UNAUTHORIZED: "Use an account that owns this resource",
}


class DomainError(BaseModel):
    """Typed failure returned by engine functions.

    Also the JSON body of every error response produced by the API.
    """

    model_config = ConfigDict(strict=True, frozen=True)

    success: bool = False
    error_code: ErrorCode
    message: str
    recovery: str
    details: Optional[dict[str, str]] = None

    @classmethod
    def from_code(
        cls,
        code: ErrorCode,
        details: Optional[dict[str, str]] = None,
        message: Optional[str] = None,
    ) -> "DomainError":
        """Create a DomainError from an error code.

        Args:
            code: The error code
            details: Optional additional context about the error
            message: Optional specific message replacing the default one

        Returns:
            A DomainError with the message and recovery hint for the code.
        """
        return cls(
            error_code=code,
            message=message or ERROR_MESSAGES[code],
            recovery=ERROR_RECOVERY[code],
            details=details,
        )


class BookingError(Exception):
    """Exception raised by booking workflow operations.

    Caught by the API exception handler and converted to a DomainError body.
    """

    def __init__(
        self,
        code: ErrorCode,
        details: Optional[dict[str, str]] = None,
        message: Optional[str] = None,
    ):
        self.code = code
        self.message = message or ERROR_MESSAGES[code]
        self.recovery = ERROR_RECOVERY[code]
        self.details = details
        super().__init__(self.message)

    @classmethod
    def from_domain_error(cls, error: DomainError) -> "BookingError":
        """Wrap an engine failure so it can propagate as an exception."""
        return cls(error.error_code, details=error.details, message=error.message)

    def to_domain_error(self) -> DomainError:
        """Convert this exception to a DomainError for responses."""
        return DomainError.from_code(self.code, self.details, self.message)
