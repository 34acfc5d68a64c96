"""FastAPI exception handlers for converting BookingError to HTTP responses.

Domain errors (BookingError) become JSON responses shaped like DomainError.

The ErrorCode-to-HTTP status mapping follows REST conventions:
- 400 Bad Request: Duration and capacity violations
- 401 Unauthorized: No caller identity
- 403 Forbidden: Caller lacks the role or does not own the resource
- 404 Not Found: Unknown listing or booking
- 409 Conflict: Date conflicts, unbookable listings, illegal status changes
- 422 Unprocessable Entity: Listing pricing is incomplete

Usage:
    from marketplace_api.exceptions import register_exception_handlers
    register_exception_handlers(app)
"""

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.status import (
    HTTP_400_BAD_REQUEST,
    HTTP_401_UNAUTHORIZED,
    HTTP_403_FORBIDDEN,
    HTTP_404_NOT_FOUND,
    HTTP_409_CONFLICT,
    HTTP_422_UNPROCESSABLE_ENTITY,
    HTTP_500_INTERNAL_SERVER_ERROR,
)

from marketplace.models.errors import BookingError, ErrorCode
from marketplace.utils.logging import get_logger
from marketplace_api.models.common import format_validation_errors

logger = get_logger(__name__)

# Map ErrorCode to HTTP status codes
ERROR_CODE_TO_HTTP_STATUS: dict[ErrorCode, int] = {
    # Duration and capacity -> 400 Bad Request
    ErrorCode.INVALID_DURATION: HTTP_400_BAD_REQUEST,
    ErrorCode.DURATION_TOO_SHORT: HTTP_400_BAD_REQUEST,
    ErrorCode.DURATION_TOO_LONG: HTTP_400_BAD_REQUEST,
    ErrorCode.MAX_GUESTS_EXCEEDED: HTTP_400_BAD_REQUEST,
    # Incomplete rate configuration -> 422
    ErrorCode.MISSING_RATE: HTTP_422_UNPROCESSABLE_ENTITY,
    # State conflicts -> 409 Conflict
    ErrorCode.CONFLICT_DETECTED: HTTP_409_CONFLICT,
    ErrorCode.LISTING_NOT_BOOKABLE: HTTP_409_CONFLICT,
    ErrorCode.INVALID_STATUS_TRANSITION: HTTP_409_CONFLICT,
    ErrorCode.BOOKING_NOT_CANCELLABLE: HTTP_409_CONFLICT,
    # Not found -> 404
    ErrorCode.LISTING_NOT_FOUND: HTTP_404_NOT_FOUND,
    ErrorCode.BOOKING_NOT_FOUND: HTTP_404_NOT_FOUND,
    # Identity
    ErrorCode.AUTH_REQUIRED: HTTP_401_UNAUTHORIZED,
    ErrorCode.UNAUTHORIZED: HTTP_403_FORBIDDEN,
}


def get_http_status_for_error(code: ErrorCode) -> int:
    """Get HTTP status code for an ErrorCode.

    Args:
        code: The ErrorCode to map

    Returns:
        HTTP status code, defaults to 400 if not explicitly mapped.
    """
    return ERROR_CODE_TO_HTTP_STATUS.get(code, HTTP_400_BAD_REQUEST)


async def booking_error_handler(request: Request, exc: BookingError) -> JSONResponse:
    """Handle BookingError exceptions and convert to JSON response.

    Args:
        request: The incoming request (unused but required by FastAPI)
        exc: The BookingError exception

    Returns:
        JSONResponse with DomainError body and the mapped status code.
    """
    status_code = get_http_status_for_error(exc.code)
    return JSONResponse(
        status_code=status_code,
        content=exc.to_domain_error().model_dump(mode="json"),
    )


async def validation_error_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Wrap request validation failures in the standard error envelope."""
    return JSONResponse(
        status_code=HTTP_422_UNPROCESSABLE_ENTITY,
        content=format_validation_errors(exc.errors()).model_dump(mode="json"),
    )


async def generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Handle unexpected exceptions with a generic error response.

    The actual error is logged; clients never see internal details.
    """
    logger.exception("Unhandled exception on %s: %s", request.url.path, exc)

    error_response = {
        "success": False,
        "error_code": "ERR_INTERNAL",
        "message": "An unexpected error occurred",
        "recovery": "Please try again later or contact support",
        "details": None,
    }

    return JSONResponse(
        status_code=HTTP_500_INTERNAL_SERVER_ERROR,
        content=error_response,
    )


def register_exception_handlers(app: FastAPI) -> None:
    """Register all exception handlers with the FastAPI app.

    Args:
        app: The FastAPI application instance.
    """
    app.add_exception_handler(BookingError, booking_error_handler)  # type: ignore[arg-type]
    app.add_exception_handler(RequestValidationError, validation_error_handler)  # type: ignore[arg-type]
    app.add_exception_handler(Exception, generic_exception_handler)
