"""Shared API request/response models.

This module contains common models used across multiple API endpoints,
including error response wrappers and validation error formatting.

Domain models (Booking, Listing, price breakdowns) live in
marketplace.models and are reused directly by the routes.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

# Re-export DomainError: the body of every business error response
from marketplace.models.errors import DomainError, ErrorCode

__all__ = [
    "DomainError",
    "ErrorCode",
    "HealthResponse",
    "ValidationErrorResponse",
    "ValidationErrorDetail",
    "format_validation_errors",
]


class ValidationErrorDetail(BaseModel):
    """Detail of a single validation error."""

    model_config = ConfigDict(strict=True)

    loc: list[str] = Field(
        ...,
        description="Path to the field that failed validation",
        examples=[["body", "start_date"]],
    )
    msg: str = Field(
        ...,
        description="Human-readable error message",
        examples=["Field required"],
    )
    type: str = Field(
        ...,
        description="Error type identifier",
        examples=["missing"],
    )


class ValidationErrorResponse(BaseModel):
    """Response format for request validation errors (HTTP 422).

    Same envelope as DomainError so clients handle one error shape.
    """

    model_config = ConfigDict(strict=True)

    success: bool = False
    error_code: str = "ERR_VALIDATION"
    message: str = "Request validation failed"
    recovery: str = "Check the request parameters and try again"
    details: list[ValidationErrorDetail] = Field(default_factory=list)


class HealthResponse(BaseModel):
    """Service health status."""

    status: str = Field(..., examples=["healthy"])
    environment: str = Field(..., examples=["dev"])
    version: str = Field(..., examples=["0.1.0"])


def format_validation_errors(errors: Any) -> ValidationErrorResponse:
    """Convert Pydantic validation errors to ValidationErrorResponse.

    Args:
        errors: Error dicts from RequestValidationError.errors()

    Returns:
        ValidationErrorResponse ready for JSON serialization.
    """
    details = [
        ValidationErrorDetail(
            loc=[str(loc) for loc in error.get("loc", [])],
            msg=str(error.get("msg", "")),
            type=str(error.get("type", "")),
        )
        for error in errors
    ]
    return ValidationErrorResponse(details=details)
