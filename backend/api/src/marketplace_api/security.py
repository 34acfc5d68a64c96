"""Caller identity and role checks.

Trust Model:
- The API gateway validates the JWT before the request reaches the app
- After validation, it injects x-user-sub, x-user-role and x-partner-id
- The backend trusts these headers since they come from the gateway

Behind a REST API Cognito authorizer the same values are read from
event.requestContext.authorizer.claims (via Mangum).

Usage:
    @router.post("/bookings/stays")
    async def create(caller: Caller = Depends(require_roles(Role.CUSTOMER))):
        ...
"""

from collections.abc import Callable
from typing import Any

from fastapi import Request
from pydantic import BaseModel, ConfigDict

from marketplace.models import BookingError, ErrorCode, Role
from marketplace.utils.logging import get_logger

logger = get_logger(__name__)

USER_SUB_HEADER = "x-user-sub"
USER_ROLE_HEADER = "x-user-role"
PARTNER_ID_HEADER = "x-partner-id"

# Authorizer claim names for each header
_CLAIMS = {
    USER_SUB_HEADER: "sub",
    USER_ROLE_HEADER: "custom:role",
    PARTNER_ID_HEADER: "custom:partner_id",
}


class Caller(BaseModel):
    """Authenticated principal for one request."""

    model_config = ConfigDict(frozen=True)

    user_id: str
    role: Role = Role.CUSTOMER
    partner_id: str | None = None

    @property
    def is_admin(self) -> bool:
        return self.role == Role.ADMIN


def _claims(request: Request) -> dict[str, Any]:
    event = request.scope.get("aws.event", {})
    claims: dict[str, Any] = (
        event.get("requestContext", {}).get("authorizer", {}).get("claims", {})
    )
    return claims


def _identity_value(request: Request, header_name: str) -> str | None:
    """Read a gateway header, falling back to authorizer claims."""
    value = request.headers.get(header_name)
    if not value:
        value = _claims(request).get(_CLAIMS[header_name])
    return value.strip() if value else None


def get_caller(request: Request) -> Caller | None:
    """Derive the caller from gateway identity, None when anonymous.

    Raises:
        BookingError: UNAUTHORIZED if the role value is not recognised
    """
    user_id = _identity_value(request, USER_SUB_HEADER)
    if not user_id:
        return None

    raw_role = _identity_value(request, USER_ROLE_HEADER) or Role.CUSTOMER.value
    try:
        role = Role(raw_role.upper())
    except ValueError as e:
        raise BookingError(
            ErrorCode.UNAUTHORIZED, details={"role": raw_role}
        ) from e

    return Caller(
        user_id=user_id,
        role=role,
        partner_id=_identity_value(request, PARTNER_ID_HEADER),
    )


def require_roles(*roles: Role) -> Callable[[Request], Caller]:
    """Build a dependency that requires an authenticated caller.

    Args:
        *roles: Allowed roles; any authenticated caller when empty

    Returns:
        FastAPI dependency returning the Caller

    Raises (from the dependency):
        BookingError: AUTH_REQUIRED without identity, UNAUTHORIZED when the
            role is not allowed or a partner has no partner ID
    """
    allowed = frozenset(roles)

    def dependency(request: Request) -> Caller:
        caller = get_caller(request)
        if caller is None:
            logger.warning(
                "auth_identity_missing", extra={"path": request.url.path}
            )
            raise BookingError(ErrorCode.AUTH_REQUIRED)

        if allowed and caller.role not in allowed:
            logger.warning(
                "auth_role_rejected",
                extra={"path": request.url.path, "role": caller.role.value},
            )
            raise BookingError(
                ErrorCode.UNAUTHORIZED, details={"role": caller.role.value}
            )

        if caller.role == Role.PARTNER and not caller.partner_id:
            raise BookingError(
                ErrorCode.UNAUTHORIZED,
                details={"role": caller.role.value},
                message="Partner identity is missing a partner ID",
            )

        return caller

    return dependency
