"""
Authentication and authorization utilities.
Handles JWT access tokens for staff and JWT table tokens for diners.
"""

from __future__ import annotations

import time
import uuid
from datetime import datetime
from typing import Any, Iterable

import jwt
from fastapi import Header

from tableside_shared.config.settings import (
    JWT_SECRET,
    JWT_ISSUER,
    JWT_AUDIENCE,
    TABLE_TOKEN_SECRET,
    settings,
)
from tableside_shared.config.logging import get_logger
from tableside_shared.utils.exceptions import UnauthorizedError, InsufficientRoleError

logger = get_logger(__name__)


# =============================================================================
# JWT Functions (for staff authentication)
# =============================================================================


def sign_jwt(payload: dict[str, Any], ttl_seconds: int | None = None) -> str:
    """
    Sign a staff access token with the given payload.

    Args:
        payload: Claims to include in the token (sub, email, roles).
        ttl_seconds: Token lifetime in seconds. Defaults to the configured expiry.

    Returns:
        Signed JWT token string.
    """
    if ttl_seconds is None:
        ttl_seconds = settings.jwt_access_token_expire_minutes * 60

    now = int(time.time())
    data = {
        **payload,
        "iss": JWT_ISSUER,
        "aud": JWT_AUDIENCE,
        "iat": now,
        "exp": now + ttl_seconds,
        "type": "access",
        "jti": str(uuid.uuid4()),
    }
    return jwt.encode(data, JWT_SECRET, algorithm="HS256")


def verify_jwt(token: str) -> dict[str, Any]:
    """
    Verify and decode a staff access token.

    Returns:
        Decoded token claims.

    Raises:
        UnauthorizedError: If token is invalid, expired or malformed.
    """
    try:
        payload = jwt.decode(
            token,
            JWT_SECRET,
            algorithms=["HS256"],
            audience=JWT_AUDIENCE,
            issuer=JWT_ISSUER,
        )
    except jwt.ExpiredSignatureError:
        raise UnauthorizedError("Token has expired", code="TOKEN_EXPIRED")
    except jwt.InvalidTokenError as e:
        # Log the actual error, return a generic message to the client
        logger.warning("JWT validation failed", error=str(e))
        raise UnauthorizedError("Invalid token", code="INVALID_TOKEN")

    if payload.get("type") != "access":
        raise UnauthorizedError("Invalid token type", code="INVALID_TOKEN")

    try:
        int(payload["sub"])
    except (KeyError, ValueError, TypeError):
        raise UnauthorizedError("Invalid token: malformed subject claim", code="INVALID_TOKEN")

    return payload


def get_bearer_token(authorization: str | None) -> str:
    """
    Extract bearer token from Authorization header.

    Raises:
        UnauthorizedError: If header is missing or malformed.
    """
    if not authorization:
        raise UnauthorizedError("Missing Authorization header")
    if not authorization.startswith("Bearer "):
        raise UnauthorizedError("Invalid Authorization header format. Expected: Bearer <token>")
    return authorization.split(" ", 1)[1].strip()


def current_user_context(
    authorization: str | None = Header(default=None, alias="Authorization"),
) -> dict[str, Any]:
    """
    FastAPI dependency to get the current staff context from JWT.

    Usage:
        @router.get("/protected")
        def protected_endpoint(ctx: dict = Depends(current_user_context)):
            user_id = int(ctx["sub"])
            ...

    Returns:
        Dict with: sub (user_id), email, roles
    """
    token = get_bearer_token(authorization)
    return verify_jwt(token)


def require_roles(ctx: dict[str, Any], allowed: Iterable[str]) -> None:
    """
    Verify that the user has at least one of the allowed roles.

    Raises:
        InsufficientRoleError: If user lacks required role.
    """
    allowed_set = set(allowed)
    user_roles = set(ctx.get("roles", []))
    if not user_roles.intersection(allowed_set):
        raise InsufficientRoleError(list(allowed_set), user_id=ctx.get("sub"))


# =============================================================================
# Table Token Functions (for diner authentication)
# =============================================================================


TABLE_TOKEN_ISSUER = "tableside:table"
TABLE_TOKEN_AUDIENCE = "tableside:diner"


def sign_table_token(table_id: int, session_id: int, expires_at: datetime) -> str:
    """
    Create a JWT token bound to one table session.

    The token carries the session expiry, but expiry is enforced against
    the session row, which closes the session and purges its cart.
    """
    now = int(time.time())
    payload = {
        "table_id": table_id,
        "session_id": session_id,
        "type": "table",  # Distinguish from staff JWT
        "iss": TABLE_TOKEN_ISSUER,
        "aud": TABLE_TOKEN_AUDIENCE,
        "iat": now,
        "exp": int(expires_at.timestamp()),
    }
    return jwt.encode(payload, TABLE_TOKEN_SECRET, algorithm="HS256")


def verify_table_token(token: str) -> dict[str, int]:
    """
    Verify a table token's signature and claims.

    ``exp`` is not checked here: ``TableSessionService.get_usable_session``
    rejects expired sessions and discards their carts.

    Returns:
        Dict with: table_id, session_id

    Raises:
        UnauthorizedError: If the token is malformed or not a table token.
    """
    try:
        payload = jwt.decode(
            token,
            TABLE_TOKEN_SECRET,
            algorithms=["HS256"],
            audience=TABLE_TOKEN_AUDIENCE,
            issuer=TABLE_TOKEN_ISSUER,
            options={"verify_exp": False},
        )
    except jwt.InvalidTokenError as e:
        logger.warning("Table token validation failed", error=str(e))
        raise UnauthorizedError("Invalid table token", code="INVALID_TOKEN")

    if payload.get("type") != "table":
        raise UnauthorizedError("Invalid token type", code="INVALID_TOKEN")

    try:
        return {
            "table_id": int(payload["table_id"]),
            "session_id": int(payload["session_id"]),
        }
    except (KeyError, ValueError, TypeError):
        raise UnauthorizedError("Invalid table token", code="INVALID_TOKEN")


def current_table_context(
    x_table_token: str | None = Header(default=None, alias="X-Table-Token"),
) -> dict[str, int]:
    """
    FastAPI dependency to get table context from X-Table-Token header.

    Returns:
        Dict with: table_id, session_id
    """
    if not x_table_token:
        raise UnauthorizedError("Missing X-Table-Token header", code="MISSING_TABLE_TOKEN")
    return verify_table_token(x_table_token)
