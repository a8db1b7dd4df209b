"""
Authentication router.
Handles staff login and user info.
"""

from fastapi import APIRouter, Depends, Request
from sqlalchemy import select
from sqlalchemy.orm import Session

from tableside_api.models import StaffUser
from tableside_shared.config.logging import audit_auth_event, auth_logger as logger, mask_email
from tableside_shared.config.settings import settings
from tableside_shared.infrastructure.db import get_db, safe_commit
from tableside_shared.security.auth import current_user_context, sign_jwt
from tableside_shared.security.password import hash_password, needs_rehash, verify_password
from tableside_shared.security.rate_limit import limiter
from tableside_shared.utils.exceptions import NotFoundError, UnauthorizedError
from tableside_shared.utils.schemas import LoginRequest, LoginResponse, UserInfo


router = APIRouter(prefix="/api/auth", tags=["auth"])


@router.post("/login", response_model=LoginResponse)
@limiter.limit(settings.login_rate_limit)
def login(request: Request, body: LoginRequest, db: Session = Depends(get_db)) -> LoginResponse:
    """
    Authenticate a staff member and return an access token.

    The access token contains:
    - sub: user ID
    - roles: list with the user's role
    - email: user's email

    Rate limited per client IP.
    """
    client_ip = request.client.host if request.client else None
    user = db.scalar(
        select(StaffUser).where(StaffUser.email == body.email, StaffUser.is_active.is_(True))
    )

    if not user or not verify_password(body.password, user.password):
        audit_auth_event(
            "LOGIN",
            user_id=user.id if user else None,
            email=body.email,
            success=False,
            reason="user not found" if not user else "invalid password",
            ip_address=client_ip,
        )
        raise UnauthorizedError("Invalid email or password", code="INVALID_CREDENTIALS")

    # Rehash when the stored hash uses outdated bcrypt rounds
    if needs_rehash(user.password):
        user.password = hash_password(body.password)
        safe_commit(db)

    access_token = sign_jwt({
        "sub": str(user.id),
        "roles": [user.role],
        "email": user.email,
    })

    audit_auth_event("LOGIN", user_id=user.id, email=user.email, success=True, ip_address=client_ip)
    logger.info("LOGIN_SUCCESS", email=mask_email(user.email), user_id=user.id, role=user.role)

    return LoginResponse(
        access_token=access_token,
        token_type="Bearer",
        expires_in=settings.jwt_access_token_expire_minutes * 60,
        user=UserInfo(id=user.id, email=user.email, full_name=user.full_name, role=user.role),
    )


@router.get("/me", response_model=UserInfo)
def me(
    ctx: dict = Depends(current_user_context),
    db: Session = Depends(get_db),
) -> UserInfo:
    """Return the authenticated staff member."""
    user = db.scalar(
        select(StaffUser).where(StaffUser.id == int(ctx["sub"]), StaffUser.is_active.is_(True))
    )
    if user is None:
        raise NotFoundError("User", ctx["sub"])
    return UserInfo(id=user.id, email=user.email, full_name=user.full_name, role=user.role)
