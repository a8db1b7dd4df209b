"""
Shared dependencies for routers: staff identity and role checks.
"""

from fastapi import Depends

from tableside_shared.config.constants import ALL_STAFF_ROLES, MANAGEMENT_ROLES
from tableside_shared.security.auth import current_user_context, require_roles


def get_user_id(user: dict) -> int | None:
    """Get user ID from context, handling string format."""
    sub = user.get("sub")
    if sub is None:
        return None
    return int(sub) if isinstance(sub, str) else sub


def get_user_email(user: dict) -> str | None:
    return user.get("email")


def require_management(user: dict = Depends(current_user_context)) -> dict:
    """Dependency that requires ADMIN or MANAGER role."""
    require_roles(user, MANAGEMENT_ROLES)
    return user


def require_any_staff(user: dict = Depends(current_user_context)) -> dict:
    """Dependency that requires any staff role (ADMIN, MANAGER, KITCHEN, WAITER)."""
    require_roles(user, ALL_STAFF_ROLES)
    return user
