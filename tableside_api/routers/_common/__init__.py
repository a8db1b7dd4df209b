"""
Common utilities shared across routers.
"""

from .base import get_user_id, get_user_email, require_management, require_any_staff
from .pagination import Pagination, get_pagination

__all__ = [
    "get_user_id",
    "get_user_email",
    "require_management",
    "require_any_staff",
    "Pagination",
    "get_pagination",
]
