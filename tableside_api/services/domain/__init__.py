"""
Domain Services - Business logic layer.

Usage:
    from tableside_api.services.domain import OptionGroupService

    service = OptionGroupService(db)
    groups = service.list_groups(dish_id=12)
"""

from .customization_service import (
    CustomizationResolver,
    InvalidSelectionError,
    MissingRequiredSelectionError,
    ResolvedGroup,
)
from .catalog_service import CategoryService, DishService, MenuService
from .option_group_service import DishOptionService, OptionGroupService
from .table_session_service import SessionExpiredError, TableSessionService, purge_expired_sessions
from .cart_service import CartService, DishNotAvailableError
from .order_service import EmptyCartError, OrderService, TotalMismatchError

__all__ = [
    # Customization
    "CustomizationResolver",
    "ResolvedGroup",
    "InvalidSelectionError",
    "MissingRequiredSelectionError",
    # Catalog
    "CategoryService",
    "DishService",
    "MenuService",
    "OptionGroupService",
    "DishOptionService",
    # Diner
    "TableSessionService",
    "SessionExpiredError",
    "purge_expired_sessions",
    "CartService",
    "DishNotAvailableError",
    # Orders
    "OrderService",
    "EmptyCartError",
    "TotalMismatchError",
]
