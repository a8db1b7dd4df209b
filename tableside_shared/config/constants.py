"""
Centralized constants for the backend application.
Avoids magic strings for roles, statuses and limits.

Usage:
    from tableside_shared.config.constants import Roles, MANAGEMENT_ROLES, OrderStatus

    if role in MANAGEMENT_ROLES:
        ...

    if order.status == OrderStatus.RECEIVED:
        ...
"""

from typing import Final


# =============================================================================
# User Roles
# =============================================================================


class Roles:
    """Staff role constants."""

    ADMIN: Final[str] = "ADMIN"
    MANAGER: Final[str] = "MANAGER"
    KITCHEN: Final[str] = "KITCHEN"
    WAITER: Final[str] = "WAITER"

    ALL: Final[list[str]] = [ADMIN, MANAGER, KITCHEN, WAITER]


# Role groups for common access patterns
MANAGEMENT_ROLES: Final[frozenset[str]] = frozenset({Roles.ADMIN, Roles.MANAGER})
ALL_STAFF_ROLES: Final[frozenset[str]] = frozenset(Roles.ALL)


# =============================================================================
# Entity Status Constants
# =============================================================================


class OrderStatus:
    """
    Order status constants.

    received -> preparing -> ready -> served, with cancelled reachable at
    any point. Transitions are not validated: staff may set any status.
    """

    RECEIVED: Final[str] = "received"
    PREPARING: Final[str] = "preparing"
    READY: Final[str] = "ready"
    SERVED: Final[str] = "served"
    CANCELLED: Final[str] = "cancelled"

    ALL: Final[list[str]] = [RECEIVED, PREPARING, READY, SERVED, CANCELLED]
    ACTIVE: Final[list[str]] = [RECEIVED, PREPARING, READY]
    COMPLETED: Final[list[str]] = [SERVED, CANCELLED]


class SessionStatus:
    """Table session status constants."""

    OPEN: Final[str] = "OPEN"
    CLOSED: Final[str] = "CLOSED"


class SelectionType:
    """Option group selection cardinality."""

    SINGLE: Final[str] = "single"
    MULTIPLE: Final[str] = "multiple"

    ALL: Final[list[str]] = [SINGLE, MULTIPLE]


# =============================================================================
# Outbox events
# =============================================================================


class OrderEvents:
    """Event types written to the outbox for order aggregates."""

    AGGREGATE: Final[str] = "order"

    ORDER_CREATED: Final[str] = "ORDER_CREATED"
    ORDER_STATUS_CHANGED: Final[str] = "ORDER_STATUS_CHANGED"


# =============================================================================
# Limits
# =============================================================================


class Limits:
    """Validation and pagination limits."""

    DEFAULT_PAGE_SIZE: Final[int] = 50
    MAX_PAGE_SIZE: Final[int] = 100

    MAX_LINE_QUANTITY: Final[int] = 99
    MAX_CART_LINES: Final[int] = 50
    MAX_COMMENT_LENGTH: Final[int] = 500
    MAX_NAME_LENGTH: Final[int] = 100

    CHANGE_FEED_BATCH_SIZE: Final[int] = 100
