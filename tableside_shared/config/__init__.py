"""
Configuration module: Settings, logging, constants.
"""

from tableside_shared.config.settings import settings, DATABASE_URL
from tableside_shared.config.logging import get_logger, setup_logging
from tableside_shared.config.constants import (
    Roles,
    OrderStatus,
    SelectionType,
    SessionStatus,
    Limits,
    MANAGEMENT_ROLES,
)

__all__ = [
    # settings
    "settings",
    "DATABASE_URL",
    # logging
    "get_logger",
    "setup_logging",
    # constants
    "Roles",
    "OrderStatus",
    "SelectionType",
    "SessionStatus",
    "Limits",
    "MANAGEMENT_ROLES",
]
