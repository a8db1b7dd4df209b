"""
Public routers - menu browsing and health checks, no authentication.
"""

from .menu import router as menu_router
from .health import router as health_router

__all__ = ["menu_router", "health_router"]
