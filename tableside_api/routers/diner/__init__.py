"""
Diner routers - /api/diner/*
Table scan, cart and order submission. Everything except opening a
session requires the X-Table-Token header.
"""

from fastapi import APIRouter

from .sessions import router as sessions_router
from .cart import router as cart_router
from .orders import router as orders_router


router = APIRouter(prefix="/api/diner")

router.include_router(sessions_router)
router.include_router(cart_router)
router.include_router(orders_router)

__all__ = ["router"]
