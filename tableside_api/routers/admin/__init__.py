"""
Admin API router - combines all admin sub-routers.

- categories: Category CRUD
- dishes: Dish CRUD
- option_groups: Option group CRUD (category-scoped, dishId accepted)
- dish_options: Dish option CRUD
- orders: Order listing, status workflow and change feed

All routes are prefixed with /api/admin
"""

from fastapi import APIRouter

from .categories import router as categories_router
from .dishes import router as dishes_router
from .option_groups import router as option_groups_router
from .dish_options import router as dish_options_router
from .orders import router as orders_router


router = APIRouter(prefix="/api/admin")

# Catalog
router.include_router(categories_router)
router.include_router(dishes_router)
router.include_router(option_groups_router)
router.include_router(dish_options_router)

# Operations
router.include_router(orders_router)


__all__ = ["router"]
