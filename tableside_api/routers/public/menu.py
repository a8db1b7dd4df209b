"""
Public menu endpoints (no authentication).
"""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from tableside_api.services.domain import CustomizationResolver, MenuService
from tableside_shared.infrastructure.db import get_db
from tableside_shared.utils.schemas import DishOptionsOutput, MenuCategoryOutput, MenuDishOutput


router = APIRouter(prefix="/api/public", tags=["public"])


@router.get("/menu", response_model=list[MenuCategoryOutput])
def get_menu(db: Session = Depends(get_db)) -> list[MenuCategoryOutput]:
    """Active categories in display order, each with its available dishes."""
    return MenuService(db).get_menu()


@router.get("/dishes/{dish_id}", response_model=MenuDishOutput)
def get_dish(dish_id: int, db: Session = Depends(get_db)) -> MenuDishOutput:
    return MenuService(db).get_dish(dish_id)


@router.get("/dishes/{dish_id}/options", response_model=DishOptionsOutput)
def get_dish_options(dish_id: str, db: Session = Depends(get_db)) -> DishOptionsOutput:
    """
    Option groups applicable to a dish, with their available options.

    ``dish_id`` may also be a category label for older clients.
    """
    return CustomizationResolver(db).dish_options(dish_id)
