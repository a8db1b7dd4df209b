"""
Dish management endpoints.
"""

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from tableside_api.models import Dish
from tableside_api.routers._common import (
    Pagination,
    get_pagination,
    get_user_email,
    get_user_id,
    require_management,
)
from tableside_api.services.domain import DishService
from tableside_shared.infrastructure.db import get_db
from tableside_shared.utils.admin_schemas import DeleteResponse, DishCreate, DishOutput, DishUpdate


router = APIRouter(tags=["admin-dishes"])


@router.get("/dishes", response_model=list[DishOutput])
def list_dishes(
    category_id: int | None = Query(default=None, alias="categoryId"),
    pagination: Pagination = Depends(get_pagination),
    db: Session = Depends(get_db),
    user: dict = Depends(require_management),
) -> list[DishOutput]:
    """List dishes, optionally filtered by category."""
    filters = [Dish.category_id == category_id] if category_id is not None else []
    return DishService(db).list_all(
        filters=filters,
        order_by=[Dish.name],
        limit=pagination.limit,
        offset=pagination.offset,
    )


@router.get("/dishes/{dish_id}", response_model=DishOutput)
def get_dish(
    dish_id: int,
    db: Session = Depends(get_db),
    user: dict = Depends(require_management),
) -> DishOutput:
    return DishService(db).get_by_id(dish_id)


@router.post("/dishes", response_model=DishOutput, status_code=status.HTTP_201_CREATED)
def create_dish(
    body: DishCreate,
    db: Session = Depends(get_db),
    user: dict = Depends(require_management),
) -> DishOutput:
    return DishService(db).create(body.model_dump(), get_user_id(user), get_user_email(user))


@router.put("/dishes/{dish_id}", response_model=DishOutput)
def update_dish(
    dish_id: int,
    body: DishUpdate,
    db: Session = Depends(get_db),
    user: dict = Depends(require_management),
) -> DishOutput:
    return DishService(db).update(
        dish_id,
        body.model_dump(exclude_unset=True),
        get_user_id(user),
        get_user_email(user),
    )


@router.delete("/dishes/{dish_id}", response_model=DeleteResponse)
def delete_dish(
    dish_id: int,
    db: Session = Depends(get_db),
    user: dict = Depends(require_management),
) -> DeleteResponse:
    DishService(db).delete(dish_id, get_user_id(user), get_user_email(user))
    return DeleteResponse(message="Dish deleted", id=dish_id)
