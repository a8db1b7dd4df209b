"""
Dish option management endpoints.
"""

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from tableside_api.routers._common import (
    Pagination,
    get_pagination,
    get_user_email,
    get_user_id,
    require_management,
)
from tableside_api.services.domain import DishOptionService
from tableside_shared.infrastructure.db import get_db
from tableside_shared.utils.admin_schemas import (
    DeleteResponse,
    DishOptionCreate,
    DishOptionOutput,
    DishOptionUpdate,
)


router = APIRouter(tags=["admin-dish-options"])


@router.get("/dish-options", response_model=list[DishOptionOutput])
def list_dish_options(
    option_group_id: int | None = Query(default=None, alias="optionGroupId"),
    pagination: Pagination = Depends(get_pagination),
    db: Session = Depends(get_db),
    user: dict = Depends(require_management),
) -> list[DishOptionOutput]:
    return DishOptionService(db).list_options(
        option_group_id=option_group_id,
        limit=pagination.limit,
        offset=pagination.offset,
    )


@router.get("/dish-options/{option_id}", response_model=DishOptionOutput)
def get_dish_option(
    option_id: int,
    db: Session = Depends(get_db),
    user: dict = Depends(require_management),
) -> DishOptionOutput:
    return DishOptionService(db).get_by_id(option_id)


@router.post("/dish-options", response_model=DishOptionOutput, status_code=status.HTTP_201_CREATED)
def create_dish_option(
    body: DishOptionCreate,
    db: Session = Depends(get_db),
    user: dict = Depends(require_management),
) -> DishOptionOutput:
    return DishOptionService(db).create(body.model_dump(), get_user_id(user), get_user_email(user))


@router.put("/dish-options/{option_id}", response_model=DishOptionOutput)
def update_dish_option(
    option_id: int,
    body: DishOptionUpdate,
    db: Session = Depends(get_db),
    user: dict = Depends(require_management),
) -> DishOptionOutput:
    return DishOptionService(db).update(
        option_id,
        body.model_dump(exclude_unset=True),
        get_user_id(user),
        get_user_email(user),
    )


@router.delete("/dish-options/{option_id}", response_model=DeleteResponse)
def delete_dish_option(
    option_id: int,
    db: Session = Depends(get_db),
    user: dict = Depends(require_management),
) -> DeleteResponse:
    DishOptionService(db).delete(option_id, get_user_id(user), get_user_email(user))
    return DeleteResponse(message="Dish option deleted", id=option_id)
