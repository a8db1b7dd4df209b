"""
Option group management endpoints.

Groups belong to a category. ``dishId`` is accepted wherever a category
is expected and resolves to that dish's category.
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
from tableside_api.services.domain import OptionGroupService
from tableside_shared.infrastructure.db import get_db
from tableside_shared.utils.admin_schemas import (
    DeleteResponse,
    OptionGroupCreate,
    OptionGroupOutput,
    OptionGroupUpdate,
)


router = APIRouter(tags=["admin-option-groups"])


@router.get("/option-groups", response_model=list[OptionGroupOutput])
def list_option_groups(
    dish_id: int | None = Query(default=None, alias="dishId"),
    category_id: int | None = Query(default=None, alias="categoryId"),
    pagination: Pagination = Depends(get_pagination),
    db: Session = Depends(get_db),
    user: dict = Depends(require_management),
) -> list[OptionGroupOutput]:
    """List option groups, optionally scoped to a dish or a category."""
    return OptionGroupService(db).list_groups(
        dish_id=dish_id,
        category_id=category_id,
        limit=pagination.limit,
        offset=pagination.offset,
    )


@router.get("/option-groups/{group_id}", response_model=OptionGroupOutput)
def get_option_group(
    group_id: int,
    db: Session = Depends(get_db),
    user: dict = Depends(require_management),
) -> OptionGroupOutput:
    return OptionGroupService(db).get_by_id(group_id)


@router.post("/option-groups", response_model=OptionGroupOutput, status_code=status.HTTP_201_CREATED)
def create_option_group(
    body: OptionGroupCreate,
    db: Session = Depends(get_db),
    user: dict = Depends(require_management),
) -> OptionGroupOutput:
    return OptionGroupService(db).create(body.model_dump(), get_user_id(user), get_user_email(user))


@router.put("/option-groups/{group_id}", response_model=OptionGroupOutput)
def update_option_group(
    group_id: int,
    body: OptionGroupUpdate,
    db: Session = Depends(get_db),
    user: dict = Depends(require_management),
) -> OptionGroupOutput:
    """Partial update: only the fields present in the body change."""
    return OptionGroupService(db).update(
        group_id,
        body.model_dump(exclude_unset=True),
        get_user_id(user),
        get_user_email(user),
    )


@router.delete("/option-groups/{group_id}", response_model=DeleteResponse)
def delete_option_group(
    group_id: int,
    db: Session = Depends(get_db),
    user: dict = Depends(require_management),
) -> DeleteResponse:
    """Soft delete a group and its options."""
    OptionGroupService(db).delete(group_id, get_user_id(user), get_user_email(user))
    return DeleteResponse(message="Option group deleted", id=group_id)
