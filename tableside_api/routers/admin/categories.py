"""
Category management endpoints.
"""

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from tableside_api.models import Category
from tableside_api.routers._common import (
    Pagination,
    get_pagination,
    get_user_email,
    get_user_id,
    require_management,
)
from tableside_api.services.domain import CategoryService
from tableside_shared.infrastructure.db import get_db
from tableside_shared.utils.admin_schemas import (
    CategoryCreate,
    CategoryOutput,
    CategoryUpdate,
    DeleteResponse,
)


router = APIRouter(tags=["admin-categories"])


@router.get("/categories", response_model=list[CategoryOutput])
def list_categories(
    pagination: Pagination = Depends(get_pagination),
    db: Session = Depends(get_db),
    user: dict = Depends(require_management),
) -> list[CategoryOutput]:
    """List active categories in display order."""
    return CategoryService(db).list_all(
        order_by=[Category.display_order],
        limit=pagination.limit,
        offset=pagination.offset,
    )


@router.get("/categories/{category_id}", response_model=CategoryOutput)
def get_category(
    category_id: int,
    db: Session = Depends(get_db),
    user: dict = Depends(require_management),
) -> CategoryOutput:
    return CategoryService(db).get_by_id(category_id)


@router.post("/categories", response_model=CategoryOutput, status_code=status.HTTP_201_CREATED)
def create_category(
    body: CategoryCreate,
    db: Session = Depends(get_db),
    user: dict = Depends(require_management),
) -> CategoryOutput:
    """Create a category. The label must not already exist."""
    return CategoryService(db).create(body.model_dump(), get_user_id(user), get_user_email(user))


@router.put("/categories/{category_id}", response_model=CategoryOutput)
def update_category(
    category_id: int,
    body: CategoryUpdate,
    db: Session = Depends(get_db),
    user: dict = Depends(require_management),
) -> CategoryOutput:
    return CategoryService(db).update(
        category_id,
        body.model_dump(exclude_unset=True),
        get_user_id(user),
        get_user_email(user),
    )


@router.delete("/categories/{category_id}", response_model=DeleteResponse)
def delete_category(
    category_id: int,
    db: Session = Depends(get_db),
    user: dict = Depends(require_management),
) -> DeleteResponse:
    """Soft delete a category together with its option groups."""
    CategoryService(db).delete(category_id, get_user_id(user), get_user_email(user))
    return DeleteResponse(message="Category deleted", id=category_id)
