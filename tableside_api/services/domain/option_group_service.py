"""
Option Group and Dish Option Services.

Usage:
    from tableside_api.services.domain import OptionGroupService

    service = OptionGroupService(db)
    groups = service.list_groups(dish_id=12, limit=50, offset=0)
    created = service.create(body.model_dump(), user_id, user_email)
"""

from __future__ import annotations

from typing import Any

from sqlalchemy import select
from sqlalchemy.orm import Session

from tableside_api.models import Category, Dish, Option, OptionGroup
from tableside_api.services.base_service import BaseCRUDService
from tableside_api.services.domain.catalog_service import reject_nulls
from tableside_shared.config.constants import Limits
from tableside_shared.config.logging import get_logger
from tableside_shared.utils.admin_schemas import DishOptionOutput, OptionGroupOutput
from tableside_shared.utils.exceptions import ValidationError

logger = get_logger(__name__)


class OptionGroupService(BaseCRUDService[OptionGroup, OptionGroupOutput]):
    """
    Option group management service.

    Business rules:
    - A group is owned by a category; callers may name it through a dish
    - The dish and category must exist and be active
    - Deleting a group deletes its options
    """

    def __init__(self, db: Session):
        super().__init__(
            db=db,
            model=OptionGroup,
            output_schema=OptionGroupOutput,
            entity_name="Option group",
        )

    # =========================================================================
    # Query Methods
    # =========================================================================

    def list_groups(
        self,
        *,
        dish_id: int | None = None,
        category_id: int | None = None,
        limit: int = Limits.DEFAULT_PAGE_SIZE,
        offset: int = 0,
    ) -> list[OptionGroupOutput]:
        """List groups, optionally scoped to a dish's category or a category."""
        filters = []
        if dish_id is not None:
            dish = self._active_dish(dish_id)
            if dish is None or dish.category_id is None:
                return []
            filters.append(OptionGroup.category_id == dish.category_id)
        if category_id is not None:
            filters.append(OptionGroup.category_id == category_id)

        return self.list_all(
            filters=filters,
            order_by=[OptionGroup.category_id, OptionGroup.display_order],
            limit=limit,
            offset=offset,
        )

    # =========================================================================
    # Validation Hooks
    # =========================================================================

    def _validate_create(self, data: dict[str, Any]) -> dict[str, Any]:
        dish_id = data.pop("dish_id", None)
        category_id = data.get("category_id")

        if dish_id is None and category_id is None:
            raise ValidationError(
                "Missing required fields: dishId or categoryId",
                code="MISSING_REQUIRED_FIELDS",
            )

        data["category_id"] = self._resolve_scope(dish_id, category_id)
        data["name"] = self._clean_name(data["name"])
        return data

    def _validate_update(self, entity: OptionGroup, data: dict[str, Any]) -> dict[str, Any]:
        reject_nulls(
            data,
            {
                "category_id": "INVALID_CATEGORY_ID",
                "name": "INVALID_NAME",
                "selection_type": "INVALID_SELECTION_TYPE",
                "is_required": "INVALID_IS_REQUIRED",
                "display_order": "INVALID_DISPLAY_ORDER",
                "enable_note": "INVALID_ENABLE_NOTE",
            },
        )

        dish_id = data.pop("dish_id", None)
        if dish_id is not None or "category_id" in data:
            data["category_id"] = self._resolve_scope(dish_id, data.get("category_id"))
        if "name" in data:
            data["name"] = self._clean_name(data["name"])
        return data

    def _before_delete(self, entity: OptionGroup, user_id: int | None, user_email: str | None) -> None:
        removed = 0
        for opt in entity.options:
            if opt.is_active:
                opt.soft_delete(user_id, user_email)
                removed += 1
        if removed:
            logger.info("Cascading delete to options", group_id=entity.id, options=removed)

    # =========================================================================

    def _resolve_scope(self, dish_id: int | None, category_id: int | None) -> int:
        """Return the owning category id for a dish and/or category reference."""
        if dish_id is not None:
            dish = self._active_dish(dish_id)
            if dish is None:
                raise ValidationError("Dish does not exist", code="INVALID_DISH_ID", dish_id=dish_id)
            if dish.category_id is None:
                raise ValidationError(
                    "Dish has no category to attach option groups to",
                    code="INVALID_DISH_ID",
                    dish_id=dish_id,
                )
            if category_id is not None and category_id != dish.category_id:
                raise ValidationError(
                    "categoryId does not match the dish's category",
                    code="INVALID_CATEGORY_ID",
                    dish_id=dish_id,
                    category_id=category_id,
                )
            return dish.category_id

        exists = self._db.scalar(
            select(Category.id).where(
                Category.id == category_id,
                Category.is_active.is_(True),
            )
        )
        if exists is None:
            raise ValidationError("Category does not exist", code="INVALID_CATEGORY_ID", category_id=category_id)
        return category_id

    def _active_dish(self, dish_id: int) -> Dish | None:
        return self._db.scalar(
            select(Dish).where(Dish.id == dish_id, Dish.is_active.is_(True))
        )

    @staticmethod
    def _clean_name(name: str) -> str:
        name = name.strip()
        if not name:
            raise ValidationError("name cannot be blank", code="INVALID_NAME")
        return name


class DishOptionService(BaseCRUDService[Option, DishOptionOutput]):
    """
    Dish option management service.

    Business rules:
    - An option belongs to an active option group
    - extra price is a non-negative integer amount of minor units
    """

    def __init__(self, db: Session):
        super().__init__(
            db=db,
            model=Option,
            output_schema=DishOptionOutput,
            entity_name="Dish option",
        )

    def list_options(
        self,
        *,
        option_group_id: int | None = None,
        limit: int = Limits.DEFAULT_PAGE_SIZE,
        offset: int = 0,
    ) -> list[DishOptionOutput]:
        filters = []
        if option_group_id is not None:
            filters.append(Option.option_group_id == option_group_id)
        return self.list_all(
            filters=filters,
            order_by=[Option.option_group_id, Option.display_order],
            limit=limit,
            offset=offset,
        )

    def _validate_create(self, data: dict[str, Any]) -> dict[str, Any]:
        self._ensure_group(data["option_group_id"])
        data["name"] = OptionGroupService._clean_name(data["name"])
        return data

    def _validate_update(self, entity: Option, data: dict[str, Any]) -> dict[str, Any]:
        reject_nulls(
            data,
            {
                "option_group_id": "INVALID_OPTION_GROUP_ID",
                "name": "INVALID_NAME",
                "extra_price_cents": "INVALID_EXTRA_PRICE",
                "is_available": "INVALID_IS_AVAILABLE",
                "display_order": "INVALID_DISPLAY_ORDER",
            },
        )
        if "option_group_id" in data:
            self._ensure_group(data["option_group_id"])
        if "name" in data:
            data["name"] = OptionGroupService._clean_name(data["name"])
        return data

    def _ensure_group(self, group_id: int) -> None:
        exists = self._db.scalar(
            select(OptionGroup.id).where(
                OptionGroup.id == group_id,
                OptionGroup.is_active.is_(True),
            )
        )
        if exists is None:
            raise ValidationError(
                "Option group does not exist",
                code="INVALID_OPTION_GROUP_ID",
                option_group_id=group_id,
            )
