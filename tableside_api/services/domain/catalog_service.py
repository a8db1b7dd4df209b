"""
Catalog Services: categories, dishes and the public menu.

Usage:
    from tableside_api.services.domain import CategoryService, DishService, MenuService

    service = CategoryService(db)
    categories = service.list_all(order_by=[Category.display_order])
    created = service.create(data, user_id, user_email)
"""

from __future__ import annotations

from typing import Any

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from tableside_api.models import Category, Dish, OptionGroup
from tableside_api.services.base_service import BaseCRUDService
from tableside_api.services.domain.customization_service import CustomizationResolver
from tableside_shared.config.logging import get_logger
from tableside_shared.utils.admin_schemas import CategoryOutput, DishOutput
from tableside_shared.utils.exceptions import ConflictError, NotFoundError, ValidationError
from tableside_shared.utils.schemas import MenuCategoryOutput, MenuDishOutput

logger = get_logger(__name__)


def reject_nulls(data: dict[str, Any], codes: dict[str, str]) -> None:
    """Raise when a partial update sets a non-nullable field to null."""
    for field_name, code in codes.items():
        if field_name in data and data[field_name] is None:
            raise ValidationError(f"{field_name} cannot be null", code=code)


class CategoryService(BaseCRUDService[Category, CategoryOutput]):
    """
    Category management service.

    Business rules:
    - The label ("{emoji} {name}") is unique among active categories
    - New categories go last unless a display order is given
    - A category with active dishes cannot be deleted
    - Deleting a category deletes its option groups and their options
    """

    def __init__(self, db: Session):
        super().__init__(
            db=db,
            model=Category,
            output_schema=CategoryOutput,
            entity_name="Category",
        )

    # =========================================================================
    # Validation Hooks
    # =========================================================================

    def _validate_create(self, data: dict[str, Any]) -> dict[str, Any]:
        data["name"] = data["name"].strip()
        data["emoji"] = (data.get("emoji") or "").strip() or None
        self._ensure_unique(data["name"], data["emoji"])

        if data.get("display_order") is None:
            current = self._db.scalar(
                select(func.max(Category.display_order)).where(Category.is_active.is_(True))
            )
            data["display_order"] = (current or 0) + 1
        return data

    def _validate_update(self, entity: Category, data: dict[str, Any]) -> dict[str, Any]:
        reject_nulls(data, {"name": "INVALID_NAME", "display_order": "INVALID_DISPLAY_ORDER"})

        if "name" in data:
            data["name"] = data["name"].strip()
        if "emoji" in data:
            data["emoji"] = (data["emoji"] or "").strip() or None

        if "name" in data or "emoji" in data:
            self._ensure_unique(
                data.get("name", entity.name),
                data.get("emoji", entity.emoji),
                exclude_id=entity.id,
            )
        return data

    def _before_delete(self, entity: Category, user_id: int | None, user_email: str | None) -> None:
        dish_count = self._db.scalar(
            select(func.count(Dish.id)).where(
                Dish.category_id == entity.id,
                Dish.is_active.is_(True),
            )
        )
        if dish_count:
            raise ConflictError(
                f"Category still has {dish_count} active dish(es)",
                code="CATEGORY_IN_USE",
                category_id=entity.id,
            )

        groups = self._db.scalars(
            select(OptionGroup).where(
                OptionGroup.category_id == entity.id,
                OptionGroup.is_active.is_(True),
            )
        ).all()
        for group in groups:
            for opt in group.options:
                if opt.is_active:
                    opt.soft_delete(user_id, user_email)
            group.soft_delete(user_id, user_email)

    def _ensure_unique(self, name: str, emoji: str | None, exclude_id: int | None = None) -> None:
        label = f"{emoji} {name}" if emoji else name
        for other in self._db.scalars(
            select(Category).where(Category.is_active.is_(True))
        ).all():
            if other.id != exclude_id and other.label.casefold() == label.casefold():
                raise ConflictError(
                    f"Category '{label}' already exists",
                    code="DUPLICATE_CATEGORY",
                    existing_id=other.id,
                )


class DishService(BaseCRUDService[Dish, DishOutput]):
    """
    Dish management service.

    Business rules:
    - category_id, when given, must name an active category
    - Price is a non-negative integer amount of minor units
    """

    def __init__(self, db: Session):
        super().__init__(
            db=db,
            model=Dish,
            output_schema=DishOutput,
            entity_name="Dish",
        )

    def _validate_create(self, data: dict[str, Any]) -> dict[str, Any]:
        data["name"] = data["name"].strip()
        if data.get("category_id") is not None:
            self._ensure_category(data["category_id"])
        return data

    def _validate_update(self, entity: Dish, data: dict[str, Any]) -> dict[str, Any]:
        reject_nulls(
            data,
            {
                "name": "INVALID_NAME",
                "price_cents": "INVALID_PRICE",
                "is_available": "INVALID_IS_AVAILABLE",
            },
        )
        if "name" in data:
            data["name"] = data["name"].strip()
        if data.get("category_id") is not None:
            self._ensure_category(data["category_id"])
        return data

    def _ensure_category(self, category_id: int) -> None:
        exists = self._db.scalar(
            select(Category.id).where(
                Category.id == category_id,
                Category.is_active.is_(True),
            )
        )
        if exists is None:
            raise ValidationError("Category does not exist", code="INVALID_CATEGORY_ID", category_id=category_id)


class MenuService:
    """
    Read-only menu for diners.

    Business rules:
    - Active categories in display order, each with its available dishes
    - hasCustomization is set when the dish's category owns option groups
    """

    def __init__(self, db: Session):
        self._db = db
        self._resolver = CustomizationResolver(db)

    def get_menu(self) -> list[MenuCategoryOutput]:
        categories = self._db.scalars(
            select(Category)
            .where(Category.is_active.is_(True))
            .order_by(Category.display_order, Category.id)
        ).all()
        dishes = self._db.scalars(
            select(Dish)
            .where(
                Dish.is_active.is_(True),
                Dish.is_available.is_(True),
                Dish.category_id.is_not(None),
            )
            .order_by(Dish.name, Dish.id)
        ).all()
        customizable = self._resolver.category_ids_with_groups()

        by_category: dict[int, list[MenuDishOutput]] = {}
        for dish in dishes:
            by_category.setdefault(dish.category_id, []).append(
                self._dish_output(dish, customizable)
            )

        return [
            MenuCategoryOutput(
                id=c.id,
                name=c.name,
                emoji=c.emoji,
                label=c.label,
                display_order=c.display_order,
                dishes=by_category.get(c.id, []),
            )
            for c in categories
        ]

    def get_dish(self, dish_id: int) -> MenuDishOutput:
        dish = self._db.scalar(
            select(Dish).where(Dish.id == dish_id, Dish.is_active.is_(True))
        )
        if dish is None:
            raise NotFoundError("Dish", dish_id)
        return self._dish_output(dish, self._resolver.category_ids_with_groups())

    @staticmethod
    def _dish_output(dish: Dish, customizable: set[int]) -> MenuDishOutput:
        return MenuDishOutput(
            id=dish.id,
            name=dish.name,
            description=dish.description,
            price_cents=dish.price_cents,
            image=dish.image,
            is_available=dish.is_available,
            category_id=dish.category_id,
            has_customization=dish.category_id in customizable,
        )
