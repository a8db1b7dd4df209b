"""
Pydantic schemas for catalog administration endpoints.

Create models declare required fields so a missing one is reported as
MISSING_REQUIRED_FIELDS; update models make every field optional and
routers forward only the keys the client actually sent.
"""

from datetime import datetime

from pydantic import Field, StrictBool

from tableside_shared.config.constants import Limits
from tableside_shared.utils.schemas import CamelModel, SelectionTypeLiteral


class DeleteResponse(CamelModel):
    message: str
    id: int


# =============================================================================
# Categories
# =============================================================================


class CategoryCreate(CamelModel):
    name: str = Field(min_length=1, max_length=Limits.MAX_NAME_LENGTH)
    emoji: str | None = Field(default=None, max_length=16)
    display_order: int | None = Field(default=None, alias="displayOrder")


class CategoryUpdate(CamelModel):
    name: str | None = Field(default=None, min_length=1, max_length=Limits.MAX_NAME_LENGTH)
    emoji: str | None = Field(default=None, max_length=16)
    display_order: int | None = Field(default=None, alias="displayOrder")


class CategoryOutput(CamelModel):
    id: int
    name: str
    emoji: str | None = None
    label: str
    display_order: int = Field(alias="displayOrder")


# =============================================================================
# Dishes
# =============================================================================


class DishCreate(CamelModel):
    name: str = Field(min_length=1, max_length=Limits.MAX_NAME_LENGTH)
    description: str | None = None
    price_cents: int = Field(alias="price", ge=0)
    category_id: int | None = Field(default=None, alias="categoryId")
    image: str | None = None
    is_available: StrictBool = Field(default=True, alias="isAvailable")


class DishUpdate(CamelModel):
    name: str | None = Field(default=None, min_length=1, max_length=Limits.MAX_NAME_LENGTH)
    description: str | None = None
    price_cents: int | None = Field(default=None, alias="price", ge=0)
    category_id: int | None = Field(default=None, alias="categoryId")
    image: str | None = None
    is_available: StrictBool | None = Field(default=None, alias="isAvailable")


class DishOutput(CamelModel):
    id: int
    name: str
    description: str | None = None
    price_cents: int = Field(alias="price")
    category_id: int | None = Field(default=None, alias="categoryId")
    legacy_category: str | None = Field(default=None, alias="legacyCategory")
    image: str | None = None
    is_available: bool = Field(alias="isAvailable")


# =============================================================================
# Option groups
# =============================================================================


class OptionGroupCreate(CamelModel):
    """
    The owning scope is a category. Callers may name it directly with
    ``categoryId`` or through any dish of it with ``dishId``.
    """

    category_id: int | None = Field(default=None, alias="categoryId")
    dish_id: int | None = Field(default=None, alias="dishId")
    name: str = Field(min_length=1, max_length=Limits.MAX_NAME_LENGTH)
    selection_type: SelectionTypeLiteral = Field(alias="selectionType")
    is_required: StrictBool = Field(default=False, alias="isRequired")
    display_order: int = Field(default=0, alias="displayOrder")
    enable_note: StrictBool = Field(default=False, alias="enableNote")


class OptionGroupUpdate(CamelModel):
    category_id: int | None = Field(default=None, alias="categoryId")
    dish_id: int | None = Field(default=None, alias="dishId")
    name: str | None = Field(default=None, min_length=1, max_length=Limits.MAX_NAME_LENGTH)
    selection_type: SelectionTypeLiteral | None = Field(default=None, alias="selectionType")
    is_required: StrictBool | None = Field(default=None, alias="isRequired")
    display_order: int | None = Field(default=None, alias="displayOrder")
    enable_note: StrictBool | None = Field(default=None, alias="enableNote")


class OptionGroupOutput(CamelModel):
    id: int
    category_id: int = Field(alias="categoryId")
    name: str
    selection_type: SelectionTypeLiteral = Field(alias="selectionType")
    is_required: bool = Field(alias="isRequired")
    display_order: int = Field(alias="displayOrder")
    enable_note: bool = Field(alias="enableNote")
    created_at: datetime | None = Field(default=None, alias="createdAt")


# =============================================================================
# Dish options
# =============================================================================


class DishOptionCreate(CamelModel):
    option_group_id: int = Field(alias="optionGroupId")
    name: str = Field(min_length=1, max_length=Limits.MAX_NAME_LENGTH)
    extra_price_cents: int = Field(default=0, alias="extraPrice", ge=0)
    is_available: StrictBool = Field(default=True, alias="isAvailable")
    display_order: int = Field(default=0, alias="displayOrder")


class DishOptionUpdate(CamelModel):
    option_group_id: int | None = Field(default=None, alias="optionGroupId")
    name: str | None = Field(default=None, min_length=1, max_length=Limits.MAX_NAME_LENGTH)
    extra_price_cents: int | None = Field(default=None, alias="extraPrice", ge=0)
    is_available: StrictBool | None = Field(default=None, alias="isAvailable")
    display_order: int | None = Field(default=None, alias="displayOrder")


class DishOptionOutput(CamelModel):
    id: int
    option_group_id: int = Field(alias="optionGroupId")
    name: str
    extra_price_cents: int = Field(alias="extraPrice")
    is_available: bool = Field(alias="isAvailable")
    display_order: int = Field(alias="displayOrder")
    created_at: datetime | None = Field(default=None, alias="createdAt")
