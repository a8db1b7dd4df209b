"""
Shared Pydantic schemas used across the application.

JSON bodies use camelCase keys (``extraPrice``, ``selectionType``); each
field declares its alias and models accept either spelling. Amounts are
integer minor units.
"""

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, EmailStr, Field

from tableside_shared.config.constants import Limits


# =============================================================================
# Common Types
# =============================================================================

Role = Literal["ADMIN", "MANAGER", "KITCHEN", "WAITER"]
SelectionTypeLiteral = Literal["single", "multiple"]


class CamelModel(BaseModel):
    """Base for API models: aliases are camelCase, field names snake_case."""

    model_config = {"populate_by_name": True, "from_attributes": True}


# =============================================================================
# Authentication Schemas
# =============================================================================


class LoginRequest(BaseModel):
    """Login request body."""

    email: EmailStr
    password: str


class UserInfo(BaseModel):
    """Staff information returned by login and /me."""

    id: int
    email: str
    full_name: str | None = None
    role: Role


class LoginResponse(BaseModel):
    """Login response with JWT access token."""

    access_token: str
    token_type: str = "Bearer"
    expires_in: int
    user: UserInfo


# =============================================================================
# Customization snapshots
# =============================================================================


class SelectedOption(CamelModel):
    """
    Denormalized copy of one chosen option, taken when the line is built.
    Later catalog edits never change it.
    """

    group_id: int = Field(alias="groupId")
    group_name: str = Field(alias="groupName")
    option_id: int = Field(alias="optionId")
    option_name: str = Field(alias="optionName")
    extra_price: int = Field(alias="extraPrice", ge=0)


class SelectionInput(CamelModel):
    """A diner's pick: one option of one group."""

    group_id: int = Field(alias="groupId")
    option_id: int = Field(alias="optionId")


class OptionOutput(CamelModel):
    id: int
    name: str
    extra_price_cents: int = Field(alias="extraPrice")
    is_available: bool = Field(alias="isAvailable")
    display_order: int = Field(alias="displayOrder")


class OptionGroupWithOptions(CamelModel):
    id: int
    name: str
    selection_type: SelectionTypeLiteral = Field(alias="selectionType")
    is_required: bool = Field(alias="isRequired")
    display_order: int = Field(alias="displayOrder")
    enable_note: bool = Field(alias="enableNote")
    options: list[OptionOutput] = Field(default_factory=list)


class DishOptionsOutput(CamelModel):
    """Aggregated customization choices for one dish."""

    option_groups: list[OptionGroupWithOptions] = Field(alias="optionGroups")


# =============================================================================
# Menu
# =============================================================================


class MenuDishOutput(CamelModel):
    id: int
    name: str
    description: str | None = None
    price_cents: int = Field(alias="price")
    image: str | None = None
    is_available: bool = Field(alias="isAvailable")
    category_id: int | None = Field(default=None, alias="categoryId")
    has_customization: bool = Field(default=False, alias="hasCustomization")


class MenuCategoryOutput(CamelModel):
    id: int
    name: str
    emoji: str | None = None
    label: str
    display_order: int = Field(alias="displayOrder")
    dishes: list[MenuDishOutput] = Field(default_factory=list)


# =============================================================================
# Table sessions
# =============================================================================


class OpenSessionRequest(CamelModel):
    table_number: int = Field(alias="tableNumber", ge=1)


class SessionOutput(CamelModel):
    table_token: str = Field(alias="tableToken")
    session_id: int = Field(alias="sessionId")
    table_id: int = Field(alias="tableId")
    table_number: int = Field(alias="tableNumber")
    expires_at: datetime = Field(alias="expiresAt")


# =============================================================================
# Cart
# =============================================================================


class CartLine(CamelModel):
    """One dish instance awaiting submission. ``unit_price`` includes extras."""

    dish_id: int = Field(alias="dishId")
    dish_name: str = Field(alias="dishName")
    base_price: int = Field(alias="basePrice", ge=0)
    quantity: int = Field(ge=1, le=Limits.MAX_LINE_QUANTITY)
    selections: list[SelectedOption] = Field(default_factory=list)
    comment: str | None = None
    unit_price: int = Field(alias="unitPrice", ge=0)

    @property
    def is_plain(self) -> bool:
        """No selections and no comment: eligible for quantity merging."""
        return not self.selections and not self.comment


class CartLineOutput(CartLine):
    index: int
    subtotal: int
    customization_text: str = Field(alias="customizationText")


class CartOutput(CamelModel):
    lines: list[CartLineOutput]
    total: int
    formatted_total: str = Field(alias="formattedTotal")
    item_count: int = Field(alias="itemCount")
    version: int
    currency: str


class AddCartItemRequest(CamelModel):
    dish_id: int = Field(alias="dishId")
    selections: list[SelectionInput] = Field(default_factory=list)
    comment: str | None = Field(default=None, max_length=Limits.MAX_COMMENT_LENGTH)


class UpdateCartLineRequest(CamelModel):
    quantity: int
    comment: str | None = Field(default=None, max_length=Limits.MAX_COMMENT_LENGTH)


# =============================================================================
# Orders
# =============================================================================


class SubmitOrderRequest(CamelModel):
    """
    ``expected_total`` is the total the diner saw; a mismatch rejects the
    submission. ``idempotency_key`` makes retries return the same order.
    """

    expected_total: int | None = Field(default=None, alias="expectedTotal", ge=0)
    idempotency_key: str | None = Field(default=None, alias="idempotencyKey", max_length=64)


class OrderCreatedOutput(CamelModel):
    order_id: int = Field(alias="orderId")
    status: str
    total: int
    created_at: datetime = Field(alias="createdAt")


class OrderLineOutput(CamelModel):
    id: int
    dish_id: int = Field(alias="dishId")
    dish_name: str = Field(alias="dishName")
    quantity: int
    unit_price: int = Field(alias="unitPrice")
    subtotal: int
    comment: str | None = None
    customizations: list[SelectedOption] = Field(default_factory=list)
    customization_text: str = Field(alias="customizationText")


class OrderOutput(CamelModel):
    id: int
    table_id: int = Field(alias="tableId")
    table_number: int | None = Field(default=None, alias="tableNumber")
    session_id: int = Field(alias="sessionId")
    total: int
    status: str
    created_at: datetime = Field(alias="createdAt")
    status_changed_at: datetime | None = Field(default=None, alias="statusChangedAt")
    lines: list[OrderLineOutput] = Field(default_factory=list)


class UpdateOrderStatusRequest(CamelModel):
    status: str


class OrderChangeEvent(CamelModel):
    id: int
    type: str
    order_id: int = Field(alias="orderId")
    table_id: int | None = Field(default=None, alias="tableId")
    status: str | None = None
    occurred_at: datetime = Field(alias="occurredAt")


class OrderChangeFeed(CamelModel):
    events: list[OrderChangeEvent]
    cursor: int
