"""
Cart Service: persistence of the diner's cart.

Each mutation loads the session's snapshot into a ``Cart``, applies the
change and writes the whole snapshot back with a new version.

Usage:
    service = CartService(db)
    cart = service.add_item(session, body)
"""

from __future__ import annotations

import json
from collections.abc import Callable

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session
from sqlalchemy.orm.exc import StaleDataError

from tableside_api.models import Cart as CartRow
from tableside_api.models import Dish, TableSession
from tableside_api.services import pricing
from tableside_api.services.cart import Cart
from tableside_api.services.domain.customization_service import CustomizationResolver
from tableside_api.services.selection import customization_text
from tableside_shared.config.logging import diner_logger as logger
from tableside_shared.config.settings import settings
from tableside_shared.infrastructure.db import safe_commit
from tableside_shared.utils.exceptions import (
    ConflictError,
    DatabaseError,
    NotFoundError,
    ValidationError,
)
from tableside_shared.utils.schemas import (
    AddCartItemRequest,
    CartLineOutput,
    CartOutput,
    SelectionInput,
    UpdateCartLineRequest,
)


class DishNotAvailableError(ValidationError):
    default_code = "DISH_NOT_AVAILABLE"

    def __init__(self, dish_name: str, dish_id: int):
        super().__init__(f"{dish_name} is not available right now", dish_id=dish_id)


class CartService:
    """
    Business rules:
    - Selections are validated against the dish's option groups
    - Unavailable dishes cannot be added
    - Concurrent writes to the same cart fail with CART_CONFLICT, including
      two requests racing to create it
    """

    def __init__(self, db: Session):
        self._db = db
        self._resolver = CustomizationResolver(db)

    # =========================================================================
    # Query Methods
    # =========================================================================

    def get_cart(self, session: TableSession) -> CartOutput:
        row = self._db.get(CartRow, session.id)
        return self.to_output(self._load(row), row.version if row else 0)

    def load_cart(self, session: TableSession) -> tuple[CartRow | None, Cart]:
        row = self._db.get(CartRow, session.id)
        return row, self._load(row)

    # =========================================================================
    # Command Methods
    # =========================================================================

    def add_item(self, session: TableSession, body: AddCartItemRequest) -> CartOutput:
        """
        Raises:
            NotFoundError: Unknown dish.
            DishNotAvailableError: Dish is switched off.
            InvalidSelectionError / MissingRequiredSelectionError.
        """
        dish = self._db.scalar(
            select(Dish).where(Dish.id == body.dish_id, Dish.is_active.is_(True))
        )
        if dish is None:
            raise NotFoundError("Dish", body.dish_id)
        if not dish.is_available:
            raise DishNotAvailableError(dish.name, dish.id)

        groups = self._resolver.resolve_for_dish(dish)
        selections = self._resolver.validate_selections(groups, body.selections)

        return self._mutate(
            session,
            lambda cart: cart.add(dish.id, dish.name, dish.price_cents, selections, body.comment),
            action="add",
            dish_id=dish.id,
        )

    def update_line(self, session: TableSession, index: int, body: UpdateCartLineRequest) -> CartOutput:
        return self._mutate(
            session,
            lambda cart: cart.update_line(index, body.quantity, body.comment),
            action="update",
            index=index,
        )

    def toggle_line_option(self, session: TableSession, index: int, body: SelectionInput) -> CartOutput:
        """
        Switch one option of an existing line on or off and reprice the line.

        Raises:
            CartLineNotFoundError: Unknown line index.
            NotFoundError: The line's dish was removed from the menu.
            InvalidSelectionError / MissingRequiredSelectionError.
        """
        _, cart = self.load_cart(session)
        line = cart.line(index)

        dish = self._db.scalar(
            select(Dish).where(Dish.id == line.dish_id, Dish.is_active.is_(True))
        )
        if dish is None:
            raise NotFoundError("Dish", line.dish_id)

        groups = self._resolver.resolve_for_dish(dish)
        selections = self._resolver.toggle_selection(groups, line.selections, body)

        return self._mutate(
            session,
            lambda cart: cart.replace_selections(index, selections),
            action="toggle_option",
            index=index,
            option_id=body.option_id,
        )

    def remove_line(self, session: TableSession, index: int) -> CartOutput:
        return self._mutate(session, lambda cart: cart.remove_line(index), action="remove", index=index)

    def clear(self, session: TableSession) -> CartOutput:
        return self._mutate(session, lambda cart: cart.clear(), action="clear")

    # =========================================================================
    # Transformation
    # =========================================================================

    @staticmethod
    def to_output(cart: Cart, version: int) -> CartOutput:
        lines = [
            CartLineOutput(
                **line.model_dump(),
                index=index,
                subtotal=pricing.line_subtotal(line.unit_price, line.quantity),
                customization_text=customization_text(line.selections),
            )
            for index, line in enumerate(cart.lines)
        ]
        return CartOutput(
            lines=lines,
            total=cart.total,
            formatted_total=pricing.format_money(cart.total),
            item_count=cart.item_count,
            version=version,
            currency=settings.currency_code,
        )

    # =========================================================================

    @staticmethod
    def _load(row: CartRow | None) -> Cart:
        if row is None:
            return Cart()
        return Cart.from_snapshot(json.loads(row.lines))

    def _mutate(self, session: TableSession, change: Callable[[Cart], object], **log_context) -> CartOutput:
        row, cart = self.load_cart(session)
        change(cart)

        if row is None:
            row = CartRow(session_id=session.id)
            self._db.add(row)
        row.lines = json.dumps(cart.to_snapshot())

        try:
            safe_commit(self._db)
        except (StaleDataError, IntegrityError) as e:
            logger.warning("Concurrent cart write", session_id=session.id, error=str(e))
            raise ConflictError("Cart was changed by another request, please retry", code="CART_CONFLICT")
        except SQLAlchemyError as e:
            logger.error("Failed to save cart", session_id=session.id, error=str(e), **log_context)
            raise DatabaseError("save cart", e)

        self._db.refresh(row)
        logger.info("Cart updated", session_id=session.id, version=row.version, **log_context)
        return self.to_output(cart, row.version)
