"""
Cart aggregate.

Holds the ordered lines a diner is building before submission. Totals are
computed on every read from the lines themselves.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any

from tableside_shared.config.constants import Limits
from tableside_shared.utils.exceptions import NotFoundError, ValidationError
from tableside_shared.utils.schemas import CartLine, SelectedOption

from tableside_api.services import pricing


class InvalidQuantityError(ValidationError):
    """Quantity outside 0..MAX_LINE_QUANTITY."""

    default_code = "INVALID_QUANTITY"

    def __init__(self, quantity: int):
        super().__init__(
            f"Quantity must be between 0 and {Limits.MAX_LINE_QUANTITY}",
            quantity=quantity,
        )


class CartLineNotFoundError(NotFoundError):
    """Line index does not exist in the cart."""

    def __init__(self, index: int, size: int):
        super().__init__("Cart line", index, code="CART_LINE_NOT_FOUND", cart_size=size)


class CartFullError(ValidationError):
    default_code = "CART_FULL"

    def __init__(self):
        super().__init__(f"A cart holds at most {Limits.MAX_CART_LINES} lines")


class Cart:
    """
    Ordered collection of cart lines.

    Plain additions of the same dish merge into one line; anything with
    selections or a comment becomes its own line.
    """

    def __init__(self, lines: Sequence[CartLine] | None = None):
        self._lines: list[CartLine] = list(lines or [])

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    @property
    def lines(self) -> list[CartLine]:
        return list(self._lines)

    @property
    def total(self) -> int:
        return pricing.order_total(self._lines)

    @property
    def item_count(self) -> int:
        return sum(line.quantity for line in self._lines)

    @property
    def is_empty(self) -> bool:
        return not self._lines

    def __len__(self) -> int:
        return len(self._lines)

    def line(self, index: int) -> CartLine:
        self._check_index(index)
        return self._lines[index]

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    def add(
        self,
        dish_id: int,
        dish_name: str,
        base_price: int,
        selections: Sequence[SelectedOption] | None = None,
        comment: str | None = None,
    ) -> int:
        """
        Add one unit of a dish and return the index of the affected line.
        """
        selections = list(selections or [])
        comment = (comment or "").strip() or None

        if not selections and comment is None:
            for index, line in enumerate(self._lines):
                if line.dish_id == dish_id and line.is_plain:
                    self._set_quantity(index, line.quantity + 1)
                    return index

        if len(self._lines) >= Limits.MAX_CART_LINES:
            raise CartFullError()

        unit_price = pricing.final_unit_price(base_price, [s.extra_price for s in selections])
        self._lines.append(
            CartLine(
                dish_id=dish_id,
                dish_name=dish_name,
                base_price=base_price,
                quantity=1,
                selections=selections,
                comment=comment,
                unit_price=unit_price,
            )
        )
        return len(self._lines) - 1

    def update_line(self, index: int, quantity: int, comment: str | None = None) -> None:
        """Set a line's quantity; zero removes the line."""
        self._check_index(index)
        if quantity < 0 or quantity > Limits.MAX_LINE_QUANTITY:
            raise InvalidQuantityError(quantity)

        if quantity == 0:
            del self._lines[index]
            return

        line = self._lines[index]
        updates: dict[str, Any] = {"quantity": quantity}
        if comment is not None:
            updates["comment"] = comment.strip() or None
        self._lines[index] = line.model_copy(update=updates)

    def replace_selections(self, index: int, selections: Sequence[SelectedOption]) -> None:
        """Swap a line's selections and reprice it. Quantity and comment are kept."""
        line = self.line(index)
        selections = list(selections)
        self._lines[index] = line.model_copy(
            update={
                "selections": selections,
                "unit_price": pricing.final_unit_price(line.base_price, [s.extra_price for s in selections]),
            }
        )

    def remove_line(self, index: int) -> None:
        """Remove a line. An index outside the cart raises CartLineNotFoundError."""
        self._check_index(index)
        del self._lines[index]

    def clear(self) -> None:
        self._lines = []

    # ------------------------------------------------------------------
    # Snapshot
    # ------------------------------------------------------------------

    def to_snapshot(self) -> list[dict[str, Any]]:
        return [line.model_dump() for line in self._lines]

    @classmethod
    def from_snapshot(cls, data: Sequence[dict[str, Any]]) -> "Cart":
        return cls([CartLine.model_validate(item) for item in data])

    # ------------------------------------------------------------------

    def _check_index(self, index: int) -> None:
        if index < 0 or index >= len(self._lines):
            raise CartLineNotFoundError(index, len(self._lines))

    def _set_quantity(self, index: int, quantity: int) -> None:
        if quantity > Limits.MAX_LINE_QUANTITY:
            raise InvalidQuantityError(quantity)
        self._lines[index] = self._lines[index].model_copy(update={"quantity": quantity})
