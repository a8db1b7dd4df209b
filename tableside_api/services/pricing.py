"""
Price composition.

All amounts are integer minor units of ``settings.currency_code``. Nothing
here performs I/O or mutates its inputs.
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import Protocol

from tableside_shared.config.settings import settings


class PricedLine(Protocol):
    unit_price: int
    quantity: int


def final_unit_price(base_price: int, extra_prices: Iterable[int]) -> int:
    """
    Unit price of a customized dish: base price plus every selected extra.

        >>> final_unit_price(5000, [500, 300])
        5800
    """
    if base_price < 0:
        raise ValueError(f"base price must be non-negative, got {base_price}")

    total = base_price
    for extra in extra_prices:
        if extra < 0:
            raise ValueError(f"extra price must be non-negative, got {extra}")
        total += extra
    return total


def line_subtotal(unit_price: int, quantity: int) -> int:
    if quantity < 0:
        raise ValueError(f"quantity must be non-negative, got {quantity}")
    return unit_price * quantity


def order_total(lines: Iterable[PricedLine]) -> int:
    """Sum of unit price times quantity over every line."""
    return sum(line_subtotal(line.unit_price, line.quantity) for line in lines)


def format_money(amount: int) -> str:
    """Render minor units for display, e.g. ``5800 XAF`` or ``12.50 EUR``."""
    digits = settings.currency_minor_units
    if digits <= 0:
        return f"{amount} {settings.currency_code}"
    value = amount / (10 ** digits)
    return f"{value:.{digits}f} {settings.currency_code}"
