"""
Tests for price composition.
"""

import pytest
from hypothesis import given, settings, strategies as st

from tableside_api.services import pricing
from tableside_shared.utils.schemas import CartLine


amounts = st.integers(min_value=0, max_value=10_000_000)


def _line(unit_price, quantity):
    return CartLine(
        dish_id=1,
        dish_name="Dish",
        base_price=unit_price,
        quantity=quantity,
        unit_price=unit_price,
    )


class TestFinalUnitPrice:

    def test_base_plus_extras(self):
        assert pricing.final_unit_price(5000, [500, 300]) == 5800

    def test_no_extras_is_base_price(self):
        assert pricing.final_unit_price(5000, []) == 5000

    def test_negative_base_rejected(self):
        with pytest.raises(ValueError):
            pricing.final_unit_price(-1, [])

    def test_negative_extra_rejected(self):
        with pytest.raises(ValueError):
            pricing.final_unit_price(5000, [100, -100])

    @given(base=amounts, extras=st.lists(amounts, max_size=10))
    @settings(max_examples=100)
    def test_equals_base_plus_sum_of_extras(self, base, extras):
        """Property: the unit price is the base plus every selected extra."""
        assert pricing.final_unit_price(base, extras) == base + sum(extras)

    @given(base=amounts, extras=st.lists(amounts, max_size=10))
    @settings(max_examples=50)
    def test_never_below_base(self, base, extras):
        assert pricing.final_unit_price(base, extras) >= base


class TestOrderTotal:

    def test_two_lines(self):
        lines = [_line(5800, 2), _line(1200, 1)]
        assert pricing.order_total(lines) == 12800

    def test_empty_cart_is_zero(self):
        assert pricing.order_total([]) == 0

    def test_line_subtotal_rejects_negative_quantity(self):
        with pytest.raises(ValueError):
            pricing.line_subtotal(100, -1)

    @given(st.lists(st.tuples(amounts, st.integers(min_value=1, max_value=99)), max_size=20))
    @settings(max_examples=50)
    def test_total_is_sum_of_subtotals(self, rows):
        lines = [_line(price, qty) for price, qty in rows]
        assert pricing.order_total(lines) == sum(price * qty for price, qty in rows)


class TestFormatMoney:

    def test_currency_without_minor_unit(self, monkeypatch):
        monkeypatch.setattr(pricing.settings, "currency_code", "XAF")
        monkeypatch.setattr(pricing.settings, "currency_minor_units", 0)
        assert pricing.format_money(5800) == "5800 XAF"

    def test_currency_with_cents(self, monkeypatch):
        monkeypatch.setattr(pricing.settings, "currency_code", "EUR")
        monkeypatch.setattr(pricing.settings, "currency_minor_units", 2)
        assert pricing.format_money(1250) == "12.50 EUR"
