"""
Tests for the cart aggregate.
"""

import pytest
from hypothesis import given, settings, strategies as st

from tableside_api.services.cart import (
    Cart,
    CartFullError,
    CartLineNotFoundError,
    InvalidQuantityError,
)
from tableside_shared.config.constants import Limits
from tableside_shared.utils.schemas import SelectedOption


BACON = SelectedOption(group_id=3, group_name="Extras", option_id=30, option_name="Bacon", extra_price=500)
EGG = SelectedOption(group_id=3, group_name="Extras", option_id=31, option_name="Egg", extra_price=300)


class TestAdd:

    def test_plain_additions_merge(self):
        """add(dishX) twice on an empty cart yields one line with quantity 2."""
        cart = Cart()
        cart.add(1, "Burger", 5000)
        cart.add(1, "Burger", 5000)

        assert len(cart) == 1
        assert cart.lines[0].quantity == 2
        assert cart.total == 10000

    def test_customized_additions_stay_separate(self):
        cart = Cart()
        cart.add(1, "Burger", 5000, [BACON])
        cart.add(1, "Burger", 5000, [BACON])
        assert len(cart) == 2

    def test_comment_makes_its_own_line(self):
        cart = Cart()
        cart.add(1, "Burger", 5000)
        cart.add(1, "Burger", 5000, comment="No salt")
        assert len(cart) == 2
        assert cart.lines[1].comment == "No salt"

    def test_blank_comment_counts_as_plain(self):
        cart = Cart()
        cart.add(1, "Burger", 5000)
        cart.add(1, "Burger", 5000, comment="   ")
        assert len(cart) == 1

    def test_unit_price_includes_extras(self):
        cart = Cart()
        cart.add(1, "Burger", 5000, [BACON, EGG])
        line = cart.lines[0]
        assert line.base_price == 5000
        assert line.unit_price == 5800

    def test_full_cart_rejects_new_line(self):
        cart = Cart()
        for dish_id in range(Limits.MAX_CART_LINES):
            cart.add(dish_id, f"Dish {dish_id}", 100)
        with pytest.raises(CartFullError):
            cart.add(999, "One too many", 100)


class TestUpdateLine:

    def test_quantity_zero_removes_line(self):
        cart = Cart()
        cart.add(1, "Burger", 5000)
        cart.update_line(0, 0)
        assert cart.is_empty

    def test_quantity_updates_in_place(self):
        cart = Cart()
        cart.add(1, "Burger", 5000)
        cart.add(2, "Juice", 1200)
        cart.update_line(0, 3)

        assert len(cart) == 2
        assert cart.lines[0].quantity == 3
        assert cart.total == 5000 * 3 + 1200

    def test_comment_update(self):
        cart = Cart()
        cart.add(1, "Burger", 5000)
        cart.update_line(0, 1, comment=" Well done please ")
        assert cart.lines[0].comment == "Well done please"

    @pytest.mark.parametrize("quantity", [-1, Limits.MAX_LINE_QUANTITY + 1])
    def test_out_of_range_quantity(self, quantity):
        cart = Cart()
        cart.add(1, "Burger", 5000)
        with pytest.raises(InvalidQuantityError) as exc:
            cart.update_line(0, quantity)
        assert exc.value.code == "INVALID_QUANTITY"

    def test_unknown_index(self):
        cart = Cart()
        with pytest.raises(CartLineNotFoundError) as exc:
            cart.update_line(0, 1)
        assert exc.value.status_code == 404
        assert exc.value.code == "CART_LINE_NOT_FOUND"


class TestRemoveAndClear:

    def test_remove_line(self):
        cart = Cart()
        cart.add(1, "Burger", 5000)
        cart.add(2, "Juice", 1200)
        cart.remove_line(0)
        assert [line.dish_id for line in cart.lines] == [2]

    def test_remove_negative_index(self):
        cart = Cart()
        cart.add(1, "Burger", 5000)
        with pytest.raises(CartLineNotFoundError):
            cart.remove_line(-1)

    def test_clear(self):
        cart = Cart()
        cart.add(1, "Burger", 5000)
        cart.clear()
        assert cart.is_empty
        assert cart.total == 0


class TestReplaceSelections:

    def test_reprices_and_keeps_quantity(self):
        cart = Cart()
        cart.add(1, "Burger", 5000, [BACON], comment="Cut in half")
        cart.update_line(0, 2)

        cart.replace_selections(0, [BACON, EGG])

        line = cart.lines[0]
        assert line.unit_price == 5800
        assert line.quantity == 2
        assert line.comment == "Cut in half"
        assert cart.total == 11600

    def test_unknown_index(self):
        with pytest.raises(CartLineNotFoundError):
            Cart().replace_selections(0, [EGG])


class TestSnapshot:

    def test_snapshot_restores_lines(self):
        cart = Cart()
        cart.add(1, "Burger", 5000, [BACON], comment="Extra crispy")
        restored = Cart.from_snapshot(cart.to_snapshot())

        assert restored.lines == cart.lines
        assert restored.total == 5500


class TestCartProperties:

    @given(st.lists(st.integers(min_value=1, max_value=5), min_size=1, max_size=40))
    @settings(max_examples=50)
    def test_plain_adds_one_line_per_dish(self, dish_ids):
        """Property: plain additions never duplicate a dish's line."""
        cart = Cart()
        for dish_id in dish_ids:
            cart.add(dish_id, f"Dish {dish_id}", 1000)

        assert len(cart) == len(set(dish_ids))
        assert cart.item_count == len(dish_ids)
        assert cart.total == 1000 * len(dish_ids)

    @given(
        st.lists(
            st.tuples(st.integers(min_value=0, max_value=50_000), st.lists(st.integers(0, 2_000), max_size=3)),
            min_size=1,
            max_size=20,
        )
    )
    @settings(max_examples=50)
    def test_total_matches_lines(self, items):
        """Property: the total is always recomputed from the lines."""
        cart = Cart()
        for index, (base, extras) in enumerate(items):
            selections = [
                SelectedOption(group_id=1, group_name="G", option_id=i, option_name=f"O{i}", extra_price=p)
                for i, p in enumerate(extras)
            ]
            cart.add(index, f"Dish {index}", base, selections, comment=f"line {index}")

        assert cart.total == sum(base + sum(extras) for base, extras in items)
