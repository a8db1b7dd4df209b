"""
Tests for option selection rules and the customization summary.
"""

from tableside_api.services.selection import (
    NO_CUSTOMIZATION_TEXT,
    customization_text,
    select_option,
    toggle_option,
)
from tableside_shared.config.constants import SelectionType
from tableside_shared.utils.schemas import SelectedOption


def pick(group_id, option_id, group_name="Group", option_name=None, extra=0):
    return SelectedOption(
        group_id=group_id,
        group_name=group_name,
        option_id=option_id,
        option_name=option_name or f"Option {option_id}",
        extra_price=extra,
    )


class TestSingleGroups:

    def test_second_pick_replaces_first(self):
        """Selecting B after A leaves exactly one selection: B."""
        selections = select_option([], SelectionType.SINGLE, pick(1, 10))
        selections = select_option(selections, SelectionType.SINGLE, pick(1, 11))

        assert [(s.group_id, s.option_id) for s in selections] == [(1, 11)]

    def test_other_groups_untouched(self):
        selections = [pick(2, 20)]
        selections = select_option(selections, SelectionType.SINGLE, pick(1, 10))
        selections = select_option(selections, SelectionType.SINGLE, pick(1, 11))

        assert {(s.group_id, s.option_id) for s in selections} == {(2, 20), (1, 11)}

    def test_toggle_cannot_empty_single_group(self):
        selections = [pick(1, 10)]
        assert toggle_option(selections, SelectionType.SINGLE, pick(1, 10)) == selections

    def test_input_is_not_mutated(self):
        original = [pick(1, 10)]
        select_option(original, SelectionType.SINGLE, pick(1, 11))
        assert [s.option_id for s in original] == [10]


class TestMultipleGroups:

    def test_picks_accumulate(self):
        selections = select_option([], SelectionType.MULTIPLE, pick(3, 30))
        selections = select_option(selections, SelectionType.MULTIPLE, pick(3, 31))
        assert [s.option_id for s in selections] == [30, 31]

    def test_same_pick_is_not_duplicated(self):
        selections = select_option([pick(3, 30)], SelectionType.MULTIPLE, pick(3, 30))
        assert len(selections) == 1

    def test_toggle_removes_exactly_that_pair(self):
        selections = [pick(3, 30), pick(3, 31), pick(4, 30)]
        result = toggle_option(selections, SelectionType.MULTIPLE, pick(3, 30))
        assert [(s.group_id, s.option_id) for s in result] == [(3, 31), (4, 30)]

    def test_toggle_adds_missing_pair(self):
        result = toggle_option([pick(3, 30)], SelectionType.MULTIPLE, pick(3, 31))
        assert [s.option_id for s in result] == [30, 31]


class TestCustomizationText:

    def test_empty(self):
        assert customization_text([]) == NO_CUSTOMIZATION_TEXT

    def test_grouped_in_selection_order(self):
        selections = [
            pick(1, 10, "Cooking", "Medium"),
            pick(3, 30, "Extras", "Cheese"),
            pick(3, 31, "Extras", "Bacon"),
        ]
        assert customization_text(selections) == "Cooking: Medium; Extras: Cheese, Bacon"
