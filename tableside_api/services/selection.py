"""
Option selection rules.

A selection list is an ordered list of ``SelectedOption`` snapshots. The
functions here return new lists and leave their input untouched:

- single groups hold at most one selection; selecting again replaces it
- multiple groups hold any number; toggling removes exactly that pair
"""

from __future__ import annotations

from collections.abc import Sequence

from tableside_shared.config.constants import SelectionType
from tableside_shared.utils.schemas import SelectedOption


NO_CUSTOMIZATION_TEXT = "No customization"


def select_option(
    selections: Sequence[SelectedOption],
    selection_type: str,
    choice: SelectedOption,
) -> list[SelectedOption]:
    """Add ``choice``, replacing the group's current pick for single groups."""
    if selection_type == SelectionType.SINGLE:
        kept = [s for s in selections if s.group_id != choice.group_id]
        return [*kept, choice]

    if any(s.group_id == choice.group_id and s.option_id == choice.option_id for s in selections):
        return list(selections)
    return [*selections, choice]


def toggle_option(
    selections: Sequence[SelectedOption],
    selection_type: str,
    choice: SelectedOption,
) -> list[SelectedOption]:
    """
    Flip ``choice`` on or off. Single groups cannot be emptied by toggling,
    so they behave like ``select_option``.
    """
    if selection_type == SelectionType.SINGLE:
        return select_option(selections, selection_type, choice)

    remaining = [
        s for s in selections
        if not (s.group_id == choice.group_id and s.option_id == choice.option_id)
    ]
    if len(remaining) != len(selections):
        return remaining
    return [*selections, choice]


def customization_text(selections: Sequence[SelectedOption]) -> str:
    """
    Human-readable summary grouped by option group, in selection order:
    ``"Cooking: Medium; Extras: Cheese, Bacon"``.
    """
    if not selections:
        return NO_CUSTOMIZATION_TEXT

    grouped: dict[int, tuple[str, list[str]]] = {}
    for s in selections:
        grouped.setdefault(s.group_id, (s.group_name, []))[1].append(s.option_name)
    return "; ".join(f"{name}: {', '.join(options)}" for name, options in grouped.values())
