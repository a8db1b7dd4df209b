"""
Customization Resolver.

Finds the option groups that apply to a dish and validates a diner's
selections against them. Groups are owned by a category and apply to
every dish in it.

Usage:
    from tableside_api.services.domain import CustomizationResolver

    resolver = CustomizationResolver(db)
    groups = resolver.resolve(dish_id)
    snapshot = resolver.validate_selections(groups, body.selections)
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field

from sqlalchemy import select
from sqlalchemy.orm import Session

from tableside_api.models import Category, Dish, Option, OptionGroup
from tableside_api.services.selection import select_option, toggle_option
from tableside_shared.config.logging import get_logger
from tableside_shared.utils.exceptions import NotFoundError, ValidationError
from tableside_shared.utils.schemas import (
    DishOptionsOutput,
    OptionGroupWithOptions,
    OptionOutput,
    SelectedOption,
    SelectionInput,
)

logger = get_logger(__name__)


# =============================================================================
# Errors
# =============================================================================


class MissingRequiredSelectionError(ValidationError):
    """A required option group has no selection."""

    default_code = "MISSING_REQUIRED_SELECTION"

    def __init__(self, group_id: int, group_name: str):
        self.group_id = group_id
        self.group_name = group_name
        super().__init__(
            f"Please select an option for {group_name}",
            group_id=group_id,
            group_name=group_name,
        )


class InvalidSelectionError(ValidationError):
    """Selection names a group or option that does not apply to the dish."""

    default_code = "INVALID_SELECTION"


# =============================================================================
# Resolved view
# =============================================================================


@dataclass
class ResolvedGroup:
    """An option group with its available options, both in display order."""

    group: OptionGroup
    options: list[Option] = field(default_factory=list)

    @property
    def id(self) -> int:
        return self.group.id

    @property
    def name(self) -> str:
        return self.group.name

    @property
    def selection_type(self) -> str:
        return self.group.selection_type

    @property
    def is_required(self) -> bool:
        return self.group.is_required

    @property
    def enable_note(self) -> bool:
        return self.group.enable_note

    def option(self, option_id: int) -> Option | None:
        for opt in self.options:
            if opt.id == option_id:
                return opt
        return None

    def to_output(self) -> OptionGroupWithOptions:
        return OptionGroupWithOptions(
            id=self.group.id,
            name=self.group.name,
            selection_type=self.group.selection_type,
            is_required=self.group.is_required,
            display_order=self.group.display_order,
            enable_note=self.group.enable_note,
            options=[OptionOutput.model_validate(opt) for opt in self.options],
        )


class CustomizationResolver:
    """
    Resolves the customization choices of a dish.

    Business rules:
    - A dish's groups are the active groups of its category
    - Only available options are offered
    - Groups and options are ordered by display_order, then id
    - A dish without a category has no groups
    """

    def __init__(self, db: Session):
        self._db = db

    # =========================================================================
    # Query Methods
    # =========================================================================

    def resolve(self, dish_key: int | str) -> list[ResolvedGroup]:
        """
        Resolve by dish id, or by category label for legacy callers.

        Raises:
            ValidationError: MISSING_DISH_ID when the key is blank.
            NotFoundError: If a numeric key names no active dish.
        """
        if isinstance(dish_key, int):
            return self.resolve_for_dish(self._get_dish(dish_key))

        key = (dish_key or "").strip()
        if not key:
            raise ValidationError("Dish id is required", code="MISSING_DISH_ID")

        if key.isdigit():
            return self.resolve_for_dish(self._get_dish(int(key)))

        category = self.find_category_by_label(key)
        if category is None:
            logger.debug("No category matches label", label=key)
            return []
        return self.resolve_for_category(category.id)

    def resolve_for_dish(self, dish: Dish) -> list[ResolvedGroup]:
        if dish.category_id is None:
            return []
        return self.resolve_for_category(dish.category_id)

    def resolve_for_category(self, category_id: int) -> list[ResolvedGroup]:
        groups = self._db.scalars(
            select(OptionGroup)
            .where(
                OptionGroup.category_id == category_id,
                OptionGroup.is_active.is_(True),
            )
            .order_by(OptionGroup.display_order, OptionGroup.id)
        ).all()
        if not groups:
            return []

        resolved = {g.id: ResolvedGroup(group=g) for g in groups}
        options = self._db.scalars(
            select(Option)
            .where(
                Option.option_group_id.in_(resolved.keys()),
                Option.is_active.is_(True),
                Option.is_available.is_(True),
            )
            .order_by(Option.display_order, Option.id)
        ).all()
        for opt in options:
            resolved[opt.option_group_id].options.append(opt)

        return list(resolved.values())

    def dish_options(self, dish_key: int | str) -> DishOptionsOutput:
        """
        Public view of a dish's groups.

        Raises:
            NotFoundError: NO_OPTION_GROUPS when the dish has none.
        """
        groups = self.resolve(dish_key)
        if not groups:
            raise NotFoundError("Option groups", dish_key, code="NO_OPTION_GROUPS")
        return DishOptionsOutput(option_groups=[g.to_output() for g in groups])

    def find_category_by_label(self, label: str) -> Category | None:
        """
        Match an active category by its composite label, then by bare name.
        Comparison is case-insensitive.
        """
        wanted = label.strip().casefold()
        if not wanted:
            return None

        categories = self._db.scalars(
            select(Category)
            .where(Category.is_active.is_(True))
            .order_by(Category.display_order, Category.id)
        ).all()

        for category in categories:
            if category.label.casefold() == wanted:
                return category
        for category in categories:
            if category.name.casefold() == wanted:
                return category
        return None

    def category_ids_with_groups(self) -> set[int]:
        """Ids of categories owning at least one active option group."""
        return set(
            self._db.scalars(
                select(OptionGroup.category_id)
                .where(OptionGroup.is_active.is_(True))
                .distinct()
            ).all()
        )

    # =========================================================================
    # Validation
    # =========================================================================

    def validate_selections(
        self,
        groups: Sequence[ResolvedGroup],
        selections: Sequence[SelectionInput],
    ) -> list[SelectedOption]:
        """
        Apply selections in order and return the snapshot to store on a line.

        A second pick in a single group replaces the first. The result is
        ordered by group display order, then selection order. A required
        group with no available option cannot be satisfied and is skipped.

        Raises:
            InvalidSelectionError: Unknown group, or option not offered by it.
            MissingRequiredSelectionError: First required group left empty.
        """
        by_id = {g.id: g for g in groups}
        picked: list[SelectedOption] = []

        for sel in selections:
            group, choice = self._choice(by_id, sel)
            picked = select_option(picked, group.selection_type, choice)

        return self._finalize(groups, picked)

    def toggle_selection(
        self,
        groups: Sequence[ResolvedGroup],
        current: Sequence[SelectedOption],
        sel: SelectionInput,
    ) -> list[SelectedOption]:
        """
        Flip one option on an existing line's selections. Current picks whose
        option is no longer offered are dropped before the toggle.

        Raises:
            InvalidSelectionError / MissingRequiredSelectionError.
        """
        by_id = {g.id: g for g in groups}
        group, choice = self._choice(by_id, sel)
        kept = [
            s for s in current
            if s.group_id in by_id and by_id[s.group_id].option(s.option_id) is not None
        ]
        return self._finalize(groups, toggle_option(kept, group.selection_type, choice))

    @staticmethod
    def _choice(
        by_id: dict[int, ResolvedGroup],
        sel: SelectionInput,
    ) -> tuple[ResolvedGroup, SelectedOption]:
        group = by_id.get(sel.group_id)
        if group is None:
            raise InvalidSelectionError(
                "Option group does not apply to this dish",
                group_id=sel.group_id,
            )
        opt = group.option(sel.option_id)
        if opt is None:
            raise InvalidSelectionError(
                f"Option is not available in {group.name}",
                group_id=sel.group_id,
                option_id=sel.option_id,
            )
        return group, SelectedOption(
            group_id=group.id,
            group_name=group.name,
            option_id=opt.id,
            option_name=opt.name,
            extra_price=opt.extra_price_cents,
        )

    @staticmethod
    def _finalize(
        groups: Sequence[ResolvedGroup],
        picked: list[SelectedOption],
    ) -> list[SelectedOption]:
        chosen_groups = {s.group_id for s in picked}
        for group in groups:
            if group.is_required and group.options and group.id not in chosen_groups:
                raise MissingRequiredSelectionError(group.id, group.name)

        position = {g.id: index for index, g in enumerate(groups)}
        return sorted(picked, key=lambda s: position[s.group_id])

    # =========================================================================

    def _get_dish(self, dish_id: int) -> Dish:
        dish = self._db.scalar(
            select(Dish).where(Dish.id == dish_id, Dish.is_active.is_(True))
        )
        if dish is None:
            raise NotFoundError("Dish", dish_id)
        return dish
