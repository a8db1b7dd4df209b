"""
Customization Models: OptionGroup, Option.

Option groups belong to a category and apply to every dish in it.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from sqlalchemy import BigInteger, Boolean, CheckConstraint, ForeignKey, Index, Integer, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .base import AuditMixin, Base, BigIntPK

if TYPE_CHECKING:
    from .catalog import Category


class OptionGroup(AuditMixin, Base):
    """
    A named set of related choices ("Cooking level"), with a selection
    cardinality and a required flag.
    """

    __tablename__ = "option_group"

    id: Mapped[int] = mapped_column(BigIntPK, primary_key=True)
    category_id: Mapped[int] = mapped_column(
        BigInteger, ForeignKey("category.id"), nullable=False, index=True
    )
    name: Mapped[str] = mapped_column(Text, nullable=False)
    selection_type: Mapped[str] = mapped_column(Text, nullable=False)  # single, multiple
    is_required: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    display_order: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    # Diner may attach a free-text note when ordering from this group
    enable_note: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)

    category: Mapped["Category"] = relationship(back_populates="option_groups")
    options: Mapped[list["Option"]] = relationship(back_populates="group")

    __table_args__ = (
        CheckConstraint(
            "selection_type IN ('single', 'multiple')",
            name="chk_option_group_selection_type",
        ),
        Index("ix_option_group_category_order", "category_id", "display_order"),
    )


class Option(AuditMixin, Base):
    """One selectable choice within an option group, with its price delta."""

    __tablename__ = "dish_option"

    id: Mapped[int] = mapped_column(BigIntPK, primary_key=True)
    option_group_id: Mapped[int] = mapped_column(
        BigInteger, ForeignKey("option_group.id"), nullable=False, index=True
    )
    name: Mapped[str] = mapped_column(Text, nullable=False)
    extra_price_cents: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    is_available: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)
    display_order: Mapped[int] = mapped_column(Integer, default=0, nullable=False)

    group: Mapped["OptionGroup"] = relationship(back_populates="options")

    __table_args__ = (
        CheckConstraint("extra_price_cents >= 0", name="chk_option_extra_price_non_negative"),
        Index("ix_option_group_order", "option_group_id", "display_order"),
    )
