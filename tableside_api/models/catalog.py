"""
Catalog Models: Category, Dish.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Optional

from sqlalchemy import BigInteger, Boolean, CheckConstraint, ForeignKey, Index, Integer, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .base import AuditMixin, Base, BigIntPK

if TYPE_CHECKING:
    from .customization import OptionGroup


class Category(AuditMixin, Base):
    """
    Menu category ("🍔 Burgers").

    The (name, emoji) pair is unique among active categories; the service
    layer enforces it because soft-deleted rows must not block reuse.
    """

    __tablename__ = "category"

    id: Mapped[int] = mapped_column(BigIntPK, primary_key=True)
    name: Mapped[str] = mapped_column(Text, nullable=False)
    emoji: Mapped[Optional[str]] = mapped_column(Text)
    display_order: Mapped[int] = mapped_column(Integer, default=0, nullable=False)

    dishes: Mapped[list["Dish"]] = relationship(back_populates="category")
    option_groups: Mapped[list["OptionGroup"]] = relationship(back_populates="category")

    __table_args__ = (
        Index("ix_category_active_order", "is_active", "display_order"),
    )

    @property
    def label(self) -> str:
        """Composite display label, also the legacy key dishes used to carry."""
        if self.emoji:
            return f"{self.emoji} {self.name}"
        return self.name


class Dish(AuditMixin, Base):
    """
    A dish on the menu. Prices are integer minor units of the configured currency.
    """

    __tablename__ = "dish"

    id: Mapped[int] = mapped_column(BigIntPK, primary_key=True)
    name: Mapped[str] = mapped_column(Text, nullable=False)
    description: Mapped[Optional[str]] = mapped_column(Text)
    price_cents: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    category_id: Mapped[Optional[int]] = mapped_column(
        BigInteger, ForeignKey("category.id"), nullable=True, index=True
    )
    # Free-text "emoji name" label from before category_id existed.
    # Only read by the link-dish-categories migration.
    legacy_category: Mapped[Optional[str]] = mapped_column(Text)
    image: Mapped[Optional[str]] = mapped_column(Text)
    is_available: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)

    category: Mapped[Optional["Category"]] = relationship(back_populates="dishes")

    __table_args__ = (
        CheckConstraint("price_cents >= 0", name="chk_dish_price_non_negative"),
        Index("ix_dish_category_available", "category_id", "is_available"),
    )
