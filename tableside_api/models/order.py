"""
Order Models: Order, OrderLine.
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from sqlalchemy import BigInteger, CheckConstraint, DateTime, ForeignKey, Index, Integer, Text, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from tableside_shared.config.constants import OrderStatus

from .base import Base, BigIntPK
from .table import Table


class Order(Base):
    """
    Order header: one submitted cart for one table.

    Status changes are last-writer-wins; ``status_changed_at`` records the
    latest change.
    """

    __tablename__ = "orders"

    id: Mapped[int] = mapped_column(BigIntPK, primary_key=True)
    table_id: Mapped[int] = mapped_column(
        BigInteger, ForeignKey("restaurant_table.id"), nullable=False, index=True
    )
    session_id: Mapped[int] = mapped_column(
        BigInteger, ForeignKey("table_session.id"), nullable=False, index=True
    )
    total_cents: Mapped[int] = mapped_column(Integer, nullable=False)
    status: Mapped[str] = mapped_column(Text, default=OrderStatus.RECEIVED, nullable=False, index=True)
    idempotency_key: Mapped[Optional[str]] = mapped_column(Text)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )
    status_changed_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True))

    table: Mapped["Table"] = relationship()
    lines: Mapped[list["OrderLine"]] = relationship(
        back_populates="order", order_by="OrderLine.id"
    )

    __table_args__ = (
        CheckConstraint("total_cents >= 0", name="chk_order_total_non_negative"),
        Index("ix_orders_session_idempotency", "session_id", "idempotency_key"),
    )


class OrderLine(Base):
    """
    A frozen copy of one cart line. ``customizations`` is a JSON snapshot
    of the selections and never follows later catalog edits.
    """

    __tablename__ = "order_line"

    id: Mapped[int] = mapped_column(BigIntPK, primary_key=True)
    order_id: Mapped[int] = mapped_column(
        BigInteger, ForeignKey("orders.id"), nullable=False, index=True
    )
    dish_id: Mapped[int] = mapped_column(BigInteger, ForeignKey("dish.id"), nullable=False)
    dish_name: Mapped[str] = mapped_column(Text, nullable=False)
    quantity: Mapped[int] = mapped_column(Integer, nullable=False)
    unit_price_cents: Mapped[int] = mapped_column(Integer, nullable=False)
    subtotal_cents: Mapped[int] = mapped_column(Integer, nullable=False)
    comment: Mapped[Optional[str]] = mapped_column(Text)
    customizations: Mapped[str] = mapped_column(Text, nullable=False, default="[]")  # JSON array

    order: Mapped["Order"] = relationship(back_populates="lines")

    __table_args__ = (
        CheckConstraint("quantity > 0", name="chk_order_line_qty_positive"),
        CheckConstraint("unit_price_cents >= 0", name="chk_order_line_price_non_negative"),
    )
