"""
Table and Session Models: Table, TableSession.
"""

from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING, Optional

from sqlalchemy import BigInteger, DateTime, ForeignKey, Index, Integer, Text, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from tableside_shared.config.constants import SessionStatus

from .base import AuditMixin, Base, BigIntPK, as_utc, utcnow

if TYPE_CHECKING:
    from .cart import Cart


class Table(AuditMixin, Base):
    """
    Physical table. The QR code printed on it encodes ``number``.
    """

    # "table" is a reserved SQL keyword
    __tablename__ = "restaurant_table"

    id: Mapped[int] = mapped_column(BigIntPK, primary_key=True)
    number: Mapped[int] = mapped_column(Integer, nullable=False, unique=True)
    label: Mapped[Optional[str]] = mapped_column(Text)

    sessions: Mapped[list["TableSession"]] = relationship(back_populates="table")


class TableSession(Base):
    """
    One diner browsing session, opened by scanning a table code.

    Each scan opens its own session so carts never leak between devices.
    The session expires server-side at ``expires_at``.
    """

    __tablename__ = "table_session"

    id: Mapped[int] = mapped_column(BigIntPK, primary_key=True)
    table_id: Mapped[int] = mapped_column(
        BigInteger, ForeignKey("restaurant_table.id"), nullable=False, index=True
    )
    status: Mapped[str] = mapped_column(Text, default=SessionStatus.OPEN, nullable=False)
    opened_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )
    expires_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    closed_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True))

    table: Mapped["Table"] = relationship(back_populates="sessions")
    cart: Mapped[Optional["Cart"]] = relationship(back_populates="session")

    __table_args__ = (
        Index("ix_table_session_table_status", "table_id", "status"),
    )

    def is_usable(self, now: datetime | None = None) -> bool:
        """True while the session is open and not past its expiry."""
        now = now or utcnow()
        return self.status == SessionStatus.OPEN and as_utc(self.expires_at) > now
