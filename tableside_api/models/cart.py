"""
Cart Model: server-side snapshot of a session's cart.
"""

from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING, Optional

from sqlalchemy import BigInteger, DateTime, ForeignKey, Integer, Text, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .base import Base

if TYPE_CHECKING:
    from .table import TableSession


class Cart(Base):
    """
    The whole cart of one table session, stored as a JSON snapshot.

    Every mutation rewrites ``lines`` and bumps ``version`` in a single
    statement, so readers never observe a half-applied change. SQLAlchemy
    manages ``version``; callers never assign it.
    """

    __tablename__ = "cart"

    session_id: Mapped[int] = mapped_column(
        BigInteger, ForeignKey("table_session.id"), primary_key=True
    )
    lines: Mapped[str] = mapped_column(Text, nullable=False, default="[]")  # JSON array
    version: Mapped[int] = mapped_column(Integer, nullable=False)
    updated_at: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now()
    )

    session: Mapped["TableSession"] = relationship(back_populates="cart")

    # UPDATE ... WHERE version = :loaded; a concurrent writer gets StaleDataError
    __mapper_args__ = {"version_id_col": version}
