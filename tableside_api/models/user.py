"""
Staff Model: StaffUser.
"""

from __future__ import annotations

from typing import Optional

from sqlalchemy import Text
from sqlalchemy.orm import Mapped, mapped_column

from tableside_shared.config.constants import Roles

from .base import AuditMixin, Base, BigIntPK


class StaffUser(AuditMixin, Base):
    """Restaurant staff account. ``password`` holds a bcrypt hash."""

    __tablename__ = "staff_user"

    id: Mapped[int] = mapped_column(BigIntPK, primary_key=True)
    email: Mapped[str] = mapped_column(Text, nullable=False, unique=True, index=True)
    password: Mapped[str] = mapped_column(Text, nullable=False)
    full_name: Mapped[Optional[str]] = mapped_column(Text)
    role: Mapped[str] = mapped_column(Text, nullable=False, default=Roles.WAITER)
