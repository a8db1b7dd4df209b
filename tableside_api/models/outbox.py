"""
Outbox model for transactional event publishing.

Events are written in the same transaction as the business change, then
published to Redis by the outbox processor. The staff change feed reads
the same table, so polling clients and push subscribers see the same
sequence.
"""

from __future__ import annotations

from datetime import datetime
from enum import Enum

from sqlalchemy import BigInteger, DateTime, Enum as SQLEnum, Index, Integer, String, Text, func
from sqlalchemy.orm import Mapped, mapped_column

from .base import Base, BigIntPK


class OutboxStatus(str, Enum):
    """Status of an outbox event."""
    PENDING = "PENDING"        # Ready to be processed
    PROCESSING = "PROCESSING"  # Claimed by a processor
    PUBLISHED = "PUBLISHED"    # Successfully published
    FAILED = "FAILED"          # Failed after max retries


class OutboxEvent(Base):
    """Outbox event for guaranteed delivery."""

    __tablename__ = "outbox_event"

    id: Mapped[int] = mapped_column(BigIntPK, primary_key=True)

    event_type: Mapped[str] = mapped_column(String(50), nullable=False, index=True)
    aggregate_type: Mapped[str] = mapped_column(String(50), nullable=False)  # e.g. "order"
    aggregate_id: Mapped[int] = mapped_column(BigInteger, nullable=False)

    # Event payload (JSON serialized)
    payload: Mapped[str] = mapped_column(Text, nullable=False)

    status: Mapped[OutboxStatus] = mapped_column(
        SQLEnum(OutboxStatus, name="outbox_status"),
        default=OutboxStatus.PENDING,
        nullable=False,
        index=True,
    )

    retry_count: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    last_error: Mapped[str | None] = mapped_column(Text, nullable=True)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )
    processed_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True
    )

    __table_args__ = (
        Index("ix_outbox_event_status_created", "status", "created_at"),
        Index("ix_outbox_event_aggregate", "aggregate_type", "id"),
    )

    def __repr__(self) -> str:
        return f"<OutboxEvent(id={self.id}, type={self.event_type}, status={self.status.value})>"
