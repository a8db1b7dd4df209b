"""
Outbox service for transactional event publishing.

Events are written to the outbox table in the same transaction as the
business change. The processor publishes them to Redis afterwards and the
staff change feed reads them back in id order.

Usage:
    order = Order(...)
    db.add(order)
    db.flush()
    write_order_outbox_event(db, OrderEvents.ORDER_CREATED, order)
    safe_commit(db)  # order and event are saved together
"""

import json
from typing import Any

from sqlalchemy.orm import Session

from tableside_api.models import Order, OutboxEvent, OutboxStatus
from tableside_shared.config.constants import OrderEvents
from tableside_shared.config.logging import get_logger

logger = get_logger(__name__)


def write_outbox_event(
    db: Session,
    event_type: str,
    aggregate_type: str,
    aggregate_id: int,
    payload: dict[str, Any],
) -> OutboxEvent:
    """
    Queue an event in the caller's transaction.

    Nothing is flushed or committed here; the caller owns the transaction.
    """
    outbox_event = OutboxEvent(
        event_type=event_type,
        aggregate_type=aggregate_type,
        aggregate_id=aggregate_id,
        payload=json.dumps(payload, default=str),
        status=OutboxStatus.PENDING,
        retry_count=0,
    )
    db.add(outbox_event)
    logger.debug(
        "Outbox event queued",
        event_type=event_type,
        aggregate_type=aggregate_type,
        aggregate_id=aggregate_id,
    )
    return outbox_event


def write_order_outbox_event(
    db: Session,
    event_type: str,
    order: Order,
    actor_user_id: int | None = None,
) -> OutboxEvent:
    """Queue an order event carrying the fields staff views need."""
    return write_outbox_event(
        db=db,
        event_type=event_type,
        aggregate_type=OrderEvents.AGGREGATE,
        aggregate_id=order.id,
        payload={
            "order_id": order.id,
            "table_id": order.table_id,
            "session_id": order.session_id,
            "status": order.status,
            "total_cents": order.total_cents,
            "actor_user_id": actor_user_id,
        },
    )
