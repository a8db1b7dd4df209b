"""
Order endpoints for staff: listing, detail, status changes and the
long-poll change feed.
"""

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from tableside_api.routers._common import (
    Pagination,
    get_pagination,
    get_user_id,
    require_any_staff,
)
from tableside_api.services.domain import OrderService
from tableside_api.services.events import ChangeFeed
from tableside_shared.infrastructure.db import get_db
from tableside_shared.utils.schemas import OrderChangeFeed, OrderOutput, UpdateOrderStatusRequest


router = APIRouter(tags=["admin-orders"])


@router.get("/orders", response_model=list[OrderOutput])
def list_orders(
    status: str | None = None,
    pagination: Pagination = Depends(get_pagination),
    db: Session = Depends(get_db),
    user: dict = Depends(require_any_staff),
) -> list[OrderOutput]:
    """List orders newest first, optionally filtered by status."""
    return OrderService(db).list_orders(status=status, limit=pagination.limit, offset=pagination.offset)


@router.get("/orders/changes", response_model=OrderChangeFeed)
def order_changes(
    after: int | None = Query(default=None, ge=0, description="Last event id already seen"),
    timeout: float = Query(default=0.0, ge=0, description="Seconds to wait for new events"),
    db: Session = Depends(get_db),
    user: dict = Depends(require_any_staff),
) -> OrderChangeFeed:
    """
    Order events after ``after``. With a timeout the request is held open
    until an event arrives or the (capped) timeout elapses.

    Without ``after`` only the current cursor is returned, so a screen can
    start following from now without replaying history.
    """
    feed = ChangeFeed(db)
    if after is None:
        return feed.head()
    return feed.wait(after=after, timeout=timeout)


@router.get("/orders/{order_id}", response_model=OrderOutput)
def get_order(
    order_id: int,
    db: Session = Depends(get_db),
    user: dict = Depends(require_any_staff),
) -> OrderOutput:
    return OrderService(db).get_order(order_id)


@router.patch("/orders/{order_id}/status", response_model=OrderOutput)
def update_order_status(
    order_id: int,
    body: UpdateOrderStatusRequest,
    db: Session = Depends(get_db),
    user: dict = Depends(require_any_staff),
) -> OrderOutput:
    """Set any valid status. Concurrent updates: last writer wins."""
    return OrderService(db).update_status(order_id, body.status, actor_user_id=get_user_id(user))
