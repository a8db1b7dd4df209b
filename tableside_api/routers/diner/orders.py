"""
Order submission and tracking for diners.
"""

from fastapi import APIRouter, Depends, Request, status
from sqlalchemy.orm import Session

from tableside_api.models import TableSession
from tableside_api.routers.diner._deps import current_table_session
from tableside_api.services.domain import OrderService
from tableside_shared.config.settings import settings
from tableside_shared.infrastructure.db import get_db
from tableside_shared.security.rate_limit import limiter
from tableside_shared.utils.schemas import OrderCreatedOutput, OrderOutput, SubmitOrderRequest


router = APIRouter(tags=["diner-orders"])


@router.post("/orders", response_model=OrderCreatedOutput, status_code=status.HTTP_201_CREATED)
@limiter.limit(settings.order_rate_limit)
def submit_order(
    request: Request,
    body: SubmitOrderRequest | None = None,
    session: TableSession = Depends(current_table_session),
    db: Session = Depends(get_db),
) -> OrderCreatedOutput:
    """
    Submit the session's cart as one order.

    The cart is only cleared when the order is stored; on failure it is
    left as it was.
    """
    body = body or SubmitOrderRequest()
    service = OrderService(db)
    order = service.submit_order(
        session,
        expected_total=body.expected_total,
        idempotency_key=body.idempotency_key,
    )
    return service.created_output(order)


@router.get("/orders", response_model=list[OrderOutput])
def list_session_orders(
    session: TableSession = Depends(current_table_session),
    db: Session = Depends(get_db),
) -> list[OrderOutput]:
    return OrderService(db).list_for_session(session)


@router.get("/orders/{order_id}", response_model=OrderOutput)
def get_session_order(
    order_id: int,
    session: TableSession = Depends(current_table_session),
    db: Session = Depends(get_db),
) -> OrderOutput:
    """Order detail for the confirmation page and status polling."""
    return OrderService(db).get_order_for_session(session, order_id)
