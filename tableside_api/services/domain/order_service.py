"""
Order Service: submission and status workflow.

Usage:
    service = OrderService(db)
    order = service.submit_order(session, expected_total=5800)
    service.update_status(order.id, OrderStatus.PREPARING, actor_user_id=3)
"""

from __future__ import annotations

import json

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, selectinload

from tableside_api.models import Cart as CartRow
from tableside_api.models import Order, OrderLine, TableSession, as_utc, utcnow
from tableside_api.services import pricing
from tableside_api.services.cart import Cart
from tableside_api.services.domain.table_session_service import SessionExpiredError
from tableside_api.services.events.outbox_service import write_order_outbox_event
from tableside_api.services.selection import customization_text
from tableside_shared.config.constants import Limits, OrderEvents, OrderStatus
from tableside_shared.config.logging import get_logger
from tableside_shared.infrastructure.db import safe_commit
from tableside_shared.utils.exceptions import (
    ConflictError,
    DatabaseError,
    InvalidStatusError,
    NotFoundError,
    ValidationError,
)
from tableside_shared.utils.schemas import (
    OrderCreatedOutput,
    OrderLineOutput,
    OrderOutput,
    SelectedOption,
)

logger = get_logger(__name__)


class EmptyCartError(ValidationError):
    default_code = "EMPTY_CART"

    def __init__(self, session_id: int):
        super().__init__("Cart is empty", session_id=session_id)


class TotalMismatchError(ConflictError):
    """The total the diner saw differs from the recomputed one."""

    default_code = "TOTAL_MISMATCH"

    def __init__(self, expected: int, actual: int):
        self.expected = expected
        self.actual = actual
        super().__init__(
            f"Cart total changed: expected {expected}, current total is {actual}",
            expected=expected,
            actual=actual,
        )


class OrderService:
    """
    Business rules:
    - Submission writes header, lines, cart removal and event atomically
    - A failed submission leaves the cart untouched
    - An idempotency key replays the order already created for it
    - Any status may be set at any time; the last write wins
    """

    def __init__(self, db: Session):
        self._db = db

    # =========================================================================
    # Submission
    # =========================================================================

    def submit_order(
        self,
        session: TableSession,
        expected_total: int | None = None,
        idempotency_key: str | None = None,
    ) -> Order:
        """
        Turn the session's cart into an order.

        Raises:
            SessionExpiredError: Session closed or expired.
            EmptyCartError: Nothing to submit.
            TotalMismatchError: expected_total differs from the cart total.
            DatabaseError: Any store failure; nothing is persisted.
        """
        if not session.is_usable():
            raise SessionExpiredError(session.id)

        if idempotency_key:
            existing = self._db.scalar(
                select(Order).where(
                    Order.session_id == session.id,
                    Order.idempotency_key == idempotency_key,
                )
            )
            if existing is not None:
                logger.info("Replaying idempotent submission", order_id=existing.id, session_id=session.id)
                return existing

        row = self._db.get(CartRow, session.id)
        cart = Cart.from_snapshot(json.loads(row.lines)) if row else Cart()
        if cart.is_empty:
            raise EmptyCartError(session.id)

        total = cart.total
        if expected_total is not None and expected_total != total:
            raise TotalMismatchError(expected_total, total)

        try:
            order = Order(
                table_id=session.table_id,
                session_id=session.id,
                total_cents=total,
                status=OrderStatus.RECEIVED,
                idempotency_key=idempotency_key,
                created_at=utcnow(),
            )
            self._db.add(order)
            self._db.flush()

            for line in cart.lines:
                self._db.add(
                    OrderLine(
                        order_id=order.id,
                        dish_id=line.dish_id,
                        dish_name=line.dish_name,
                        quantity=line.quantity,
                        unit_price_cents=line.unit_price,
                        subtotal_cents=pricing.line_subtotal(line.unit_price, line.quantity),
                        comment=line.comment,
                        customizations=json.dumps([s.model_dump() for s in line.selections]),
                    )
                )

            self._db.delete(row)
            write_order_outbox_event(self._db, OrderEvents.ORDER_CREATED, order)
            safe_commit(self._db)
        except SQLAlchemyError as e:
            self._db.rollback()
            logger.error("Order submission failed", session_id=session.id, error=str(e))
            raise DatabaseError("order submission", e)

        self._db.refresh(order)
        logger.info(
            "Order submitted",
            order_id=order.id,
            table_id=order.table_id,
            session_id=session.id,
            total=total,
            lines=len(cart),
        )
        return order

    # =========================================================================
    # Query Methods
    # =========================================================================

    def get_order(self, order_id: int) -> OrderOutput:
        return self.to_output(self._get_or_404(order_id))

    def get_order_for_session(self, session: TableSession, order_id: int) -> OrderOutput:
        order = self._get_or_404(order_id)
        if order.session_id != session.id:
            raise NotFoundError("Order", order_id)
        return self.to_output(order)

    def list_for_session(self, session: TableSession) -> list[OrderOutput]:
        orders = self._db.scalars(
            self._base_query()
            .where(Order.session_id == session.id)
            .order_by(Order.id.desc())
        ).all()
        return [self.to_output(o) for o in orders]

    def list_orders(
        self,
        status: str | None = None,
        limit: int = Limits.DEFAULT_PAGE_SIZE,
        offset: int = 0,
    ) -> list[OrderOutput]:
        """Staff listing, newest first."""
        query = self._base_query()
        if status is not None:
            self._check_status(status)
            query = query.where(Order.status == status)

        orders = self._db.scalars(
            query.order_by(Order.created_at.desc(), Order.id.desc()).limit(limit).offset(offset)
        ).all()
        return [self.to_output(o) for o in orders]

    # =========================================================================
    # Status workflow
    # =========================================================================

    def update_status(self, order_id: int, status: str, actor_user_id: int | None = None) -> OrderOutput:
        """
        Set an order's status. No transition rules apply.

        Raises:
            InvalidStatusError: Unknown status value.
            NotFoundError: Unknown order.
        """
        self._check_status(status)
        order = self._get_or_404(order_id)

        previous = order.status
        order.status = status
        order.status_changed_at = utcnow()
        write_order_outbox_event(self._db, OrderEvents.ORDER_STATUS_CHANGED, order, actor_user_id)

        try:
            safe_commit(self._db)
        except SQLAlchemyError as e:
            logger.error("Order status update failed", order_id=order_id, error=str(e))
            raise DatabaseError("order status update", e)

        self._db.refresh(order)
        logger.info(
            "Order status changed",
            order_id=order_id,
            previous=previous,
            status=status,
            actor_user_id=actor_user_id,
        )
        return self.to_output(order)

    # =========================================================================
    # Transformation
    # =========================================================================

    @staticmethod
    def created_output(order: Order) -> OrderCreatedOutput:
        return OrderCreatedOutput(
            order_id=order.id,
            status=order.status,
            total=order.total_cents,
            created_at=as_utc(order.created_at),
        )

    @staticmethod
    def to_output(order: Order) -> OrderOutput:
        return OrderOutput(
            id=order.id,
            table_id=order.table_id,
            table_number=order.table.number if order.table else None,
            session_id=order.session_id,
            total=order.total_cents,
            status=order.status,
            created_at=as_utc(order.created_at),
            status_changed_at=as_utc(order.status_changed_at),
            lines=[OrderService._line_output(line) for line in order.lines],
        )

    @staticmethod
    def _line_output(line: OrderLine) -> OrderLineOutput:
        selections = [SelectedOption.model_validate(s) for s in json.loads(line.customizations)]
        return OrderLineOutput(
            id=line.id,
            dish_id=line.dish_id,
            dish_name=line.dish_name,
            quantity=line.quantity,
            unit_price=line.unit_price_cents,
            subtotal=line.subtotal_cents,
            comment=line.comment,
            customizations=selections,
            customization_text=customization_text(selections),
        )

    # =========================================================================

    @staticmethod
    def _base_query():
        return select(Order).options(selectinload(Order.lines), selectinload(Order.table))

    @staticmethod
    def _check_status(status: str) -> None:
        if status not in OrderStatus.ALL:
            raise InvalidStatusError("order", status, OrderStatus.ALL)

    def _get_or_404(self, order_id: int) -> Order:
        order = self._db.scalar(self._base_query().where(Order.id == order_id))
        if order is None:
            raise NotFoundError("Order", order_id)
        return order
