"""
Staff change feed.

Long-poll reader over the order events in the outbox. Clients pass the
last event id they saw and receive everything after it; with a timeout
the call waits until at least one event arrives or the timeout elapses.
"""

import json
import time
from collections.abc import Callable

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from tableside_api.models import OutboxEvent, as_utc
from tableside_shared.config.constants import Limits, OrderEvents
from tableside_shared.config.logging import get_logger
from tableside_shared.config.settings import settings
from tableside_shared.utils.schemas import OrderChangeEvent, OrderChangeFeed

logger = get_logger(__name__)


class ChangeFeed:
    """Reads order events after a cursor, optionally waiting for new ones."""

    def __init__(
        self,
        db: Session,
        sleep: Callable[[float], None] = time.sleep,
        clock: Callable[[], float] = time.monotonic,
    ):
        self._db = db
        self._sleep = sleep
        self._clock = clock

    def latest_cursor(self) -> int:
        """Id of the newest order event, 0 when there is none."""
        return self._db.scalar(
            select(func.coalesce(func.max(OutboxEvent.id), 0)).where(
                OutboxEvent.aggregate_type == OrderEvents.AGGREGATE
            )
        )

    def head(self) -> OrderChangeFeed:
        """No events, just the cursor a client should start polling from."""
        return OrderChangeFeed(events=[], cursor=self.latest_cursor())

    def fetch(self, after: int = 0, limit: int = Limits.CHANGE_FEED_BATCH_SIZE) -> OrderChangeFeed:
        events = self._db.scalars(
            select(OutboxEvent)
            .where(
                OutboxEvent.aggregate_type == OrderEvents.AGGREGATE,
                OutboxEvent.id > after,
            )
            .order_by(OutboxEvent.id)
            .limit(limit)
        ).all()

        items = [self._to_change(e) for e in events]
        cursor = items[-1].id if items else after
        return OrderChangeFeed(events=items, cursor=cursor)

    def wait(self, after: int = 0, timeout: float = 0.0) -> OrderChangeFeed:
        """
        Return events after ``after``, waiting up to ``timeout`` seconds.

        The wait is capped by ``change_feed_max_wait_seconds``.
        """
        timeout = max(0.0, min(timeout, settings.change_feed_max_wait_seconds))
        deadline = self._clock() + timeout

        feed = self.fetch(after)
        while not feed.events and self._clock() < deadline:
            self._sleep(settings.change_feed_poll_interval_seconds)
            # End the read transaction so rows committed elsewhere are visible
            self._db.rollback()
            feed = self.fetch(after)

        logger.debug("Change feed served", after=after, events=len(feed.events), cursor=feed.cursor)
        return feed

    @staticmethod
    def _to_change(event: OutboxEvent) -> OrderChangeEvent:
        payload = json.loads(event.payload)
        return OrderChangeEvent(
            id=event.id,
            type=event.event_type,
            order_id=event.aggregate_id,
            table_id=payload.get("table_id"),
            status=payload.get("status"),
            occurred_at=as_utc(event.created_at),
        )
