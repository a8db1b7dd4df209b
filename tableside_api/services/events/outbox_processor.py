"""
Outbox processor for publishing events from the outbox table.

Reads PENDING events and publishes them to the Redis orders channel:
- Batch processing, oldest first
- PENDING -> PROCESSING -> PUBLISHED, back to PENDING on failure
- FAILED after MAX_RETRIES attempts

Runs as a background task started in the FastAPI lifespan.
"""

import asyncio
import json
from collections.abc import Awaitable, Callable
from typing import Any

from sqlalchemy import select, update
from sqlalchemy.orm import Session

from tableside_api.models import OutboxEvent, OutboxStatus, as_utc, utcnow
from tableside_shared.config.logging import get_logger
from tableside_shared.config.settings import settings
from tableside_shared.infrastructure.db import SessionLocal
from tableside_shared.infrastructure.redis_pool import get_redis_pool

logger = get_logger(__name__)

# Configuration
MAX_RETRIES = 5
BATCH_SIZE = 50
POLL_INTERVAL_SECONDS = 1.0  # How often to check for new events


def event_message(event: OutboxEvent) -> dict[str, Any]:
    """Wire format published for each event."""
    created_at = as_utc(event.created_at)
    return {
        "id": event.id,
        "type": event.event_type,
        "aggregate_type": event.aggregate_type,
        "aggregate_id": event.aggregate_id,
        "payload": json.loads(event.payload),
        "occurred_at": created_at.isoformat() if created_at else None,
    }


class OutboxProcessor:
    """
    Processes outbox events and publishes them to Redis.

    ``session_factory`` and ``redis_getter`` default to the application's
    database sessions and Redis pool.
    """

    def __init__(
        self,
        session_factory: Callable[[], Session] = SessionLocal,
        redis_getter: Callable[[], Awaitable[Any]] = get_redis_pool,
        channel: str | None = None,
    ):
        self._session_factory = session_factory
        self._redis_getter = redis_getter
        self._channel = channel or settings.redis_orders_channel
        self._running = False
        self._task: asyncio.Task | None = None

    @property
    def running(self) -> bool:
        return self._running

    async def start(self) -> None:
        """Start the processor loop."""
        if self._running:
            logger.warning("Outbox processor already running")
            return

        self._running = True
        self._task = asyncio.create_task(self._run_loop())
        logger.info("Outbox processor started", channel=self._channel)

    async def stop(self) -> None:
        """Stop the processor gracefully."""
        self._running = False
        if self._task:
            self._task.cancel()
            try:
                await self._task
            except asyncio.CancelledError:
                pass
            self._task = None
        logger.info("Outbox processor stopped")

    async def _run_loop(self) -> None:
        while self._running:
            try:
                processed = await self.process_batch()
                if processed == 0:
                    await asyncio.sleep(POLL_INTERVAL_SECONDS)
            except Exception as e:
                logger.error("Outbox processor error", error=str(e), exc_info=True)
                await asyncio.sleep(POLL_INTERVAL_SECONDS)

    async def process_batch(self) -> int:
        """
        Process one batch of PENDING events.

        Returns:
            Number of events published
        """
        db = self._session_factory()
        try:
            events = db.execute(
                select(OutboxEvent)
                .where(OutboxEvent.status == OutboxStatus.PENDING)
                .order_by(OutboxEvent.id.asc())
                .limit(BATCH_SIZE)
                .with_for_update(skip_locked=True)
            ).scalars().all()

            if not events:
                return 0

            # Claim the batch so a second worker skips it
            event_ids = [e.id for e in events]
            db.execute(
                update(OutboxEvent)
                .where(OutboxEvent.id.in_(event_ids))
                .values(status=OutboxStatus.PROCESSING)
            )
            db.commit()

            published = 0
            for event in events:
                if await self._publish_event(event):
                    event.status = OutboxStatus.PUBLISHED
                    event.processed_at = utcnow()
                    event.last_error = None
                    published += 1
                else:
                    event.retry_count += 1
                    if event.retry_count >= MAX_RETRIES:
                        event.status = OutboxStatus.FAILED
                        logger.error(
                            "Outbox event failed after max retries",
                            event_id=event.id,
                            event_type=event.event_type,
                        )
                    else:
                        event.status = OutboxStatus.PENDING

            db.commit()
            logger.info("Outbox batch processed", total=len(events), published=published)
            return published

        except Exception as e:
            db.rollback()
            logger.error("Outbox batch processing failed", error=str(e), exc_info=True)
            return 0
        finally:
            db.close()

    async def _publish_event(self, event: OutboxEvent) -> bool:
        try:
            redis_client = await self._redis_getter()
            await redis_client.publish(self._channel, json.dumps(event_message(event)))
            return True
        except Exception as e:
            event.last_error = str(e)
            logger.error(
                "Failed to publish outbox event",
                event_id=event.id,
                event_type=event.event_type,
                error=str(e),
            )
            return False


# Singleton instance
_processor: OutboxProcessor | None = None


def get_outbox_processor() -> OutboxProcessor:
    """Get the singleton outbox processor instance."""
    global _processor
    if _processor is None:
        _processor = OutboxProcessor()
    return _processor


async def start_outbox_processor() -> None:
    """Start the outbox processor (call in FastAPI lifespan startup)."""
    await get_outbox_processor().start()


async def stop_outbox_processor() -> None:
    """Stop the outbox processor (call in FastAPI lifespan shutdown)."""
    await get_outbox_processor().stop()


async def process_pending_events_once() -> int:
    """Process pending outbox events once (for testing or manual triggering)."""
    return await get_outbox_processor().process_batch()
