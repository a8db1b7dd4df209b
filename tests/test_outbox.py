"""
Tests for the outbox writer and processor.
"""

import json
from unittest.mock import AsyncMock, MagicMock

import pytest
from sqlalchemy import select

from tableside_api.models import OutboxEvent, OutboxStatus
from tableside_api.services.events import OutboxProcessor, write_outbox_event, write_order_outbox_event
from tableside_api.services.events.outbox_processor import MAX_RETRIES, event_message
from tableside_shared.config.constants import OrderEvents

from tests.conftest import TestingSessionLocal


class TestOutboxService:
    """Tests for outbox_service.py functions."""

    def test_write_outbox_event_creates_pending_event(self):
        mock_db = MagicMock()

        event = write_outbox_event(
            db=mock_db,
            event_type="TEST_EVENT",
            aggregate_type="test",
            aggregate_id=123,
            payload={"key": "value"},
        )

        mock_db.add.assert_called_once_with(event)
        assert event.event_type == "TEST_EVENT"
        assert event.aggregate_type == "test"
        assert event.aggregate_id == 123
        assert event.status == OutboxStatus.PENDING
        assert json.loads(event.payload) == {"key": "value"}
        mock_db.commit.assert_not_called()

    def test_write_order_outbox_event_payload(self):
        mock_db = MagicMock()
        order = MagicMock(id=5, table_id=2, session_id=9, status="ready", total_cents=5800)

        event = write_order_outbox_event(mock_db, OrderEvents.ORDER_STATUS_CHANGED, order, actor_user_id=3)

        assert event.aggregate_type == OrderEvents.AGGREGATE
        assert json.loads(event.payload) == {
            "order_id": 5,
            "table_id": 2,
            "session_id": 9,
            "status": "ready",
            "total_cents": 5800,
            "actor_user_id": 3,
        }


def _pending(db, count=2, retry_count=0):
    events = []
    for i in range(count):
        event = write_outbox_event(db, OrderEvents.ORDER_CREATED, OrderEvents.AGGREGATE, i + 1, {"order_id": i + 1})
        event.retry_count = retry_count
        events.append(event)
    db.commit()
    return [e.id for e in events]


def _processor(redis_client):
    return OutboxProcessor(
        session_factory=TestingSessionLocal,
        redis_getter=AsyncMock(return_value=redis_client),
        channel="test:orders",
    )


class TestOutboxProcessor:

    async def test_publishes_pending_events(self, db_session):
        ids = _pending(db_session)
        redis_client = AsyncMock()

        published = await _processor(redis_client).process_batch()

        assert published == 2
        assert redis_client.publish.await_count == 2
        channel, message = redis_client.publish.await_args_list[0].args
        assert channel == "test:orders"
        data = json.loads(message)
        assert data["id"] == ids[0]
        assert data["type"] == OrderEvents.ORDER_CREATED
        assert data["payload"] == {"order_id": 1}

        db_session.expire_all()
        statuses = db_session.scalars(select(OutboxEvent.status)).all()
        assert statuses == [OutboxStatus.PUBLISHED, OutboxStatus.PUBLISHED]

    async def test_no_events(self, db_session):
        redis_client = AsyncMock()
        assert await _processor(redis_client).process_batch() == 0
        redis_client.publish.assert_not_awaited()

    async def test_failed_publish_is_retried(self, db_session):
        ids = _pending(db_session, count=1)
        redis_client = AsyncMock()
        redis_client.publish.side_effect = ConnectionError("redis down")

        assert await _processor(redis_client).process_batch() == 0

        db_session.expire_all()
        event = db_session.get(OutboxEvent, ids[0])
        assert event.status == OutboxStatus.PENDING
        assert event.retry_count == 1
        assert event.last_error == "redis down"

    async def test_gives_up_after_max_retries(self, db_session):
        ids = _pending(db_session, count=1, retry_count=MAX_RETRIES - 1)
        redis_client = AsyncMock()
        redis_client.publish.side_effect = ConnectionError("redis down")

        await _processor(redis_client).process_batch()

        db_session.expire_all()
        assert db_session.get(OutboxEvent, ids[0]).status == OutboxStatus.FAILED

    async def test_published_events_not_resent(self, db_session):
        _pending(db_session, count=1)
        redis_client = AsyncMock()
        processor = _processor(redis_client)

        await processor.process_batch()
        await processor.process_batch()

        assert redis_client.publish.await_count == 1

    async def test_start_and_stop(self, db_session):
        processor = _processor(AsyncMock())
        await processor.start()
        assert processor.running
        await processor.stop()
        assert not processor.running


class TestEventMessage:

    def test_wire_format(self, db_session):
        ids = _pending(db_session, count=1)
        event = db_session.get(OutboxEvent, ids[0])

        message = event_message(event)

        assert message["id"] == ids[0]
        assert message["aggregate_type"] == "order"
        assert message["aggregate_id"] == 1
        assert message["occurred_at"].endswith("+00:00")
