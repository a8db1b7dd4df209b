"""
Event Services.

- Outbox writer: queues events in the business transaction
- Outbox processor: publishes queued events to Redis
- Change feed: long-poll reader for staff order views
"""

from .outbox_service import (
    write_outbox_event,
    write_order_outbox_event,
)

from .outbox_processor import (
    OutboxProcessor,
    get_outbox_processor,
    start_outbox_processor,
    stop_outbox_processor,
    process_pending_events_once,
)

from .change_feed import ChangeFeed

__all__ = [
    "write_outbox_event",
    "write_order_outbox_event",
    "OutboxProcessor",
    "get_outbox_processor",
    "start_outbox_processor",
    "stop_outbox_processor",
    "process_pending_events_once",
    "ChangeFeed",
]
