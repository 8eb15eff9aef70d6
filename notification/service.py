#!/usr/bin/env python3
"""
Event Publisher - hands committed domain events to the notifier.

The core never sends messages itself. Events go to:
- in-process subscribers (callables registered with ``subscribe``)
- optionally, a Redis Queue where RQ workers run the external notifier
  named by ``handler`` (a dotted function path)

Usage:
    from notification.service import EventPublisher

    publisher = EventPublisher()
    publisher.subscribe(lambda event: print(event.event_type))
    publisher.publish(BuyerTargeted(...))
"""

import logging
from typing import Callable, Iterable, List, Optional

from redis import Redis
from rq import Queue, Retry

from notification.events import DomainEvent

logger = logging.getLogger(__name__)

Subscriber = Callable[[DomainEvent], None]


class EventPublisher:
    """
    Publishes domain events to subscribers and, when configured, to RQ.

    Publication happens after the state change committed; a failing
    subscriber or an unreachable queue is logged and does not undo it.
    """

    def __init__(
        self,
        redis_url: Optional[str] = None,
        queue_name: str = "deal-events",
        handler: Optional[str] = None,
        use_async_queue: bool = False
    ):
        self._subscribers: List[Subscriber] = []
        self.handler = handler
        self.redis_conn = None
        self.queue = None
        self.async_mode = False

        if not use_async_queue:
            logger.info("Async event queue disabled via config. Using in-process delivery only.")
        elif not handler:
            logger.warning("Async event queue enabled but no handler configured. Using in-process delivery only.")
        else:
            try:
                self.redis_conn = Redis.from_url(redis_url or 'redis://localhost:6379/0')
                # Validate connection with ping before using
                self.redis_conn.ping()
                self.queue = Queue(queue_name, connection=self.redis_conn)
                self.async_mode = True
                logger.info(f"Event publisher connected to Redis queue '{queue_name}'")
            except Exception as e:
                logger.error(f"Redis connection failed: {e}. Falling back to in-process delivery.")
                self.redis_conn = None
                self.queue = None

    def subscribe(self, subscriber: Subscriber) -> None:
        self._subscribers.append(subscriber)

    def publish(self, event: DomainEvent) -> None:
        for subscriber in self._subscribers:
            try:
                subscriber(event)
            except Exception as e:
                logger.error(f"Subscriber {subscriber!r} failed on {event.event_type}: {e}")

        if self.async_mode:
            try:
                job = self.queue.enqueue(
                    self.handler,
                    event.to_payload(),
                    job_timeout='5m',
                    result_ttl=86400,
                    retry=Retry(max=3, interval=[30, 60, 120])
                )
                logger.info(f"Queued {event.event_type} for listing {event.listing_id} as job {job.id}")
            except Exception as e:
                logger.error(f"Failed to enqueue {event.event_type} for listing {event.listing_id}: {e}")

    def publish_all(self, events: Iterable[DomainEvent]) -> None:
        for event in events:
            self.publish(event)
