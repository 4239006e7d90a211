"""
Event Bus - Ordered fan-out of presentation events to SSE subscribers
"""

from __future__ import annotations

import asyncio
import logging

from models.events import PresentationEvent

logger = logging.getLogger(__name__)


class EventBus:
    """Deliver every published event to every subscriber, in publication order"""

    def __init__(self):
        self._subscribers: list[asyncio.Queue[PresentationEvent]] = []

    def subscribe(self) -> asyncio.Queue[PresentationEvent]:
        queue: asyncio.Queue[PresentationEvent] = asyncio.Queue()
        self._subscribers.append(queue)
        return queue

    def unsubscribe(self, queue: asyncio.Queue[PresentationEvent]):
        if queue in self._subscribers:
            self._subscribers.remove(queue)

    @property
    def subscriber_count(self) -> int:
        return len(self._subscribers)

    def publish(self, event: PresentationEvent):
        logger.debug("[EventBus] %s -> %d subscriber(s)", event.type.value, len(self._subscribers))
        for queue in list(self._subscribers):
            queue.put_nowait(event)
