from __future__ import annotations

import asyncio
import logging
from collections import defaultdict
from collections.abc import AsyncIterator
from typing import Any


logger = logging.getLogger(__name__)

DEFAULT_MAXSIZE = 1000


class EventBus:
    """
    Topic fan-out: every subscriber gets its own bounded queue.

    A listener that stops draining its queue loses its oldest events once
    maxsize is reached; publishers never block.
    """

    def __init__(self, maxsize: int = DEFAULT_MAXSIZE) -> None:
        self.maxsize = maxsize
        self.dropped = 0
        self._topics: defaultdict[str, list[asyncio.Queue]] = defaultdict(list)

    def listen(self, topic: str) -> asyncio.Queue:
        q: asyncio.Queue = asyncio.Queue(maxsize=self.maxsize)
        self._topics[topic].append(q)
        return q

    def unlisten(self, topic: str, q: asyncio.Queue) -> None:
        if q in self._topics[topic]:
            self._topics[topic].remove(q)

    def publish_nowait(self, topic: str, event: dict[str, Any]) -> None:
        for q in self._topics[topic]:
            if q.full():
                q.get_nowait()
                self.dropped += 1
                logger.debug(f"Listener on '{topic}' is full, dropped oldest event")
            q.put_nowait(event)

    async def publish(self, topic: str, event: dict[str, Any]) -> None:
        self.publish_nowait(topic, event)

    async def subscribe(self, topic: str) -> AsyncIterator[dict[str, Any]]:
        q = self.listen(topic)
        try:
            while True:
                yield await q.get()
        finally:
            self.unlisten(topic, q)
