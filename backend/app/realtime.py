"""
Live session registry used to fan change events out to an owner's WebSockets.
"""

import asyncio
import logging
import threading
from dataclasses import dataclass
from typing import Any, Dict, List, Set

logger = logging.getLogger(__name__)

# Events buffered per session before new ones are dropped
QUEUE_SIZE = 100


@dataclass(eq=False)
class Subscription:
    """One connected session: events are queued on the loop that serves it."""
    owner_id: str
    loop: asyncio.AbstractEventLoop
    queue: asyncio.Queue

    def offer(self, event: Dict[str, Any]) -> None:
        """Queue an event; runs on the subscription's loop."""
        try:
            self.queue.put_nowait(event)
        except asyncio.QueueFull:
            logger.warning(f"Dropped event for slow session of owner {self.owner_id}")


class ConnectionManager:
    """
    Publisher implementation backed by in-process WebSocket sessions.

    ``publish`` is called from request worker threads, so events are handed to
    each subscription's loop with ``call_soon_threadsafe``. It never blocks and
    never raises for a dead subscription; that subscription is dropped instead.
    A session whose queue is full loses the newest events.
    """

    def __init__(self, queue_size: int = QUEUE_SIZE):
        self.queue_size = queue_size
        self._lock = threading.Lock()
        self._subscriptions: Dict[str, Set[Subscription]] = {}

    def subscribe(self, owner_id: str) -> Subscription:
        """Register a session; must be called from the loop that will drain it."""
        subscription = Subscription(
            owner_id=owner_id,
            loop=asyncio.get_running_loop(),
            queue=asyncio.Queue(maxsize=self.queue_size),
        )
        with self._lock:
            self._subscriptions.setdefault(owner_id, set()).add(subscription)
        logger.info(f"Session subscribed for owner {owner_id}")
        return subscription

    def unsubscribe(self, subscription: Subscription) -> None:
        with self._lock:
            sessions = self._subscriptions.get(subscription.owner_id)
            if sessions is None:
                return
            sessions.discard(subscription)
            if not sessions:
                del self._subscriptions[subscription.owner_id]
        logger.info(f"Session unsubscribed for owner {subscription.owner_id}")

    def subscriber_count(self, owner_id: str) -> int:
        with self._lock:
            return len(self._subscriptions.get(owner_id, ()))

    def publish(self, owner_id: str, event: Dict[str, Any]) -> None:
        with self._lock:
            targets: List[Subscription] = list(self._subscriptions.get(owner_id, ()))

        for subscription in targets:
            try:
                subscription.loop.call_soon_threadsafe(subscription.offer, event)
            except RuntimeError:
                # Loop already closed
                self.unsubscribe(subscription)
