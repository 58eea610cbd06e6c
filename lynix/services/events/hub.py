"""
Event Hub - In-process fan-out of realtime events to WebSocket subscribers

Each connected client owns a bounded queue keyed by its user id. Services publish
after their database work commits; events reach a subscriber in publish order.
Polling endpoints stay authoritative, so a dropped event is recovered on the next poll.
"""
import asyncio
import logging
from typing import Any, Dict, Iterable, Set
from lynix.config import settings
from lynix.utils.timestamps import utcnow

logger = logging.getLogger(__name__)

CALL_UPDATED = "call.updated"
CHAT_MESSAGE = "chat.message"
VOICE_MESSAGE = "voice.message"


class EventHub:
    """Per-user publish/subscribe over asyncio queues"""

    def __init__(self, queue_size: int = 100):
        self._queue_size = queue_size
        # user_id -> queues of that user's open connections
        self._subscribers: Dict[str, Set[asyncio.Queue]] = {}

    def subscribe(self, user_id: str) -> asyncio.Queue:
        queue: asyncio.Queue = asyncio.Queue(maxsize=self._queue_size)
        self._subscribers.setdefault(user_id, set()).add(queue)
        logger.info(f"User {user_id} subscribed to events ({len(self._subscribers[user_id])} connection(s))")
        return queue

    def unsubscribe(self, user_id: str, queue: asyncio.Queue) -> None:
        queues = self._subscribers.get(user_id)
        if not queues:
            return
        queues.discard(queue)
        if not queues:
            del self._subscribers[user_id]
        logger.info(f"User {user_id} unsubscribed from events")

    def publish(self, user_id: str, event_type: str, payload: Dict[str, Any]) -> int:
        """Queue an event for every connection of one user. Returns deliveries made."""
        queues = self._subscribers.get(user_id)
        if not queues:
            return 0

        event = {
            "type": event_type,
            "payload": payload,
            "timestamp": utcnow().isoformat(),
        }
        delivered = 0
        for queue in list(queues):
            try:
                queue.put_nowait(event)
                delivered += 1
            except asyncio.QueueFull:
                logger.warning(f"⚠️ Event queue full for user {user_id}, dropping {event_type}")
        return delivered

    def publish_many(self, user_ids: Iterable[str], event_type: str, payload: Dict[str, Any]) -> int:
        # De-duplicate so a user listed twice (e.g. calling themselves) gets one copy
        return sum(self.publish(user_id, event_type, payload) for user_id in set(user_ids))

    def subscriber_count(self) -> int:
        return sum(len(queues) for queues in self._subscribers.values())


event_hub = EventHub(queue_size=settings.EVENT_QUEUE_SIZE)
