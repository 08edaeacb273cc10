"""Real-time event fan-out.

Events are published after the database transaction commits. A failed
publish is logged and never undoes committed work.
"""

import json
from typing import Any, Dict, Optional, Protocol

import structlog
from redis import asyncio as aioredis
from redis.exceptions import RedisError

from robs.config import settings

logger = structlog.get_logger()

ORDER_CREATED = "order:created"
ORDER_UPDATED = "order:updated"
ORDER_PAID = "order:paid"
ORDER_DELETED = "order:deleted"
TABLE_STATUS_CHANGED = "table:status-changed"


class EventPublisher(Protocol):
    async def publish(self, event: str, payload: Dict[str, Any]) -> None:
        ...


class LogEventPublisher:
    """Writes events to the structured log only"""

    async def publish(self, event: str, payload: Dict[str, Any]) -> None:
        logger.info("Event published", event=event, entity_id=payload.get("id"))


class RedisEventPublisher:
    """Publishes events on a Redis pub/sub channel for socket gateways"""

    def __init__(self, url: Optional[str] = None, channel: Optional[str] = None):
        self.channel = channel or settings.event_channel
        self.client = aioredis.from_url(url or settings.redis_url, decode_responses=True)

    async def publish(self, event: str, payload: Dict[str, Any]) -> None:
        message = json.dumps({"event": event, "data": payload})
        try:
            await self.client.publish(self.channel, message)
        except RedisError as e:
            logger.warning("Event publish failed", event=event, error=str(e))

    async def close(self) -> None:
        await self.client.aclose()


_publisher: Optional[EventPublisher] = None


def get_event_publisher() -> EventPublisher:
    """Process-wide publisher chosen by ``settings.event_backend``"""
    global _publisher
    if _publisher is None:
        if settings.event_backend == "redis":
            _publisher = RedisEventPublisher()
        else:
            _publisher = LogEventPublisher()
    return _publisher
