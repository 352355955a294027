# foodcourt/services/realtime.py
import json
from typing import Any, Dict, Optional, Protocol

import redis
from redis import asyncio as aioredis

from foodcourt.utils.settings import (
    NOTIFICATION_CHANNEL_PREFIX,
    REDIS_TIMEOUT_SECONDS,
    REDIS_URL,
)
from foodcourt.utils.logging import get_logger

logger = get_logger(__name__)

#LUA compare and delete, a newer connection of the same user is not dropped
_UNREGISTER_LUA = """
if redis.call('HGET', KEYS[1], ARGV[1]) == ARGV[2] then
    return redis.call('HDEL', KEYS[1], ARGV[1])
else
    return 0
end
"""


class ConnectionDirectory(Protocol):
    def register(self, user_id: int, connection_id: str) -> None: ...

    def unregister(self, user_id: int, connection_id: str) -> bool: ...

    def lookup(self, user_id: int) -> Optional[str]: ...


class NotificationTransport(Protocol):
    def broadcast(self, event: str, payload: Dict[str, Any]) -> None: ...

    def send_to_connection(self, connection_id: str, event: str, payload: Dict[str, Any]) -> None: ...


def make_redis_client(url: str | None = None) -> redis.Redis:
    return redis.Redis.from_url(
        url or REDIS_URL,
        decode_responses=True,
        socket_timeout=REDIS_TIMEOUT_SECONDS,
        socket_connect_timeout=REDIS_TIMEOUT_SECONDS,
    )


def make_async_redis_client(url: str | None = None) -> aioredis.Redis:
    #no socket_timeout, pub/sub reads block until a message or get_message's own timeout
    return aioredis.Redis.from_url(
        url or REDIS_URL,
        decode_responses=True,
        socket_connect_timeout=REDIS_TIMEOUT_SECONDS,
    )


def broadcast_channel(prefix: str = NOTIFICATION_CHANNEL_PREFIX) -> str:
    return f"{prefix}:broadcast"


def connection_channel(connection_id: str, prefix: str = NOTIFICATION_CHANNEL_PREFIX) -> str:
    return f"{prefix}:connection:{connection_id}"


def encode_event(event: str, payload: Dict[str, Any]) -> str:
    return json.dumps({"event": event, "data": payload}, default=str)


class RedisConnectionDirectory:
    """
    userId -> connectionId map shared by every API worker, one redis hash.
    Only the latest connection of a user is kept.
    """

    def __init__(self, client: redis.Redis, prefix: str = NOTIFICATION_CHANNEL_PREFIX):
        self.redis = client
        self.key = f"{prefix}:connections"

    def register(self, user_id: int, connection_id: str) -> None:
        logger.info(f"Register connection {connection_id} for user {user_id}")
        self.redis.hset(self.key, str(user_id), connection_id)

    def unregister(self, user_id: int, connection_id: str) -> bool:
        logger.info(f"Unregister connection {connection_id} for user {user_id}")
        res = self.redis.eval(_UNREGISTER_LUA, 1, self.key, str(user_id), connection_id)
        return bool(res)

    def lookup(self, user_id: int) -> Optional[str]:
        return self.redis.hget(self.key, str(user_id))


class RedisNotificationTransport:
    """Redis pub/sub, subscribers are the websocket relays in the API."""

    def __init__(self, client: redis.Redis, prefix: str = NOTIFICATION_CHANNEL_PREFIX):
        self.redis = client
        self.prefix = prefix

    def broadcast(self, event: str, payload: Dict[str, Any]) -> None:
        self.redis.publish(broadcast_channel(self.prefix), encode_event(event, payload))

    def send_to_connection(self, connection_id: str, event: str, payload: Dict[str, Any]) -> None:
        self.redis.publish(
            connection_channel(connection_id, self.prefix),
            encode_event(event, payload),
        )


class RedisEventSubscriber:
    """Opens the pub/sub subscription of one websocket relay."""

    def __init__(self, client: aioredis.Redis):
        self.redis = client

    async def subscribe(self, *channels: str):
        pubsub = self.redis.pubsub()
        try:
            await pubsub.subscribe(*channels)
        except Exception:
            await pubsub.aclose()
            raise
        return pubsub
