"""Redis protocol list store."""

import logging

import redis.asyncio as redis
from redis.exceptions import RedisError

from enrolment_webhooks.errors import StoreUnavailable
from .base import ListStore

logger = logging.getLogger(__name__)

DEFAULT_MAX_CONNECTIONS = 20
DEFAULT_HEALTH_CHECK_SECONDS = 30


class RedisListStore(ListStore):
    def __init__(self, url: str | None = None, timeout: float = 10.0, client: redis.Redis | None = None):
        if client is None:
            pool = redis.ConnectionPool.from_url(
                url,
                max_connections=DEFAULT_MAX_CONNECTIONS,
                socket_connect_timeout=timeout,
                socket_timeout=timeout,
                health_check_interval=DEFAULT_HEALTH_CHECK_SECONDS,
                retry_on_timeout=True,
                decode_responses=True,
            )
            client = redis.Redis(connection_pool=pool)
        self._client = client

    @property
    def backend_name(self) -> str:
        return "redis"

    async def push(self, key: str, value: str, *, head: bool = False) -> int:
        try:
            if head:
                return await self._client.lpush(key, value)
            return await self._client.rpush(key, value)
        except RedisError as e:
            logger.error(f"Redis push to {key} failed: {e}")
            raise StoreUnavailable()

    async def range(self, key: str, start: int = 0, end: int = -1) -> list:
        try:
            return await self._client.lrange(key, start, end)
        except RedisError as e:
            logger.error(f"Redis range on {key} failed: {e}")
            raise StoreUnavailable()

    async def remove_one(self, key: str, value: str) -> int:
        try:
            return await self._client.lrem(key, 1, value)
        except RedisError as e:
            logger.error(f"Redis remove on {key} failed: {e}")
            raise StoreUnavailable()

    async def ping(self) -> bool:
        try:
            return bool(await self._client.ping())
        except RedisError as e:
            logger.warning(f"Redis ping failed: {e}")
            return False

    async def close(self) -> None:
        await self._client.aclose()
