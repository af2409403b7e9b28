"""
List Stores

Backends for the Redis-list queues the webhooks write to.
"""

import logging

from enrolment_webhooks.config import settings
from .base import ListStore
from .memory import MemoryListStore
from .redis_store import RedisListStore
from .upstash import UpstashListStore

logger = logging.getLogger(__name__)

REDIS_DISABLED_URL = "memory://"

_store: ListStore | None = None


def _build_store() -> ListStore:
    if settings.upstash_redis_rest_url and settings.upstash_redis_rest_token:
        return UpstashListStore(
            settings.upstash_redis_rest_url,
            settings.upstash_redis_rest_token,
            timeout=settings.store_timeout_seconds,
        )

    redis_url = settings.redis_url.strip()
    if redis_url and redis_url.lower() != REDIS_DISABLED_URL:
        return RedisListStore(redis_url, timeout=settings.store_timeout_seconds)

    logger.warning("No list store configured, queues are kept in memory and lost on restart")
    return MemoryListStore()


def get_list_store() -> ListStore:
    """Return the process-wide list store, building it on first use."""
    global _store
    if _store is None:
        _store = _build_store()
        logger.info(f"List store backend: {_store.backend_name}")
    return _store


async def close_list_store() -> None:
    global _store
    if _store is not None:
        await _store.close()
        _store = None


__all__ = [
    "ListStore",
    "MemoryListStore",
    "RedisListStore",
    "UpstashListStore",
    "close_list_store",
    "get_list_store",
]
