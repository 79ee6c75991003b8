"""Key-value store selection from settings."""

import logging

import redis

from daytrip.app.config import Settings
from daytrip.app.db.file_store import JsonFileKeyValueStore
from daytrip.app.db.inmemory import InMemoryKeyValueStore
from daytrip.app.db.redis_store import RedisKeyValueStore
from daytrip.app.db.repositories import KeyValueStore

logger = logging.getLogger(__name__)


def build_store(settings: Settings) -> KeyValueStore:
    """Build the configured key-value store.

    A redis backend without a redis_url falls back to in-memory storage.
    """
    if settings.storage_backend == "file":
        logger.info(f"[storage] Using JSON file store at {settings.storage_path}")
        return JsonFileKeyValueStore(settings.storage_path)

    if settings.storage_backend == "redis":
        if settings.redis_url:
            logger.info("[storage] Using Redis store")
            client = redis.from_url(settings.redis_url, decode_responses=True)  # type: ignore[no-untyped-call]
            return RedisKeyValueStore(client)
        logger.warning("[storage] redis backend selected but no redis_url set, using in-memory store")

    return InMemoryKeyValueStore()
