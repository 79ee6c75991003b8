"""Redis implementation of the key-value store."""

import redis


class RedisKeyValueStore:
    """Redis-backed KeyValueStore using plain GET/SET."""

    def __init__(self, redis_client: redis.Redis, namespace: str = "daytrip") -> None:
        """Initialize store.

        Args:
            redis_client: Redis client
            namespace: Prefix applied to every key
        """
        self._redis = redis_client
        self._namespace = namespace

    def _key(self, key: str) -> str:
        return f"{self._namespace}:{key}"

    def get(self, key: str) -> str | None:
        """Get blob by key."""
        value = self._redis.get(self._key(key))
        if value is None:
            return None
        if isinstance(value, bytes):
            return value.decode("utf-8")
        return str(value)

    def set(self, key: str, value: str) -> None:
        """Set blob by key."""
        self._redis.set(self._key(key), value)
