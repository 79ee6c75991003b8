"""In-memory implementation of the key-value store."""


class InMemoryKeyValueStore:
    """In-memory implementation of KeyValueStore."""

    def __init__(self, initial: dict[str, str] | None = None) -> None:
        self._data: dict[str, str] = dict(initial or {})

    def get(self, key: str) -> str | None:
        """Get blob by key."""
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        """Set blob by key."""
        self._data[key] = value
