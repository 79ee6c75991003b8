"""Storage protocol interfaces for persisted state."""

from typing import Protocol


class KeyValueStore(Protocol):
    """Local key-value blob store.

    The engine defines what goes into the blob; the store only keeps strings.
    """

    def get(self, key: str) -> str | None:
        """Get the blob stored under key.

        Args:
            key: Storage key

        Returns:
            Stored string, or None when absent
        """
        ...

    def set(self, key: str, value: str) -> None:
        """Store a blob under key, replacing any previous value.

        Args:
            key: Storage key
            value: Serialized blob
        """
        ...
