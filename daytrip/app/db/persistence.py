"""Persisted completion-state adapter.

Serialization contract: a JSON array of `{"id": str, "completed": bool}`
records stored under a single fixed key. Reads and writes fail soft.
"""

import json
import logging
from collections.abc import Sequence

from pydantic import ValidationError

from daytrip.app.db.repositories import KeyValueStore
from daytrip.app.models.itinerary import Activity
from daytrip.app.models.persisted import PersistedEntry, persisted_state_adapter
from daytrip.app.utils.logging import StructuredEngineLogger
from daytrip.app.utils.metrics import PrometheusEngineMetrics

logger = logging.getLogger(__name__)


def snapshot(activities: Sequence[Activity]) -> list[PersistedEntry]:
    """Extract the persisted subset (id, completed) in itinerary order."""
    return [PersistedEntry(id=act.id, completed=act.completed) for act in activities]


def serialize_state(entries: Sequence[PersistedEntry]) -> str:
    """Serialize persisted entries to the stored JSON blob."""
    return json.dumps([entry.model_dump(mode="json") for entry in entries])


def deserialize_state(blob: str) -> list[PersistedEntry]:
    """Parse a stored JSON blob.

    Raises:
        pydantic.ValidationError: If the blob is not valid JSON or does not
            match the persisted record shape
    """
    return persisted_state_adapter.validate_json(blob)


class PersistenceAdapter:
    """Reads and writes completion flags through a key-value store."""

    def __init__(
        self,
        store: KeyValueStore,
        key: str,
        structured_logger: StructuredEngineLogger | None = None,
        metrics: PrometheusEngineMetrics | None = None,
    ) -> None:
        self._store = store
        self._key = key
        self._logger = structured_logger or StructuredEngineLogger()
        self._metrics = metrics or PrometheusEngineMetrics()

    @property
    def key(self) -> str:
        return self._key

    def load(self) -> list[PersistedEntry]:
        """Load persisted entries.

        Returns:
            Persisted entries, or an empty list when the value is absent,
            unreadable or malformed
        """
        try:
            blob = self._store.get(self._key)
        except Exception as e:
            self._metrics.inc_persistence_failure("read")
            self._logger.log_persistence("read", self._key, "error", error_reason=str(e))
            return []

        if blob is None:
            self._logger.log_persistence("read", self._key, "absent")
            return []

        try:
            entries = deserialize_state(blob)
        except ValidationError as e:
            self._metrics.inc_persistence_failure("read")
            self._logger.log_persistence(
                "read", self._key, "invalid", error_reason=f"{e.error_count()} validation error(s)"
            )
            return []

        self._logger.log_persistence("read", self._key, "success", entries=len(entries))
        return entries

    def save(self, activities: Sequence[Activity]) -> bool:
        """Write completion flags for activities.

        Returns:
            True if the write landed, False if it failed (logged and ignored)
        """
        entries = snapshot(activities)
        try:
            self._store.set(self._key, serialize_state(entries))
        except Exception as e:
            self._metrics.inc_persistence_failure("write")
            self._logger.log_persistence("write", self._key, "error", error_reason=str(e))
            return False

        self._logger.log_persistence("write", self._key, "success", entries=len(entries))
        return True
