"""Activity store - canonical itinerary plus user completion flags."""

import logging
from collections.abc import Sequence

from daytrip.app.db.persistence import PersistenceAdapter
from daytrip.app.models.itinerary import Activity
from daytrip.app.models.persisted import PersistedEntry
from daytrip.app.utils.metrics import PrometheusEngineMetrics

logger = logging.getLogger(__name__)


def merge_with_persisted(
    canonical: Sequence[Activity], persisted: Sequence[PersistedEntry]
) -> list[Activity]:
    """Restore completion flags from persisted entries onto the canonical list.

    Canonical order and every field other than `completed` always come from
    the canonical definition. Persisted ids unknown to the canonical list are
    dropped. When an id is persisted more than once, the last entry wins.
    """
    flags = {entry.id: entry.completed for entry in persisted}
    return [
        act.model_copy(update={"completed": flags[act.id]}) if act.id in flags else act
        for act in canonical
    ]


def toggle_completed(activities: Sequence[Activity], activity_id: str) -> list[Activity]:
    """Return a new list with the matching activity's `completed` flipped.

    An unknown id returns an unchanged copy.
    """
    return [
        act.model_copy(update={"completed": not act.completed}) if act.id == activity_id else act
        for act in activities
    ]


class ActivityStore:
    """Owns the current activity list and keeps the persisted copy in sync.

    Every change replaces the list and bumps `version`, so readers can detect
    changes by comparing versions.
    """

    def __init__(
        self,
        canonical: Sequence[Activity],
        persistence: PersistenceAdapter,
        metrics: PrometheusEngineMetrics | None = None,
    ) -> None:
        self._canonical = list(canonical)
        self._persistence = persistence
        self._metrics = metrics or PrometheusEngineMetrics()
        self._activities: list[Activity] = list(self._canonical)
        self._version = 0

    @property
    def activities(self) -> list[Activity]:
        """Copy of the current list; changes go through `toggle` or `load`."""
        return list(self._activities)

    @property
    def version(self) -> int:
        return self._version

    def get(self, activity_id: str) -> Activity | None:
        """Get activity by id."""
        for act in self._activities:
            if act.id == activity_id:
                return act
        return None

    def load(self) -> list[Activity]:
        """Merge persisted completion flags onto the canonical itinerary."""
        persisted = self._persistence.load()
        self._replace(merge_with_persisted(self._canonical, persisted))
        restored = sum(1 for act in self._activities if act.completed)
        logger.info(f"[store] Loaded {len(self._activities)} activities, {restored} completed")
        return self.activities

    def toggle(self, activity_id: str) -> list[Activity]:
        """Flip completion for activity_id and persist the result."""
        if self.get(activity_id) is None:
            logger.debug(f"[store] Toggle ignored for unknown id={activity_id}")
            return self.activities

        self._replace(toggle_completed(self._activities, activity_id))
        self._metrics.inc_toggle()
        self._persistence.save(self._activities)
        return self.activities

    def _replace(self, activities: list[Activity]) -> None:
        self._activities = activities
        self._version += 1
