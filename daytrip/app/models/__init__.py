"""Models package - re-exports for convenience."""

from daytrip.app.models.common import ActivityNote, Coordinates
from daytrip.app.models.itinerary import Activity, Itinerary, validate_activities
from daytrip.app.models.persisted import PersistedEntry, PersistedState, persisted_state_adapter

__all__ = [
    # Common
    "Coordinates",
    "ActivityNote",
    # Itinerary
    "Activity",
    "Itinerary",
    "validate_activities",
    # Persisted state
    "PersistedEntry",
    "PersistedState",
    "persisted_state_adapter",
]
