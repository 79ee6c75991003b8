"""Shared app state - the single owned container views read and mutate."""

import logging
from dataclasses import dataclass
from enum import Enum

from daytrip.app.engine.store import ActivityStore
from daytrip.app.models.common import Coordinates
from daytrip.app.models.itinerary import Activity

logger = logging.getLogger(__name__)


class AppTab(str, Enum):
    """Top-level navigation tabs."""

    TIMELINE = "timeline"
    MAP = "map"
    BUDGET = "budget"
    GUIDE = "guide"


@dataclass(frozen=True)
class MapMarker:
    """Activity anchor on the map; transfers also carry their end point."""

    activity_id: str
    title: str
    coords: Coordinates
    end_coords: Coordinates | None
    completed: bool


@dataclass(frozen=True)
class MapView:
    """Read-only input for the map collaborator."""

    markers: list[MapMarker]
    focus: Coordinates | None
    user_position: Coordinates | None


class AppState:
    """Itinerary, navigation and location state with explicit mutation entry points."""

    def __init__(self, store: ActivityStore, initial_tab: AppTab = AppTab.TIMELINE) -> None:
        self._store = store
        self.active_tab = initial_tab
        self.map_focus: Coordinates | None = None
        self.user_location: Coordinates | None = None

    @property
    def store(self) -> ActivityStore:
        return self._store

    @property
    def itinerary(self) -> list[Activity]:
        return self._store.activities

    @property
    def version(self) -> int:
        return self._store.version

    def toggle(self, activity_id: str) -> list[Activity]:
        """Flip completion for an activity (persisted immediately)."""
        return self._store.toggle(activity_id)

    def set_tab(self, tab: AppTab) -> None:
        """Switch the active tab."""
        self.active_tab = tab

    def locate(self, coords: Coordinates) -> None:
        """Focus the map on coords and switch to the map tab."""
        self.map_focus = coords
        self.active_tab = AppTab.MAP

    def locate_activity(self, activity_id: str) -> bool:
        """Focus the map on an activity's anchor."""
        act = self._store.get(activity_id)
        if act is None:
            return False
        self.locate(act.coords)
        return True

    def set_user_location(self, coords: Coordinates | None) -> None:
        """Overwrite the live position sample (None means no location)."""
        self.user_location = coords

    def map_view(self) -> MapView:
        """Build the map collaborator's input from current state."""
        markers = [
            MapMarker(
                activity_id=act.id,
                title=act.title,
                coords=act.coords,
                end_coords=act.end_coords,
                completed=act.completed,
            )
            for act in self._store.activities
        ]
        return MapView(markers=markers, focus=self.map_focus, user_position=self.user_location)
