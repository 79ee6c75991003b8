"""Timeline coordinator - derived, render-ready view of the itinerary.

Progress values are a pure function of the activity list and a clock sample.
The coordinator caches the last computed view and refreshes it on a fixed
tick, or immediately when the itinerary version changes.
"""

import logging
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from datetime import datetime
from enum import Enum

from daytrip.app.engine.ticker import PeriodicTicker
from daytrip.app.models.itinerary import Activity
from daytrip.app.utils.timemath import (
    duration,
    format_minutes,
    gap,
    minute_of_day,
    parse_hhmm,
    time_progress,
)

logger = logging.getLogger(__name__)

WALK_LABEL = "Caminata"
FREE_TIME_LABEL = "Paseo Libre"


class ActivityStatus(str, Enum):
    """Visual classification of an activity."""

    COMPLETED = "completed"
    CRITICAL = "critical"
    NORMAL = "normal"


def classify(activity: Activity) -> ActivityStatus:
    """Completed takes precedence over critical, critical over normal."""
    if activity.completed:
        return ActivityStatus.COMPLETED
    if activity.is_critical:
        return ActivityStatus.CRITICAL
    return ActivityStatus.NORMAL


@dataclass(frozen=True)
class ActivityView:
    """Render model for one activity."""

    activity: Activity
    progress: int
    status: ActivityStatus
    duration_label: str


@dataclass(frozen=True)
class GapView:
    """Render model for the idle interval between two adjacent activities."""

    after_id: str
    before_id: str
    minutes: int
    progress: int
    label: str

    @property
    def visible(self) -> bool:
        return self.minutes > 0


@dataclass(frozen=True)
class TimelineView:
    """Full derived view for one clock sample."""

    computed_at: datetime
    activities: list[ActivityView]
    gaps: list[GapView]

    def gap_before(self, activity_id: str) -> GapView | None:
        """Gap leading into activity_id, if it has a predecessor."""
        for g in self.gaps:
            if g.before_id == activity_id:
                return g
        return None


def gap_label(minutes: int, free_walk_threshold_min: int = 30) -> str:
    """Label for a gap, e.g. "25m - Caminata" or "1h 0m - Paseo Libre"."""
    kind = FREE_TIME_LABEL if minutes > free_walk_threshold_min else WALK_LABEL
    return f"{format_minutes(minutes)} - {kind}"


def build_timeline_view(
    activities: Sequence[Activity],
    now: datetime,
    free_walk_threshold_min: int = 30,
) -> TimelineView:
    """Compute per-activity progress/status and per-gap length/progress."""
    activity_views = [
        ActivityView(
            activity=act,
            progress=time_progress(act.start_time, act.end_time, now),
            status=classify(act),
            duration_label=duration(act.start_time, act.end_time),
        )
        for act in activities
    ]

    gap_views = []
    for prev, nxt in zip(activities, activities[1:]):
        minutes = gap(prev.end_time, nxt.start_time)
        gap_views.append(
            GapView(
                after_id=prev.id,
                before_id=nxt.id,
                minutes=minutes,
                # Overlapping pairs have no gap to progress through
                progress=time_progress(prev.end_time, nxt.start_time, now) if minutes > 0 else 0,
                label=gap_label(minutes, free_walk_threshold_min),
            )
        )

    return TimelineView(computed_at=now, activities=activity_views, gaps=gap_views)


def current_activity(activities: Sequence[Activity], now: datetime) -> Activity | None:
    """Activity whose window contains now, if any (first match wins)."""
    current = minute_of_day(now)
    for act in activities:
        if parse_hhmm(act.start_time) <= current < parse_hhmm(act.end_time):
            return act
    return None


def next_activity(activities: Sequence[Activity], now: datetime) -> Activity | None:
    """First activity that has not started yet."""
    current = minute_of_day(now)
    for act in activities:
        if parse_hhmm(act.start_time) > current:
            return act
    return None


class TimelineCoordinator:
    """Keeps a fresh TimelineView for the shared app state."""

    def __init__(
        self,
        activities: Callable[[], Sequence[Activity]],
        version: Callable[[], int],
        clock: Callable[[], datetime] = datetime.now,
        tick_seconds: float = 60,
        free_walk_threshold_min: int = 30,
    ) -> None:
        """Initialize coordinator.

        Args:
            activities: Returns the current activity list
            version: Returns the current itinerary version
            clock: Wall-clock sampler (local time)
            tick_seconds: Recompute period
            free_walk_threshold_min: Gap label threshold in minutes
        """
        self._activities = activities
        self._version = version
        self._clock = clock
        self._free_walk_threshold_min = free_walk_threshold_min
        self._view: TimelineView | None = None
        self._view_version: int | None = None
        self._listeners: list[Callable[[TimelineView], None]] = []
        self._ticker = PeriodicTicker(tick_seconds, self.recompute, name="timeline-tick")

    @property
    def view(self) -> TimelineView:
        """Last computed view, recomputed first if the itinerary changed."""
        if self._view is None or self._view_version != self._version():
            return self.recompute()
        return self._view

    @property
    def running(self) -> bool:
        return self._ticker.running

    def subscribe(self, listener: Callable[[TimelineView], None]) -> Callable[[], None]:
        """Register a listener called with every recomputed view.

        Returns:
            Callable that removes the listener
        """
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def recompute(self) -> TimelineView:
        """Sample the clock and rebuild the view."""
        version = self._version()
        view = build_timeline_view(self._activities(), self._clock(), self._free_walk_threshold_min)
        self._view = view
        self._view_version = version
        for listener in list(self._listeners):
            listener(view)
        return view

    def start(self) -> None:
        """Start the periodic recompute tick."""
        self._ticker.start()

    async def stop(self) -> None:
        """Stop the periodic recompute tick."""
        await self._ticker.stop()
