"""Engine wiring - builds the shared state and its periodic services."""

import logging
from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime

import httpx

from daytrip.app.adapters.fixtures import load_canonical_itinerary
from daytrip.app.adapters.weather import GuideForecast, fetch_guide_forecast
from daytrip.app.config import Settings, get_settings
from daytrip.app.db.factory import build_store
from daytrip.app.db.persistence import PersistenceAdapter
from daytrip.app.db.repositories import KeyValueStore
from daytrip.app.engine.countdown import CountdownService
from daytrip.app.engine.geolocation import LocationTracker, PositionSource
from daytrip.app.engine.narration import (
    AudioGuideSession,
    NarrationCoordinator,
    PhrasePlayer,
    SpeechEngine,
)
from daytrip.app.engine.state import AppState
from daytrip.app.engine.store import ActivityStore
from daytrip.app.engine.timeline import TimelineCoordinator
from daytrip.app.features.sos import build_sos_link
from daytrip.app.models.common import Coordinates

logger = logging.getLogger(__name__)


@dataclass
class TripEngine:
    """All engine components for one running app."""

    settings: Settings
    state: AppState
    timeline: TimelineCoordinator
    countdown: CountdownService
    narration: NarrationCoordinator
    audio_guide: AudioGuideSession
    phrases: PhrasePlayer
    location: LocationTracker

    def start(self) -> None:
        """Start periodic ticks and the location subscription.

        Must be called from a running event loop.
        """
        self.timeline.start()
        self.countdown.start()
        self.location.start()
        logger.info("[engine] Started")

    async def stop(self) -> None:
        """Tear down ticks, location subscription and narration."""
        self.location.stop()
        self.audio_guide.close()
        self.narration.cancel()
        await self.timeline.stop()
        await self.countdown.stop()
        logger.info("[engine] Stopped")

    def sos_link(self) -> str:
        """Share link for a help message carrying the last known position."""
        return build_sos_link(
            self.state.user_location,
            base_url=self.settings.sos_share_base_url,
            city=self.settings.sos_city,
        )

    async def fetch_forecast(self, client: httpx.AsyncClient | None = None) -> GuideForecast | None:
        """Guide-panel forecast for the configured city; None when unavailable."""
        return await fetch_guide_forecast(
            Coordinates(lat=self.settings.weather_lat, lng=self.settings.weather_lon),
            timezone=self.settings.weather_timezone,
            days=self.settings.weather_days,
            base_url=self.settings.weather_base_url,
            client=client,
        )


def build_engine(
    settings: Settings | None = None,
    *,
    store: KeyValueStore | None = None,
    speech_engine: SpeechEngine | None = None,
    position_source: PositionSource | None = None,
    clock: Callable[[], datetime] = datetime.now,
) -> TripEngine:
    """Wire the engine from settings.

    Loads the canonical itinerary and merges persisted completion flags
    before returning.
    """
    settings = settings or get_settings()

    canonical = load_canonical_itinerary(settings.itinerary_path)
    persistence = PersistenceAdapter(store or build_store(settings), settings.storage_key)
    activity_store = ActivityStore(canonical.activities, persistence)
    activity_store.load()

    state = AppState(activity_store)
    timeline = TimelineCoordinator(
        activities=lambda: state.itinerary,
        version=lambda: state.version,
        clock=clock,
        tick_seconds=settings.timeline_tick_seconds,
        free_walk_threshold_min=settings.free_walk_threshold_min,
    )
    countdown = CountdownService(
        settings.deadline,
        reached_label=settings.deadline_reached_label,
        clock=clock,
        tick_seconds=settings.countdown_tick_seconds,
    )
    narration = NarrationCoordinator(speech_engine)

    return TripEngine(
        settings=settings,
        state=state,
        timeline=timeline,
        countdown=countdown,
        narration=narration,
        audio_guide=AudioGuideSession(narration, settings.narration_lang, settings.narration_rate),
        phrases=PhrasePlayer(narration, settings.phrase_lang, settings.phrase_rate),
        location=LocationTracker(position_source, state),
    )
