"""Shared pytest fixtures for all test suites."""

from collections.abc import Callable
from typing import Any

import pytest

from daytrip.app.db.inmemory import InMemoryKeyValueStore
from daytrip.app.db.persistence import PersistenceAdapter
from daytrip.app.models import Activity, Coordinates

STORAGE_KEY = "test_storage"


class FakeSpeechEngine:
    """Speech engine double that records calls and finishes on demand."""

    def __init__(self) -> None:
        self.spoken: list[tuple[str, str, float]] = []
        self.cancel_calls = 0
        self._pending: list[Callable[[], None]] = []

    def speak(self, text: str, lang: str, rate: float, on_end: Callable[[], None]) -> None:
        self.spoken.append((text, lang, rate))
        self._pending.append(on_end)

    def cancel(self) -> None:
        self.cancel_calls += 1

    def finish(self, index: int = -1) -> None:
        """Fire the natural-completion callback of a previous utterance."""
        self._pending[index]()


class FakePositionSource:
    """Position source double with manual sample delivery."""

    def __init__(self, fail_on_watch: Exception | None = None) -> None:
        self.fail_on_watch = fail_on_watch
        self.cleared: list[Any] = []
        self._on_position: Callable[[Coordinates], None] | None = None
        self._on_error: Callable[[Exception], None] | None = None

    def watch(
        self,
        on_position: Callable[[Coordinates], None],
        on_error: Callable[[Exception], None],
    ) -> Any:
        if self.fail_on_watch is not None:
            raise self.fail_on_watch
        self._on_position = on_position
        self._on_error = on_error
        return "watch-1"

    def clear_watch(self, handle: Any) -> None:
        self.cleared.append(handle)

    def emit(self, lat: float, lng: float) -> None:
        assert self._on_position is not None
        self._on_position(Coordinates(lat=lat, lng=lng))

    def fail(self, error: Exception) -> None:
        assert self._on_error is not None
        self._on_error(error)


def build_activity(
    activity_id: str,
    start: str,
    end: str,
    **overrides: Any,
) -> Activity:
    """Build an Activity with sensible defaults for tests."""
    data: dict[str, Any] = {
        "id": activity_id,
        "start_time": start,
        "end_time": end,
        "title": f"Activity {activity_id}",
        "location_name": "Somewhere",
        "coords": {"lat": 43.77, "lng": 11.25},
    }
    data.update(overrides)
    return Activity.model_validate(data)


@pytest.fixture
def canonical() -> list[Activity]:
    """Small chronological itinerary with one critical and one narrated activity."""
    return [
        build_activity("a", "09:00", "10:30", audio_guide_text="Historia del Duomo."),
        build_activity("b", "10:45", "12:00", notes="CRITICAL"),
        build_activity("c", "12:25", "13:00"),
    ]


@pytest.fixture
def make_activity() -> Callable[..., Activity]:
    """Factory fixture for ad-hoc activities."""
    return build_activity


@pytest.fixture
def kv_store() -> InMemoryKeyValueStore:
    return InMemoryKeyValueStore()


@pytest.fixture
def persistence(kv_store: InMemoryKeyValueStore) -> PersistenceAdapter:
    return PersistenceAdapter(kv_store, STORAGE_KEY)


@pytest.fixture
def speech_engine() -> FakeSpeechEngine:
    return FakeSpeechEngine()


@pytest.fixture
def position_source() -> FakePositionSource:
    return FakePositionSource()
