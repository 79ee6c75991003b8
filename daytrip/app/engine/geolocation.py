"""Live user position tracking."""

import logging
from collections.abc import Callable
from typing import Any, Protocol

from daytrip.app.engine.state import AppState
from daytrip.app.models.common import Coordinates
from daytrip.app.utils.metrics import PrometheusEngineMetrics

logger = logging.getLogger(__name__)


class PositionSource(Protocol):
    """Geolocation collaborator delivering a continuous stream of samples."""

    def watch(
        self,
        on_position: Callable[[Coordinates], None],
        on_error: Callable[[Exception], None],
    ) -> Any:
        """Start delivering samples; return a handle for clear_watch."""
        ...

    def clear_watch(self, handle: Any) -> None:
        """Stop delivering samples for handle."""
        ...


class LocationTracker:
    """Keeps AppState.user_location in step with a position source.

    Each sample overwrites the previous one; no history is kept. Errors
    (permission denied, unavailable) degrade to "no location".
    """

    def __init__(
        self,
        source: PositionSource | None,
        state: AppState,
        metrics: PrometheusEngineMetrics | None = None,
    ) -> None:
        self._source = source
        self._state = state
        self._metrics = metrics or PrometheusEngineMetrics()
        self._handle: Any = None
        self._watching = False

    @property
    def watching(self) -> bool:
        return self._watching

    def start(self) -> None:
        """Subscribe to the position source."""
        if self._watching:
            return
        if self._source is None:
            logger.info("[geolocation] No position source available, location disabled")
            return
        self._watching = True
        try:
            self._handle = self._source.watch(self._on_position, self._on_error)
        except Exception as e:
            self._watching = False
            self._degrade(e)

    def stop(self) -> None:
        """Cancel the subscription."""
        if not self._watching or self._source is None:
            return
        handle, self._handle = self._handle, None
        self._watching = False
        try:
            self._source.clear_watch(handle)
        except Exception as e:
            logger.warning(f"[geolocation] clear_watch failed: {e}")

    def __enter__(self) -> "LocationTracker":
        self.start()
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.stop()

    def _on_position(self, coords: Coordinates) -> None:
        if not self._watching:
            return
        self._state.set_user_location(coords)

    def _on_error(self, error: Exception) -> None:
        if not self._watching:
            return
        self._degrade(error)

    def _degrade(self, error: Exception) -> None:
        self._metrics.inc_geolocation_error()
        logger.warning(f"[geolocation] Location unavailable: {error}")
        self._state.set_user_location(None)
