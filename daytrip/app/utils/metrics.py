"""Prometheus metrics for engine side effects."""

from prometheus_client import Counter

itinerary_toggles_total = Counter(
    "itinerary_toggles_total",
    "Total completion toggles applied to the itinerary",
)

persistence_failures_total = Counter(
    "persistence_failures_total",
    "Total persisted-state read/write failures",
    ["op"],
)

narration_requests_total = Counter(
    "narration_requests_total",
    "Total narration requests issued to the speech engine",
    ["channel"],
)

geolocation_errors_total = Counter(
    "geolocation_errors_total",
    "Total geolocation errors reported by the position source",
)


class PrometheusEngineMetrics:
    """Prometheus-based engine metrics implementation."""

    def inc_toggle(self) -> None:
        """Increment toggle counter."""
        itinerary_toggles_total.inc()

    def inc_persistence_failure(self, op: str) -> None:
        """Increment persistence failure counter."""
        persistence_failures_total.labels(op=op).inc()

    def inc_narration(self, channel: str) -> None:
        """Increment narration request counter."""
        narration_requests_total.labels(channel=channel).inc()

    def inc_geolocation_error(self) -> None:
        """Increment geolocation error counter."""
        geolocation_errors_total.inc()
