"""Engine exception types."""


class EngineError(Exception):
    """Base class for itinerary engine errors."""

    pass


class TimeFormatError(EngineError, ValueError):
    """A time-of-day string is not a valid 24-hour HH:MM value."""

    pass


class ItineraryError(EngineError, ValueError):
    """Canonical itinerary definition is malformed."""

    pass


class ItineraryOrderError(ItineraryError):
    """Canonical itinerary is not in chronological order."""

    pass


class NarrationUnavailableError(EngineError):
    """No speech engine is available to narrate."""

    pass
