"""Itinerary models - canonical activities for a single day."""

from collections.abc import Iterator, Sequence

from pydantic import BaseModel, ConfigDict, RootModel, field_validator, model_validator

from daytrip.app.errors import ItineraryError, ItineraryOrderError
from daytrip.app.models.common import ActivityNote, Coordinates
from daytrip.app.utils.timemath import parse_hhmm


class Activity(BaseModel):
    """Single time-boxed activity in the day.

    Only `completed` changes after authoring, and only through
    `model_copy(update=...)`; instances themselves are immutable.
    """

    model_config = ConfigDict(frozen=True)

    id: str
    start_time: str
    end_time: str
    title: str
    location_name: str
    coords: Coordinates
    end_location_name: str | None = None
    end_coords: Coordinates | None = None
    description: str = ""
    key_details: str = ""
    notes: str | None = None
    contingency_note: str | None = None
    booking_url: str | None = None
    google_maps_url: str | None = None
    audio_guide_text: str | None = None
    completed: bool = False

    @field_validator("start_time", "end_time")
    @classmethod
    def validate_hhmm(cls, v: str) -> str:
        """Ensure times are 24-hour HH:MM strings."""
        parse_hhmm(v)
        return v

    @model_validator(mode="after")
    def validate_window(self) -> "Activity":
        """Ensure the activity starts before it ends."""
        if parse_hhmm(self.start_time) >= parse_hhmm(self.end_time):
            raise ValueError(
                f"activity {self.id}: start_time {self.start_time} must be before "
                f"end_time {self.end_time}"
            )
        return self

    @property
    def is_critical(self) -> bool:
        return self.notes == ActivityNote.CRITICAL.value

    @property
    def has_audio_guide(self) -> bool:
        return bool(self.audio_guide_text)

    @property
    def has_booking(self) -> bool:
        return bool(self.booking_url)

    @property
    def has_maps_link(self) -> bool:
        return bool(self.google_maps_url)

    @property
    def spans_two_places(self) -> bool:
        return self.end_coords is not None


class Itinerary(RootModel[list[Activity]]):
    """Canonical ordered list of activities.

    Array order is the chronological order. Ids must be unique and start
    times non-decreasing; violations are configuration errors.
    """

    @model_validator(mode="after")
    def validate_itinerary(self) -> "Itinerary":
        """Validate unique ids and chronological order."""
        validate_activities(self.root)
        return self

    def __iter__(self) -> Iterator[Activity]:  # type: ignore[override]
        return iter(self.root)

    def __len__(self) -> int:
        return len(self.root)

    def __getitem__(self, index: int) -> Activity:
        return self.root[index]

    @property
    def activities(self) -> list[Activity]:
        return list(self.root)


def validate_activities(activities: Sequence[Activity]) -> None:
    """Check id uniqueness and non-decreasing start times.

    Raises:
        ItineraryError: On duplicate ids
        ItineraryOrderError: When an activity starts before its predecessor
    """
    seen: set[str] = set()
    for act in activities:
        if act.id in seen:
            raise ItineraryError(f"duplicate activity id: {act.id}")
        seen.add(act.id)

    for prev, nxt in zip(activities, activities[1:]):
        if parse_hhmm(nxt.start_time) < parse_hhmm(prev.start_time):
            raise ItineraryOrderError(
                f"activity {nxt.id} starts at {nxt.start_time}, before "
                f"{prev.id} at {prev.start_time}"
            )
