"""Tests for itinerary models and canonical itinerary loading."""

from pathlib import Path

import pytest
from pydantic import ValidationError

from daytrip.app.adapters.fixtures import load_canonical_itinerary
from daytrip.app.errors import ItineraryError, ItineraryOrderError
from daytrip.app.models import Activity, Itinerary, validate_activities


def test_activity_defaults(make_activity) -> None:
    """Test optional fields and completion default."""
    act = make_activity("x", "09:00", "10:00")
    assert act.completed is False
    assert act.notes is None
    assert act.is_critical is False
    assert act.has_audio_guide is False
    assert act.has_booking is False
    assert act.has_maps_link is False
    assert act.spans_two_places is False


def test_activity_affordance_flags(make_activity) -> None:
    """Test presence of optional content gates affordances."""
    act = make_activity(
        "x",
        "09:00",
        "10:00",
        notes="CRITICAL",
        audio_guide_text="Texto",
        booking_url="https://example.com/tickets",
        google_maps_url="https://maps.google.com/?q=1,2",
        end_location_name="B",
        end_coords={"lat": 43.5, "lng": 10.3},
    )
    assert act.is_critical is True
    assert act.has_audio_guide is True
    assert act.has_booking is True
    assert act.has_maps_link is True
    assert act.spans_two_places is True


def test_unrecognized_note_is_not_critical(make_activity) -> None:
    act = make_activity("x", "09:00", "10:00", notes="critical-ish")
    assert act.is_critical is False


def test_activity_rejects_bad_time(make_activity) -> None:
    with pytest.raises(ValidationError):
        make_activity("x", "9:00", "10:00")


def test_activity_rejects_padded_time(make_activity) -> None:
    with pytest.raises(ValidationError):
        make_activity("x", " 09:00", "10:00")


def test_activity_requires_start_before_end(make_activity) -> None:
    with pytest.raises(ValidationError, match="must be before"):
        make_activity("x", "10:00", "10:00")


def test_activity_rejects_out_of_range_coords(make_activity) -> None:
    with pytest.raises(ValidationError):
        make_activity("x", "09:00", "10:00", coords={"lat": 91, "lng": 0})


def test_activity_is_immutable(make_activity) -> None:
    act = make_activity("x", "09:00", "10:00")
    with pytest.raises(ValidationError):
        act.completed = True  # type: ignore[misc]


class TestItineraryValidation:
    """Test load-time itinerary validation."""

    def test_valid_itinerary(self, canonical: list[Activity]) -> None:
        itinerary = Itinerary(canonical)
        assert len(itinerary) == 3
        assert [a.id for a in itinerary] == ["a", "b", "c"]
        assert itinerary[1].id == "b"

    def test_duplicate_ids_rejected(self, make_activity) -> None:
        acts = [make_activity("a", "09:00", "10:00"), make_activity("a", "11:00", "12:00")]
        with pytest.raises(ItineraryError, match="duplicate"):
            validate_activities(acts)
        with pytest.raises(ValidationError):
            Itinerary(acts)

    def test_out_of_order_rejected(self, make_activity) -> None:
        acts = [make_activity("a", "11:00", "12:00"), make_activity("b", "09:00", "10:00")]
        with pytest.raises(ItineraryOrderError):
            validate_activities(acts)
        with pytest.raises(ValidationError):
            Itinerary(acts)

    def test_equal_start_times_allowed(self, make_activity) -> None:
        acts = [make_activity("a", "09:00", "10:00"), make_activity("b", "09:00", "09:30")]
        validate_activities(acts)


class TestCanonicalFixture:
    """Test bundled itinerary loading."""

    def test_bundled_itinerary_loads(self) -> None:
        itinerary = load_canonical_itinerary()
        assert len(itinerary) > 0
        assert all(not act.completed for act in itinerary)
        assert any(act.is_critical for act in itinerary)
        assert any(act.has_audio_guide for act in itinerary)

    def test_custom_path(self, tmp_path: Path) -> None:
        path = tmp_path / "trip.yaml"
        path.write_text(
            "- id: one\n"
            '  start_time: "08:00"\n'
            '  end_time: "09:00"\n'
            "  title: One\n"
            "  location_name: Here\n"
            "  coords: {lat: 1.0, lng: 2.0}\n",
            encoding="utf-8",
        )
        itinerary = load_canonical_itinerary(path)
        assert [a.id for a in itinerary] == ["one"]

    def test_non_list_document_rejected(self, tmp_path: Path) -> None:
        path = tmp_path / "trip.yaml"
        path.write_text("id: one\n", encoding="utf-8")
        with pytest.raises(ItineraryError, match="expected a list"):
            load_canonical_itinerary(path)

    def test_out_of_order_fixture_fails_loudly(self, tmp_path: Path) -> None:
        path = tmp_path / "trip.yaml"
        path.write_text(
            "- {id: b, start_time: '10:00', end_time: '11:00', title: B, location_name: X,"
            " coords: {lat: 1, lng: 1}}\n"
            "- {id: a, start_time: '09:00', end_time: '09:30', title: A, location_name: X,"
            " coords: {lat: 1, lng: 1}}\n",
            encoding="utf-8",
        )
        with pytest.raises(ValidationError, match="before"):
            load_canonical_itinerary(path)
