"""Canonical itinerary loading from YAML fixtures."""

from pathlib import Path

import yaml

from daytrip.app.errors import ItineraryError
from daytrip.app.models.itinerary import Itinerary

FIXTURES_DIR = Path(__file__).parent.parent / "fixtures"
DEFAULT_ITINERARY = FIXTURES_DIR / "florence.yaml"


def load_canonical_itinerary(path: str | Path | None = None) -> Itinerary:
    """Load and validate the canonical itinerary.

    Args:
        path: YAML file holding a list of activities (bundled itinerary if None)

    Returns:
        Validated Itinerary with every `completed` flag at its authored default

    Raises:
        ItineraryError: If the file does not hold a list of activities
        pydantic.ValidationError: If any activity or the ordering is invalid
    """
    fixture_path = Path(path) if path is not None else DEFAULT_ITINERARY
    with open(fixture_path, encoding="utf-8") as f:
        data = yaml.safe_load(f)

    if not isinstance(data, list):
        raise ItineraryError(f"{fixture_path}: expected a list of activities")

    return Itinerary.model_validate(data)
