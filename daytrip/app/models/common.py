"""Common types and enums shared across all models."""

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class Coordinates(BaseModel):
    """Geographic coordinates (WGS84)."""

    model_config = ConfigDict(frozen=True)

    lat: float = Field(..., ge=-90, le=90)
    lng: float = Field(..., ge=-180, le=180)


class ActivityNote(str, Enum):
    """Recognized activity classification tags."""

    CRITICAL = "CRITICAL"
