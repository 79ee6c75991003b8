"""Typed settings configuration - single source of truth."""

from functools import lru_cache
from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="DAYTRIP_", env_file=".env", env_file_encoding="utf-8", extra="ignore"
    )

    # Persistence
    storage_backend: Literal["memory", "file", "redis"] = "memory"
    storage_key: str = "florence_guide_v1_storage"
    storage_path: str = ".daytrip/storage.json"
    redis_url: str | None = None

    # Canonical itinerary (bundled fixture when unset)
    itinerary_path: str | None = None

    # Countdown
    deadline: str = "16:48"
    deadline_reached_label: str = "¡A BORDO!"

    # Tick periods (seconds)
    timeline_tick_seconds: float = 60
    countdown_tick_seconds: float = 1

    # Narration
    narration_lang: str = "es-ES"
    narration_rate: float = 0.95
    phrase_lang: str = "it-IT"
    phrase_rate: float = 0.85

    # Gaps longer than this (minutes) are labelled as free time
    free_walk_threshold_min: int = 30

    # Weather (open-meteo, keyless)
    weather_base_url: str = "https://api.open-meteo.com/v1/forecast"
    weather_lat: float = 43.77
    weather_lon: float = 11.25
    weather_timezone: str = "Europe/Rome"
    weather_days: int = 5

    # SOS sharing
    sos_share_base_url: str = "https://wa.me/"
    sos_city: str = "Florencia"


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
