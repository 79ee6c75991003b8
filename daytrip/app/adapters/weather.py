"""Weather adapter using Open-Meteo API (keyless, free tier).

Feeds the guide panel only; failures are logged and reported as None.
"""

import logging
from datetime import date, datetime
from typing import Any

import httpx
from pydantic import BaseModel

from daytrip.app.models.common import Coordinates

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://api.open-meteo.com/v1/forecast"

_FETCH_ERRORS = (httpx.HTTPError, KeyError, IndexError, TypeError, ValueError)


class HourlyForecast(BaseModel):
    """Forecast for one hour."""

    time: datetime
    temperature_c: float | None
    weather_code: int | None


class DailyForecast(BaseModel):
    """Forecast for one day."""

    day: date
    weather_code: int | None
    temperature_max_c: float | None
    temperature_min_c: float | None


class GuideForecast(BaseModel):
    """Everything the guide panel shows: today's daytime hours and the next days."""

    hourly: list[HourlyForecast]
    daily: list[DailyForecast]


def _parse_hourly(hourly: dict[str, Any], first_hour: int, last_hour: int) -> list[HourlyForecast]:
    forecasts = []
    for i, ts in enumerate(hourly["time"]):
        moment = datetime.fromisoformat(ts)
        if not first_hour <= moment.hour <= last_hour:
            continue
        forecasts.append(
            HourlyForecast(
                time=moment,
                temperature_c=hourly["temperature_2m"][i],
                weather_code=hourly["weathercode"][i],
            )
        )
    return forecasts


def _parse_daily(daily: dict[str, Any], days: int) -> list[DailyForecast]:
    return [
        DailyForecast(
            day=date.fromisoformat(day),
            weather_code=daily["weathercode"][i],
            temperature_max_c=daily["temperature_2m_max"][i],
            temperature_min_c=daily["temperature_2m_min"][i],
        )
        for i, day in enumerate(daily["time"][:days])
    ]


async def _get_json(
    base_url: str, params: dict[str, str | float], client: httpx.AsyncClient | None
) -> Any:
    close_client = False
    if client is None:
        client = httpx.AsyncClient(timeout=4.0)
        close_client = True

    try:
        response = await client.get(base_url, params=params)
        response.raise_for_status()
        return response.json()
    finally:
        if close_client:
            await client.aclose()


async def fetch_hourly_forecast(
    location: Coordinates,
    timezone: str = "Europe/Rome",
    first_hour: int = 8,
    last_hour: int = 20,
    base_url: str = DEFAULT_BASE_URL,
    client: httpx.AsyncClient | None = None,
) -> list[HourlyForecast] | None:
    """Fetch hourly forecast from Open-Meteo, keeping daytime hours only.

    Args:
        location: Geographic coordinates
        timezone: IANA timezone for the returned local times
        first_hour: First hour of day to keep (inclusive)
        last_hour: Last hour of day to keep (inclusive)
        base_url: Open-Meteo API base URL
        client: Optional httpx client (for testing with mocks)

    Returns:
        Hourly forecasts, or None if the fetch or parse failed
    """
    # Docs: https://open-meteo.com/en/docs
    params: dict[str, str | float] = {
        "latitude": location.lat,
        "longitude": location.lng,
        "hourly": "temperature_2m,weathercode",
        "timezone": timezone,
    }

    try:
        data = await _get_json(base_url, params, client)
        return _parse_hourly(data["hourly"], first_hour, last_hour)
    except _FETCH_ERRORS as e:
        logger.warning(f"[weather] Forecast unavailable: {e}")
        return None


async def fetch_guide_forecast(
    location: Coordinates,
    timezone: str = "Europe/Rome",
    days: int = 5,
    first_hour: int = 8,
    last_hour: int = 20,
    base_url: str = DEFAULT_BASE_URL,
    client: httpx.AsyncClient | None = None,
) -> GuideForecast | None:
    """Fetch hourly and daily forecast in one Open-Meteo request.

    Returns:
        Daytime hours plus the first `days` days, or None if the fetch or
        parse failed
    """
    params: dict[str, str | float] = {
        "latitude": location.lat,
        "longitude": location.lng,
        "hourly": "temperature_2m,weathercode",
        "daily": "weathercode,temperature_2m_max,temperature_2m_min",
        "timezone": timezone,
    }

    try:
        data = await _get_json(base_url, params, client)
        return GuideForecast(
            hourly=_parse_hourly(data["hourly"], first_hour, last_hour),
            daily=_parse_daily(data["daily"], days),
        )
    except _FETCH_ERRORS as e:
        logger.warning(f"[weather] Guide forecast unavailable: {e}")
        return None
