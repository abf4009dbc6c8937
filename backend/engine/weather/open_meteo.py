"""Open-Meteo client for current conditions with a daylight fallback.

The forecast endpoint returns both a ``current`` block and hourly series.
At night the current shortwave radiation is zero, which would make every
prediction zero; in that case the brightest hour of the next 24 hours is
used instead (together with its cloud cover and timestamp).
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any

import httpx

OPEN_METEO_URL = "https://api.open-meteo.com/v1/forecast"

CURRENT_FIELDS = [
    "temperature_2m",
    "relative_humidity_2m",
    "surface_pressure",
    "precipitation",
    "snowfall",
    "cloudcover",
    "cloudcover_high",
    "cloudcover_mid",
    "cloudcover_low",
    "shortwave_radiation",
    "windspeed_10m",
    "winddirection_10m",
    "windspeed_80m",
    "winddirection_80m",
]

HOURLY_FIELDS = ["shortwave_radiation", "cloudcover"]

# Hours scanned ahead of the current hour when irradiance is zero
LOOKAHEAD_HOURS = 24


class WeatherServiceError(Exception):
    """The weather API could not be reached or returned an unusable payload."""


@dataclass
class CurrentWeather:
    temperature: float | None
    humidity: float | None
    pressure: float | None
    cloud_cover: float
    wind_speed: float | None
    solar_irradiance: float
    timestamp: str
    raw: dict[str, Any] = field(default_factory=dict, repr=False)

    def to_dict(self) -> dict[str, float | None]:
        """Weather fields as stored alongside a prediction."""
        return {
            "temperature": self.temperature,
            "humidity": self.humidity,
            "pressure": self.pressure,
            "cloud_cover": self.cloud_cover,
            "wind_speed": self.wind_speed,
            "solar_irradiance": self.solar_irradiance,
        }


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _section(payload: dict[str, Any], key: str) -> dict[str, Any]:
    """A nested object of the payload, or an empty dict if absent or malformed."""
    value = payload.get(key)
    return value if isinstance(value, dict) else {}


def _number_or_none(value: Any) -> float | None:
    return float(value) if _is_number(value) else None


def build_query_params(lat: float, lon: float) -> dict[str, str]:
    """Query string for the forecast endpoint."""
    return {
        "latitude": str(lat),
        "longitude": str(lon),
        "current": ",".join(CURRENT_FIELDS),
        "hourly": ",".join(HOURLY_FIELDS),
        "timezone": "auto",
    }


def _daylight_fallback(
    payload: dict[str, Any],
) -> tuple[float, str, float | None] | None:
    """Brightest hour within the lookahead window, or None if all dark.

    Returns (irradiance, timestamp, cloud_cover_or_None).
    """
    hourly = _section(payload, "hourly")
    hours = hourly.get("time")
    swr = hourly.get("shortwave_radiation")
    cc = hourly.get("cloudcover")

    if not hours or not swr or len(swr) != len(hours):
        return None

    current_time = _section(payload, "current").get("time")
    try:
        start = hours.index(current_time)
    except ValueError:
        start = 0
    end = min(len(swr), start + LOOKAHEAD_HOURS)

    max_idx = start
    max_val = -math.inf
    for i in range(start, end):
        if _is_number(swr[i]) and swr[i] > max_val:
            max_val = swr[i]
            max_idx = i

    if not math.isfinite(max_val) or max_val <= 0:
        return None

    cloud = None
    if cc and max_idx < len(cc) and _is_number(cc[max_idx]):
        cloud = float(cc[max_idx])
    return float(max_val), hours[max_idx], cloud


def normalize_weather(
    payload: dict[str, Any],
    now: datetime | None = None,
) -> CurrentWeather:
    """Flatten an Open-Meteo forecast payload into :class:`CurrentWeather`.

    Parameters
    ----------
    payload : dict
        Decoded JSON body of the forecast endpoint.
    now : datetime, optional
        Used as the timestamp when the payload carries none.
    """
    current = _section(payload, "current")

    irradiance = _number_or_none(current.get("shortwave_radiation"))
    timestamp = current.get("time")
    cloud_cover = _number_or_none(current.get("cloudcover"))

    if irradiance is None or irradiance <= 0:
        fallback = _daylight_fallback(payload)
        if fallback is not None:
            irradiance, fb_time, fb_cloud = fallback
            timestamp = fb_time or timestamp
            if fb_cloud is not None:
                cloud_cover = fb_cloud

    if cloud_cover is None:
        cloud_cover = 0.0
    if not timestamp:
        timestamp = (now or datetime.now(timezone.utc)).isoformat()

    return CurrentWeather(
        temperature=_number_or_none(current.get("temperature_2m")),
        humidity=_number_or_none(current.get("relative_humidity_2m")),
        pressure=_number_or_none(current.get("surface_pressure")),
        cloud_cover=cloud_cover,
        wind_speed=_number_or_none(current.get("windspeed_10m")),
        solar_irradiance=irradiance if irradiance is not None else 0.0,
        timestamp=str(timestamp),
        raw=payload,
    )


async def fetch_current_weather(
    lat: float,
    lon: float,
    client: httpx.AsyncClient | None = None,
    base_url: str = OPEN_METEO_URL,
    timeout: float = 30.0,
) -> CurrentWeather:
    """Fetch and normalize current weather for a coordinate.

    Raises
    ------
    WeatherServiceError
        On transport errors, non-2xx responses or a non-object body.
    """
    params = build_query_params(lat, lon)

    try:
        if client is None:
            async with httpx.AsyncClient(timeout=timeout) as own_client:
                response = await own_client.get(base_url, params=params)
        else:
            response = await client.get(base_url, params=params)
        response.raise_for_status()
        payload = response.json()
    except (httpx.HTTPError, ValueError) as exc:
        raise WeatherServiceError(f"Open-Meteo request failed: {exc}") from exc

    if not isinstance(payload, dict):
        raise WeatherServiceError("Open-Meteo returned a non-object payload")

    return normalize_weather(payload)
