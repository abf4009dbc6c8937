"""Shared test fixtures for SolarCast engine and API tests."""

from __future__ import annotations

from datetime import datetime, timedelta

import pytest

from engine.weather.open_meteo import CurrentWeather


def _hourly_times(start: str, hours: int) -> list[str]:
    t0 = datetime.fromisoformat(start)
    return [(t0 + timedelta(hours=h)).strftime("%Y-%m-%dT%H:%M") for h in range(hours)]


# ======================================================================
# Open-Meteo payload fixtures
# ======================================================================

@pytest.fixture
def daytime_payload() -> dict:
    """Forecast payload at midday with positive current irradiance."""
    return {
        "latitude": 23.0,
        "longitude": 72.5,
        "timezone": "Asia/Kolkata",
        "current": {
            "time": "2024-06-21T12:00",
            "temperature_2m": 34.5,
            "relative_humidity_2m": 48.0,
            "surface_pressure": 1002.3,
            "cloudcover": 20.0,
            "shortwave_radiation": 650.0,
            "windspeed_10m": 11.2,
        },
        "hourly": {
            "time": _hourly_times("2024-06-21T00:00", 48),
            "shortwave_radiation": [0.0] * 48,
            "cloudcover": [50.0] * 48,
        },
    }


@pytest.fixture
def night_payload() -> dict:
    """Forecast payload at 22:00 with zero irradiance.

    Inside the 24 h lookahead (indices 22-45) the brightest hour is index
    36 (next day 12:00, 800 W/m2). Index 47 is brighter but out of range.
    """
    times = _hourly_times("2024-06-21T00:00", 48)
    swr = [0.0] * 48
    cloud = [60.0] * 48
    swr[30] = 300.0
    swr[36] = 800.0
    cloud[36] = 35.0
    swr[47] = 950.0

    return {
        "current": {
            "time": "2024-06-21T22:00",
            "temperature_2m": 27.0,
            "relative_humidity_2m": 70.0,
            "surface_pressure": 1004.0,
            "cloudcover": 80.0,
            "shortwave_radiation": 0.0,
            "windspeed_10m": 6.0,
        },
        "hourly": {
            "time": times,
            "shortwave_radiation": swr,
            "cloudcover": cloud,
        },
    }


# ======================================================================
# Normalized weather fixtures
# ======================================================================

@pytest.fixture
def clear_noon_weather() -> CurrentWeather:
    """Clear sky at STC temperature, March equinox solar noon."""
    return CurrentWeather(
        temperature=25.0,
        humidity=0.0,
        pressure=1013.0,
        cloud_cover=0.0,
        wind_speed=5.0,
        solar_irradiance=1000.0,
        timestamp="2024-03-21T12:00",
    )


@pytest.fixture
def equinox_noon() -> datetime:
    """Day 81: Cooper declination is zero."""
    return datetime(2024, 3, 21, 12, 0)
