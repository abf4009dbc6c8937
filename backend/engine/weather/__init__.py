"""Weather data module (Open-Meteo current conditions)."""

from .open_meteo import (
    CurrentWeather,
    WeatherServiceError,
    build_query_params,
    fetch_current_weather,
    normalize_weather,
)

__all__ = [
    "CurrentWeather",
    "WeatherServiceError",
    "build_query_params",
    "fetch_current_weather",
    "normalize_weather",
]
