import logging
from dataclasses import dataclass
from datetime import datetime, timezone

from app.config import settings
from app.schemas.optimization import OptimizationRequest
from app.schemas.prediction import PredictionRequest
from engine.solar.geometry import SolarGeometry, calculate_solar_geometry
from engine.solar.optimizer import AngleGrid, OptimizationResult, optimize_orientation
from engine.solar.power_model import (
    PredictionFeatures,
    apply_calibration,
    effective_calibration_factor,
    predict_power_output,
)
from engine.weather.open_meteo import CurrentWeather, fetch_current_weather

logger = logging.getLogger(__name__)


@dataclass
class PredictionOutcome:
    weather: CurrentWeather
    geometry: SolarGeometry
    raw_power_kw: float
    predicted_power_kw: float
    calibration_factor: float


async def get_current_weather(lat: float, lon: float) -> CurrentWeather:
    """Current conditions for a site, from the configured Open-Meteo endpoint."""
    return await fetch_current_weather(
        lat,
        lon,
        base_url=settings.open_meteo_base_url,
        timeout=settings.weather_timeout_seconds,
    )


def observation_time(weather: CurrentWeather) -> datetime:
    """Parse the weather timestamp; fall back to now when unparseable.

    Open-Meteo reports local site time when called with ``timezone=auto``,
    which is what the clock-hour based hour angle expects.
    """
    try:
        return datetime.fromisoformat(weather.timestamp)
    except ValueError:
        logger.warning("Unparseable weather timestamp %r, using current UTC time", weather.timestamp)
        return datetime.now(timezone.utc)


def build_features(
    weather: CurrentWeather, geometry: SolarGeometry, capacity_kw: float
) -> PredictionFeatures:
    return PredictionFeatures(
        temperature=weather.temperature,
        humidity=weather.humidity,
        solar_irradiance=weather.solar_irradiance,
        cloud_cover=weather.cloud_cover,
        zenith=geometry.zenith,
        angle_of_incidence=geometry.angle_of_incidence,
        system_capacity_kw=capacity_kw,
        pressure=weather.pressure,
        wind_speed=weather.wind_speed,
    )


async def run_prediction(body: PredictionRequest) -> PredictionOutcome:
    """Fetch weather and evaluate the power model for one orientation."""
    weather = await get_current_weather(body.latitude, body.longitude)
    geometry = calculate_solar_geometry(
        body.latitude, body.longitude, body.tilt, body.azimuth, observation_time(weather)
    )

    raw = predict_power_output(
        build_features(weather, geometry, body.system_capacity_kw),
        body.calculation_mode,
    )
    predicted = apply_calibration(raw, body.calibration_factor)

    logger.info(
        "Predicted %.3f kW (%s) at irradiance %.1f W/m2",
        predicted,
        body.calculation_mode,
        weather.solar_irradiance,
        extra={"latitude": body.latitude, "longitude": body.longitude},
    )
    return PredictionOutcome(
        weather=weather,
        geometry=geometry,
        raw_power_kw=raw,
        predicted_power_kw=predicted,
        calibration_factor=effective_calibration_factor(body.calibration_factor),
    )


async def run_optimization(
    body: OptimizationRequest, grid: AngleGrid | None = None
) -> OptimizationResult:
    """Grid-search orientations against a single weather snapshot."""
    weather = await get_current_weather(body.latitude, body.longitude)
    result = optimize_orientation(
        weather,
        latitude=body.latitude,
        longitude=body.longitude,
        current_tilt=body.current_tilt,
        current_azimuth=body.current_azimuth,
        system_capacity_kw=body.system_capacity_kw,
        when=observation_time(weather),
        grid=grid,
    )

    logger.info(
        "Optimized %d orientations: best tilt=%.0f az=%.0f (%.3f kW, %+.1f%%)",
        result.evaluated,
        result.optimal_tilt,
        result.optimal_azimuth,
        result.max_power_kw,
        result.improvement_percentage,
        extra={"latitude": body.latitude, "longitude": body.longitude},
    )
    return result
