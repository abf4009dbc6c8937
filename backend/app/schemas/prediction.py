import uuid
from datetime import datetime
from typing import Literal

from pydantic import BaseModel, Field


class WeatherSnapshot(BaseModel):
    temperature: float | None = None
    humidity: float | None = None
    pressure: float | None = None
    cloud_cover: float = 0.0
    wind_speed: float | None = None
    solar_irradiance: float = 0.0


class SolarGeometryResponse(BaseModel):
    zenith: float
    angle_of_incidence: float


class PredictionRequest(BaseModel):
    latitude: float = Field(ge=-90, le=90)
    longitude: float = Field(ge=-180, le=180)
    tilt: float = Field(ge=0, le=90, description="Panel tilt from horizontal (degrees)")
    azimuth: float = Field(ge=0, le=360, description="Panel azimuth clockwise from north (degrees)")
    system_capacity_kw: float = Field(gt=0, le=100_000)
    calculation_mode: Literal["simple", "advanced"] = "advanced"
    calibration_factor: float | None = Field(
        default=None,
        description="Multiplier applied to the raw estimate; negative values clamp to 0, "
        "missing or non-finite values mean 1",
    )


class PredictionResponse(BaseModel):
    id: uuid.UUID
    user_id: uuid.UUID | None
    latitude: float
    longitude: float
    tilt: float
    azimuth: float
    system_capacity_kw: float
    predicted_power_kw: float
    calculation_mode: str
    calibration_factor: float
    timestamp: str
    weather_data: WeatherSnapshot
    solar_geometry: SolarGeometryResponse
    created_at: datetime

    model_config = {"from_attributes": True}


class CurrentWeatherResponse(WeatherSnapshot):
    latitude: float
    longitude: float
    timestamp: str
