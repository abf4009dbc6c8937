import uuid
from datetime import datetime

from pydantic import BaseModel, Field


class OptimizationRequest(BaseModel):
    latitude: float = Field(ge=-90, le=90)
    longitude: float = Field(ge=-180, le=180)
    current_tilt: float = Field(ge=0, le=90)
    current_azimuth: float = Field(ge=0, le=360)
    system_capacity_kw: float = Field(gt=0, le=100_000)


class OptimizationResponse(BaseModel):
    id: uuid.UUID
    user_id: uuid.UUID | None
    latitude: float
    longitude: float
    optimal_tilt: float
    optimal_azimuth: float
    max_power_kw: float
    current_tilt: float
    current_azimuth: float
    current_power_kw: float
    improvement_percentage: float
    created_at: datetime

    model_config = {"from_attributes": True}
