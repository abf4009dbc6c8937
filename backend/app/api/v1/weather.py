import logging

from fastapi import APIRouter, HTTPException, Query, Request, status

from app.core.rate_limit import weather_limiter
from app.schemas.prediction import CurrentWeatherResponse
from app.services import solar_service
from engine.weather.open_meteo import WeatherServiceError

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get(
    "/current",
    response_model=CurrentWeatherResponse,
    summary="Current weather",
    description="Normalized current conditions for a coordinate. At night the brightest "
    "hour of the next 24 hours supplies irradiance, cloud cover and timestamp.",
)
async def current_weather(
    request: Request,
    latitude: float = Query(ge=-90, le=90),
    longitude: float = Query(ge=-180, le=180),
):
    weather_limiter.check(request)
    try:
        weather = await solar_service.get_current_weather(latitude, longitude)
    except WeatherServiceError:
        logger.exception(
            "Weather lookup failed", extra={"latitude": latitude, "longitude": longitude}
        )
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail="Failed to fetch current weather",
        )

    return CurrentWeatherResponse(
        latitude=latitude,
        longitude=longitude,
        timestamp=weather.timestamp,
        **weather.to_dict(),
    )
