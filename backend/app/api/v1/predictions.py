import logging
import uuid

from fastapi import APIRouter, Depends, HTTPException, Query, Request, status
from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.deps import get_current_user, get_optional_user, owner_id
from app.core.rate_limit import prediction_limiter
from app.models.database import get_db
from app.models.prediction import Prediction
from app.models.user import User
from app.schemas.prediction import PredictionRequest, PredictionResponse
from app.services import solar_service
from engine.weather.open_meteo import WeatherServiceError

logger = logging.getLogger(__name__)

router = APIRouter()

DEFAULT_HISTORY_LIMIT = 50


@router.post(
    "/",
    response_model=PredictionResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Predict PV output",
    description="Fetch current weather for the site, estimate panel output and store the result.",
)
async def predict_solar_power(
    body: PredictionRequest,
    request: Request,
    user: User | None = Depends(get_optional_user),
    db: AsyncSession = Depends(get_db),
):
    prediction_limiter.check(request)

    try:
        outcome = await solar_service.run_prediction(body)
    except WeatherServiceError:
        logger.exception(
            "Solar prediction failed",
            extra={"latitude": body.latitude, "longitude": body.longitude},
        )
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail="Failed to predict solar power output",
        )

    prediction = Prediction(
        user_id=owner_id(user),
        latitude=body.latitude,
        longitude=body.longitude,
        tilt=body.tilt,
        azimuth=body.azimuth,
        system_capacity_kw=body.system_capacity_kw,
        predicted_power_kw=outcome.predicted_power_kw,
        calculation_mode=body.calculation_mode,
        calibration_factor=outcome.calibration_factor,
        timestamp=outcome.weather.timestamp,
        weather_data=outcome.weather.to_dict(),
        solar_geometry=outcome.geometry.to_dict(),
    )
    db.add(prediction)
    await db.commit()
    await db.refresh(prediction)
    return prediction


@router.get(
    "/",
    response_model=list[PredictionResponse],
    summary="List predictions",
    description="Return the caller's predictions, newest first. Anonymous callers get an empty list.",
)
async def list_predictions(
    limit: int = Query(default=DEFAULT_HISTORY_LIMIT, ge=1, le=500),
    user: User | None = Depends(get_optional_user),
    db: AsyncSession = Depends(get_db),
):
    if user is None:
        return []
    result = await db.execute(
        select(Prediction)
        .where(Prediction.user_id == user.id)
        .order_by(Prediction.created_at.desc())
        .limit(limit)
    )
    return result.scalars().all()


@router.delete(
    "/",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Clear prediction history",
    description="Delete every prediction owned by the current user.",
)
async def clear_predictions(
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    result = await db.execute(delete(Prediction).where(Prediction.user_id == user.id))
    await db.commit()
    logger.info("Cleared %d predictions", result.rowcount, extra={"user_id": str(user.id)})


async def _get_user_prediction(
    prediction_id: uuid.UUID, user: User, db: AsyncSession
) -> Prediction:
    result = await db.execute(
        select(Prediction).where(Prediction.id == prediction_id, Prediction.user_id == user.id)
    )
    prediction = result.scalar_one_or_none()
    if not prediction:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Prediction not found")
    return prediction


@router.get(
    "/{prediction_id}",
    response_model=PredictionResponse,
    summary="Get prediction",
    description="Retrieve one of the caller's predictions by ID.",
)
async def get_prediction(
    prediction_id: uuid.UUID,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    return await _get_user_prediction(prediction_id, user, db)


@router.delete(
    "/{prediction_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete prediction",
    description="Permanently delete one of the caller's predictions.",
)
async def delete_prediction(
    prediction_id: uuid.UUID,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    prediction = await _get_user_prediction(prediction_id, user, db)
    await db.delete(prediction)
    await db.commit()
