import logging

from fastapi import APIRouter, Depends, HTTPException, Query, Request, status
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.deps import get_optional_user, owner_id
from app.core.rate_limit import optimization_limiter
from app.models.database import get_db
from app.models.optimization import Optimization
from app.models.user import User
from app.schemas.optimization import OptimizationRequest, OptimizationResponse
from app.services import solar_service
from engine.weather.open_meteo import WeatherServiceError

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post(
    "/",
    response_model=OptimizationResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Optimize panel orientation",
    description="Grid-search tilt 0-60 deg and azimuth 120-240 deg for the highest "
    "estimated output under current weather, and store the suggestion.",
)
async def optimize_panel_configuration(
    body: OptimizationRequest,
    request: Request,
    user: User | None = Depends(get_optional_user),
    db: AsyncSession = Depends(get_db),
):
    optimization_limiter.check(request)

    try:
        result = await solar_service.run_optimization(body)
    except WeatherServiceError:
        logger.exception(
            "Panel optimization failed",
            extra={"latitude": body.latitude, "longitude": body.longitude},
        )
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail="Failed to optimize panel configuration",
        )

    optimization = Optimization(
        user_id=owner_id(user),
        latitude=body.latitude,
        longitude=body.longitude,
        optimal_tilt=result.optimal_tilt,
        optimal_azimuth=result.optimal_azimuth,
        max_power_kw=result.max_power_kw,
        current_tilt=result.current_tilt,
        current_azimuth=result.current_azimuth,
        current_power_kw=result.current_power_kw,
        improvement_percentage=result.improvement_percentage,
    )
    db.add(optimization)
    await db.commit()
    await db.refresh(optimization)
    return optimization


@router.get(
    "/",
    response_model=list[OptimizationResponse],
    summary="List optimizations",
    description="Return the caller's optimization runs, newest first.",
)
async def list_optimizations(
    limit: int = Query(default=10, ge=1, le=100),
    user: User | None = Depends(get_optional_user),
    db: AsyncSession = Depends(get_db),
):
    if user is None:
        return []
    result = await db.execute(
        select(Optimization)
        .where(Optimization.user_id == user.id)
        .order_by(Optimization.created_at.desc())
        .limit(limit)
    )
    return result.scalars().all()
