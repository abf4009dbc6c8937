import logging
from contextlib import asynccontextmanager
from collections.abc import AsyncGenerator

from fastapi import Depends, FastAPI
from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession
from fastapi.middleware.cors import CORSMiddleware

from app.config import settings
from app.api.v1 import auth, optimizations, predictions, weather
from app.core.logging import RequestLoggingMiddleware, setup_logging
from app.models.database import get_db, get_engine

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None]:
    logger.info("%s starting (%s)", settings.app_name, settings.environment)
    yield
    await get_engine().dispose()


def create_app() -> FastAPI:
    setup_logging(json_format=settings.log_json)

    application = FastAPI(
        title=settings.app_name,
        version="0.1.0",
        lifespan=lifespan,
    )

    application.add_middleware(RequestLoggingMiddleware)
    application.add_middleware(
        CORSMiddleware,
        allow_origins=[o.strip() for o in settings.cors_origins.split(",") if o.strip()],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    application.include_router(auth.router, prefix="/api/v1/auth", tags=["auth"])
    application.include_router(
        predictions.router, prefix="/api/v1/predictions", tags=["predictions"]
    )
    application.include_router(
        optimizations.router, prefix="/api/v1/optimizations", tags=["optimizations"]
    )
    application.include_router(weather.router, prefix="/api/v1/weather", tags=["weather"])

    @application.get("/health")
    async def health_check(db: AsyncSession = Depends(get_db)) -> dict:
        result: dict = {"status": "ok", "services": {}}
        try:
            await db.execute(text("SELECT 1"))
            result["services"]["database"] = "ok"
        except Exception as e:
            result["services"]["database"] = f"error: {e}"
            result["status"] = "degraded"
        return result

    return application


app = create_app()
