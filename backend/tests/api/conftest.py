"""API test infrastructure — async httpx client with SQLite test database."""

from __future__ import annotations

from collections.abc import AsyncGenerator
from unittest.mock import AsyncMock, patch

import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.ext.compiler import compiles
from sqlalchemy.dialects.postgresql import UUID as PG_UUID, JSONB

from app.models.database import Base, get_db
from engine.weather.open_meteo import CurrentWeather

# ---------------------------------------------------------------------------
# SQLite compatibility for PostgreSQL column types
# ---------------------------------------------------------------------------

@compiles(PG_UUID, "sqlite")
def _compile_uuid_sqlite(type_, compiler, **kw):
    return "CHAR(36)"


@compiles(JSONB, "sqlite")
def _compile_jsonb_sqlite(type_, compiler, **kw):
    return "JSON"


# ---------------------------------------------------------------------------
# Database fixtures
# ---------------------------------------------------------------------------

TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"


@pytest_asyncio.fixture
async def db_engine():
    engine = create_async_engine(TEST_DATABASE_URL, echo=False)
    async with engine.begin() as conn:
        await conn.exec_driver_sql("PRAGMA foreign_keys = ON")
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


# ---------------------------------------------------------------------------
# FastAPI app with overridden dependencies
# ---------------------------------------------------------------------------

@pytest_asyncio.fixture
async def app(db_engine):
    from app.core.rate_limit import ALL_LIMITERS
    from app.main import create_app

    application = create_app()

    factory = async_sessionmaker(
        db_engine, class_=AsyncSession, expire_on_commit=False
    )

    async def _override_get_db():
        async with factory() as session:
            yield session

    application.dependency_overrides[get_db] = _override_get_db

    for limiter in ALL_LIMITERS:
        limiter.reset()

    yield application

    application.dependency_overrides.clear()


@pytest_asyncio.fixture
async def client(app) -> AsyncGenerator[AsyncClient, None]:
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


# ---------------------------------------------------------------------------
# Weather stub
# ---------------------------------------------------------------------------

# Patch where the service module looks the client up
WEATHER_PATCH_TARGET = "app.services.solar_service.fetch_current_weather"

SUNNY_WEATHER = CurrentWeather(
    temperature=30.0,
    humidity=40.0,
    pressure=1010.0,
    cloud_cover=10.0,
    wind_speed=12.0,
    solar_irradiance=800.0,
    timestamp="2024-03-21T12:00",
)


@pytest_asyncio.fixture
async def mock_weather() -> AsyncGenerator[AsyncMock, None]:
    with patch(WEATHER_PATCH_TARGET, new_callable=AsyncMock) as mocked:
        mocked.return_value = SUNNY_WEATHER
        yield mocked


# ---------------------------------------------------------------------------
# Auth helpers
# ---------------------------------------------------------------------------

TEST_PASSWORD = "TestPass123"
TEST_EMAIL = "test@solarcast.dev"


@pytest_asyncio.fixture
async def registered_user(client: AsyncClient) -> dict:
    """Register a user and return the token response."""
    resp = await client.post(
        "/api/v1/auth/register",
        json={"email": TEST_EMAIL, "password": TEST_PASSWORD, "full_name": "Test User"},
    )
    assert resp.status_code == 201
    return resp.json()


@pytest_asyncio.fixture
async def auth_headers(registered_user: dict) -> dict[str, str]:
    """Authorization headers for authenticated requests."""
    return {"Authorization": f"Bearer {registered_user['access_token']}"}


@pytest_asyncio.fixture
async def other_headers(client: AsyncClient) -> dict[str, str]:
    """Headers for a second, unrelated user."""
    resp = await client.post(
        "/api/v1/auth/register",
        json={"email": "other@solarcast.dev", "password": "OtherPass1"},
    )
    assert resp.status_code == 201
    return {"Authorization": f"Bearer {resp.json()['access_token']}"}

