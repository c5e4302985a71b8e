"""
Pytest configuration and shared fixtures for the car API test suite.

This module provides:
- Database fixtures (in-memory SQLite with the colour catalog seeded)
- An HTTP client bound to the FastAPI app with the session overridden
- A fixed clock for the build date freshness rule
- A reusable AsyncSession-like test double
"""

from datetime import datetime, timezone
from typing import AsyncGenerator
from unittest.mock import AsyncMock, MagicMock

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from car_api.core.db import Base, get_db
from car_api.main import create_app
from car_api.models import Car
from car_api.schemas.car import CarCreate
from car_api.scripts.seed_data import init_db
from car_api.services.colour_catalog import ColourCatalog
from car_api.services.validators import CarValidator


TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"

FIXED_NOW = datetime(2024, 6, 1, 12, 0, 0, tzinfo=timezone.utc)


@pytest_asyncio.fixture
async def async_engine():
    """In-memory SQLite engine with both tables created and colours seeded."""
    engine = create_async_engine(
        TEST_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
        echo=False
    )

    await init_db(engine)

    yield engine

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)

    await engine.dispose()


@pytest_asyncio.fixture
async def async_db_session(async_engine) -> AsyncGenerator[AsyncSession, None]:
    async_session = async_sessionmaker(async_engine, class_=AsyncSession, expire_on_commit=False)

    async with async_session() as session:
        yield session


@pytest_asyncio.fixture
async def async_client(async_db_session) -> AsyncGenerator[AsyncClient, None]:
    """HTTP client against a fresh app, with metrics on and get_db overridden."""
    app = create_app(enable_metrics=True, reset_db=False, clear_db=False)

    async def override_get_db():
        yield async_db_session

    app.dependency_overrides[get_db] = override_get_db

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        yield client

    app.dependency_overrides.clear()


@pytest.fixture
def fixed_validator(async_db_session) -> CarValidator:
    """Validator whose notion of 'now' is FIXED_NOW."""
    return CarValidator(ColourCatalog(async_db_session), max_age_years=4, clock=lambda: FIXED_NOW)


# Test Data Factories
def make_candidate(**overrides) -> CarCreate:
    data = {
        "make": "BMW",
        "model": "3 Series",
        "buildDate": "2023-01-20",
        "colourId": 2,
    }
    data.update(overrides)
    return CarCreate(**data)


async def count_cars(session: AsyncSession) -> int:
    return (await session.execute(select(func.count(Car.id)))).scalar()


# Common Test Doubles
@pytest.fixture
def mock_async_session():
    """Provide a reusable AsyncSession-like test double.

    - `add` is a `MagicMock` (synchronous)
    - `flush`, `commit`, `rollback`, `get`, `execute` are `AsyncMock`
    """
    session = AsyncMock()
    session.add = MagicMock()
    session.flush = AsyncMock()
    session.commit = AsyncMock()
    session.rollback = AsyncMock()
    session.get = AsyncMock()
    session.execute = AsyncMock()
    return session
