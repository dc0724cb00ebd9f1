"""Pytest configuration and fixtures."""

import os

# Set before any subway imports so subway.core.config picks them up
os.environ["DEBUG"] = "true"
os.environ["OTEL_ENABLED"] = "false"
os.environ["LOG_LEVEL"] = "WARNING"

from collections.abc import AsyncGenerator, Callable, Coroutine
from pathlib import Path
from typing import Any

import pytest
from alembic import command
from alembic.config import Config
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import NullPool
from subway.core.database import enable_sqlite_foreign_keys, get_db
from subway.core.utils import convert_async_db_url_to_sync
from subway.main import app
from subway.models.line import Line, Section
from subway.models.station import Station

from tests.fixtures.otel import otel_enabled_provider, reset_tracer_provider  # noqa: F401


ALEMBIC_DIR = Path(__file__).resolve().parent.parent / "alembic"


def run_migrations(async_db_url: str) -> None:
    """Run Alembic migrations to HEAD against the given database."""
    alembic_cfg = Config()
    alembic_cfg.set_main_option("script_location", str(ALEMBIC_DIR))
    alembic_cfg.set_main_option("sqlalchemy.url", convert_async_db_url_to_sync(async_db_url))

    # Suppress Alembic output during tests unless debugging
    if not os.environ.get("ALEMBIC_VERBOSE"):
        alembic_cfg.set_main_option("configure_logger", "false")

    try:
        command.upgrade(alembic_cfg, "head")
    except Exception as e:
        msg = f"Alembic migration failed: {e}"
        raise RuntimeError(msg) from e


@pytest.fixture
def database_url(tmp_path: Path) -> str:
    """
    Fresh SQLite database file with the full migrated schema.

    Every test gets its own file, so commits are real commits and
    IntegrityError paths behave exactly as in production.

    Returns:
        Async database URL for the migrated database
    """
    async_db_url = f"sqlite+aiosqlite:///{tmp_path / 'subway_test.db'}"
    run_migrations(async_db_url)
    return async_db_url


@pytest.fixture
async def db_session(database_url: str) -> AsyncGenerator[AsyncSession]:
    """
    Async session bound to the per-test database.

    Yields:
        Async SQLAlchemy session
    """
    engine = create_async_engine(database_url, echo=False, poolclass=NullPool)
    enable_sqlite_foreign_keys(engine)
    session_factory = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)

    async with session_factory() as session:
        yield session

    await engine.dispose()


@pytest.fixture
async def async_client(db_session: AsyncSession) -> AsyncGenerator[AsyncClient]:
    """
    Async HTTP client whose requests share the test's database session.

    Yields:
        Async HTTP client configured for testing
    """

    async def override_get_db() -> AsyncGenerator[AsyncSession]:
        yield db_session

    app.dependency_overrides[get_db] = override_get_db

    try:
        async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
            yield client
    finally:
        app.dependency_overrides.clear()


# Data factories


@pytest.fixture
def station_factory(db_session: AsyncSession) -> Callable[[str], Coroutine[Any, Any, Station]]:
    """
    Factory persisting a station with the given name.

    Returns:
        Async callable: ``await station_factory("Seoul")`` -> Station
    """

    async def _create(name: str) -> Station:
        station = Station(name=name)
        db_session.add(station)
        await db_session.commit()
        await db_session.refresh(station)
        return station

    return _create


@pytest.fixture
async def up_station(station_factory: Callable[[str], Coroutine[Any, Any, Station]]) -> Station:
    """First persisted station (id 1 in a fresh database)."""
    return await station_factory("강남역")


@pytest.fixture
async def down_station(station_factory: Callable[[str], Coroutine[Any, Any, Station]]) -> Station:
    """Second persisted station."""
    return await station_factory("역삼역")


@pytest.fixture
def line_factory(
    db_session: AsyncSession, up_station: Station, down_station: Station
) -> Callable[..., Coroutine[Any, Any, Line]]:
    """
    Factory persisting a line with one section between up_station and down_station.

    Returns:
        Async callable: ``await line_factory("2호선", "#008000")`` -> Line
    """

    async def _create(name: str, color: str = "#0000FF", distance: int = 10) -> Line:
        line = Line(name=name, color=color)
        line.add_section(Section(up_station=up_station, down_station=down_station, distance=distance))
        db_session.add(line)
        await db_session.commit()
        await db_session.refresh(line)
        return line

    return _create
