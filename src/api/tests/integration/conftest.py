"""Integration test fixtures for repository tests.

These fixtures require a running PostgreSQL instance. Tests are skipped
when the database cannot be reached.
"""

from __future__ import annotations

from collections.abc import AsyncGenerator
import os

import pytest
import pytest_asyncio
from pydantic import SecretStr
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker

import iam.infrastructure.models  # noqa: F401
import shipping.infrastructure.models  # noqa: F401
from iam.domain.aggregates import Organization
from iam.infrastructure.organization_repository import OrganizationRepository
from infrastructure.database.engines import create_write_engine
from infrastructure.database.models import Base
from infrastructure.settings import DatabaseSettings

CARGO_TABLES = (
    "event_files",
    "travel_events",
    "shipments",
    "user_invitations",
    "users",
    "organizations",
)


def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line(
        "markers",
        "integration: mark test as integration test (requires database)",
    )


@pytest.fixture(scope="session")
def integration_db_settings() -> DatabaseSettings:
    """Database settings for integration tests.

    Override with environment variables:
        CARGO_DB_HOST, CARGO_DB_PORT, etc.
    """
    return DatabaseSettings(
        host=os.getenv("CARGO_DB_HOST", "localhost"),
        port=int(os.getenv("CARGO_DB_PORT", "5432")),
        database=os.getenv("CARGO_DB_DATABASE", "cargo"),
        username=os.getenv("CARGO_DB_USERNAME", "cargo"),
        password=SecretStr(os.getenv("CARGO_DB_PASSWORD", "cargo_dev_password")),
    )


@pytest_asyncio.fixture
async def engine(
    integration_db_settings: DatabaseSettings,
) -> AsyncGenerator[AsyncEngine, None]:
    """Provide an engine against a database holding the current schema."""
    engine = create_write_engine(integration_db_settings)
    try:
        async with engine.begin() as connection:
            await connection.run_sync(Base.metadata.create_all)
    except (OSError, SQLAlchemyError) as e:
        await engine.dispose()
        pytest.skip(f"PostgreSQL is not reachable: {e}")

    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    """Provide a session factory for tests that need concurrent sessions."""
    return async_sessionmaker(engine, expire_on_commit=False)


@pytest_asyncio.fixture
async def async_session(
    session_factory: async_sessionmaker[AsyncSession],
) -> AsyncGenerator[AsyncSession, None]:
    """Provide an async session for integration tests."""
    async with session_factory() as session:
        yield session


@pytest_asyncio.fixture
async def clean_cargo_data(engine: AsyncEngine) -> AsyncGenerator[None, None]:
    """Empty every cargo table before and after each test."""

    async def cleanup() -> None:
        async with engine.begin() as connection:
            await connection.execute(
                text(f"TRUNCATE {', '.join(CARGO_TABLES)} CASCADE")
            )

    await cleanup()
    yield
    await cleanup()


@pytest_asyncio.fixture
async def organization(
    session_factory: async_sessionmaker[AsyncSession], clean_cargo_data: None
) -> Organization:
    """A committed organization named Reus Logistics."""
    org = Organization.create(name="Reus Logistics", slug="reus-logistics")
    async with session_factory() as session, session.begin():
        await OrganizationRepository(session=session).add(org)
    return org
