from __future__ import annotations

from collections.abc import AsyncIterator

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import StaticPool

from mindwork.api.deps import get_db_session
from mindwork.api.main import app
from mindwork.core.config import Settings, get_settings
from mindwork.infrastructure.db.base import Base
from tests.utils import TestAccount, register_account


@pytest.fixture()
def settings() -> Settings:
    return get_settings()


@pytest.fixture()
async def engine() -> AsyncIterator[AsyncEngine]:
    # One shared in-memory database per test
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture()
def session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(engine, expire_on_commit=False)


@pytest.fixture()
async def db(session_factory: async_sessionmaker[AsyncSession]) -> AsyncIterator[AsyncSession]:
    """Provide a database session for tests that need direct DB access."""
    async with session_factory() as session:
        yield session


@pytest.fixture()
async def async_client(
    session_factory: async_sessionmaker[AsyncSession],
) -> AsyncIterator[AsyncClient]:
    """Async HTTP client bound to the app with the test database."""

    async def override_db_session() -> AsyncIterator[AsyncSession]:
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db_session] = override_db_session
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
    app.dependency_overrides.clear()


@pytest.fixture()
async def collaborator(async_client: AsyncClient) -> TestAccount:
    return await register_account(
        async_client,
        email="ana.collaborator@example.com",
        full_name="Ana Collaborator",
        role="Collaborator",
    )


@pytest.fixture()
async def other_collaborator(async_client: AsyncClient) -> TestAccount:
    return await register_account(
        async_client,
        email="bruno.collaborator@example.com",
        full_name="Bruno Collaborator",
        role="collaborator",
    )


@pytest.fixture()
async def manager(async_client: AsyncClient) -> TestAccount:
    return await register_account(
        async_client,
        email="carla.manager@example.com",
        full_name="Carla Manager",
        role="Manager",
    )
