"""Common test fixtures for the application."""

import os

os.environ.setdefault("ENV", "testing")

from collections.abc import AsyncGenerator

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.pool import StaticPool
from sqlmodel import SQLModel
from sqlmodel.ext.asyncio.session import AsyncSession

from actionquery.app import app
from actionquery.config.db import get_session


@pytest.fixture
async def session() -> AsyncGenerator[AsyncSession]:
    """Create a fresh in-memory database per test.

    Returns:
        AsyncSession: SQLModel async session for database operations.
    """
    test_engine = create_async_engine(
        "sqlite+aiosqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )

    async with test_engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)

    async with AsyncSession(test_engine, expire_on_commit=False) as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise

    await test_engine.dispose()


@pytest.fixture(name="client")
async def client_fixture(session: AsyncSession) -> AsyncGenerator[AsyncClient]:
    """Create a test client for the FastAPI app.

    Args:
        session: Database session fixture.

    Returns:
        AsyncClient: Client bound to the app through an ASGI transport.
    """

    def get_session_override() -> AsyncSession:
        return session

    app.dependency_overrides[get_session] = get_session_override
    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://testserver"  # NOSONAR
    ) as client:
        yield client

    app.dependency_overrides.clear()
