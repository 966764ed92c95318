"""Shared test fixtures. Every test gets a fresh in-memory SQLite database."""

from __future__ import annotations

import os
from collections.abc import AsyncGenerator

# Settings are read at import time by crownhike.main
os.environ["CROWNHIKE_DATABASE_URL"] = "sqlite+aiosqlite:///:memory:"
os.environ["CROWNHIKE_JWT_SECRET"] = "test-secret-with-enough-bytes-for-hs256"
os.environ["CROWNHIKE_LOG_FORMAT"] = "console"
os.environ["CROWNHIKE_ORS_API_KEY"] = ""

import pytest  # noqa: E402
import pytest_asyncio  # noqa: E402
from fastapi import FastAPI  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402
from sqlalchemy.ext.asyncio import AsyncSession  # noqa: E402

from crownhike.config import get_settings  # noqa: E402

get_settings.cache_clear()

from crownhike.auth.jwt import create_access_token  # noqa: E402
from crownhike.badges.seed import seed_badges  # noqa: E402
from crownhike.database import close_db, get_engine, get_session, init_db  # noqa: E402
from crownhike.db.base import Base  # noqa: E402
from crownhike.db.models import Peak, User  # noqa: E402
from crownhike.main import create_app  # noqa: E402
from tests.factories import make_peak, make_user  # noqa: E402


@pytest_asyncio.fixture
async def database() -> AsyncGenerator[None, None]:
    """Create the schema and seed the badge catalogue; dispose afterwards."""
    settings = get_settings()
    await init_db(settings.database_url)
    async with get_engine().begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    async for session in get_session():
        await seed_badges(session)
        break

    yield

    await close_db()


@pytest_asyncio.fixture
async def db_session(database: None) -> AsyncGenerator[AsyncSession, None]:
    """Direct session for setup and assertions. Commit setup before issuing requests."""
    async for session in get_session():
        yield session
        await session.close()
        break


@pytest.fixture
def app() -> FastAPI:
    return create_app()


@pytest_asyncio.fixture
async def client(database: None, app: FastAPI) -> AsyncGenerator[AsyncClient, None]:
    """HTTP client over the ASGI app. Lifespan does not run; `database` stands in for it."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


@pytest_asyncio.fixture
async def user(db_session: AsyncSession) -> User:
    return await make_user(db_session, email="hiker@example.com")


@pytest_asyncio.fixture
async def peaks(db_session: AsyncSession) -> list[Peak]:
    """Five peaks, committed."""
    return [
        await make_peak(db_session, "Rysy", 2499, difficulty="HARD", main_trail_color="RED", lat=49.1794, lng=20.0881),
        await make_peak(db_session, "Giewont", 1894, difficulty="MODERATE", main_trail_color="BLUE", lat=49.2509, lng=19.9339),
        await make_peak(db_session, "Kasprowy Wierch", 1987, mountain_range="Tatry Zachodnie", lat=49.2317, lng=19.9817),
        await make_peak(db_session, "Swinica", 2301, difficulty="HARD", main_trail_color="RED", lat=49.2194, lng=20.0089),
        await make_peak(db_session, "Kozi Wierch", 2291, difficulty="EXPERT", main_trail_color="BLACK"),
    ]


@pytest_asyncio.fixture
async def authed_client(client: AsyncClient, user: User) -> AsyncClient:
    """Client carrying a bearer token for `user`."""
    client.headers["Authorization"] = f"Bearer {create_access_token(user.id, user.email)}"
    return client


@pytest_asyncio.fixture
async def failing_client(database: None, app: FastAPI, user: User) -> AsyncGenerator[AsyncClient, None]:
    """Authed client that returns the 500 response instead of re-raising app errors."""
    transport = ASGITransport(app=app, raise_app_exceptions=False)
    headers = {"Authorization": f"Bearer {create_access_token(user.id, user.email)}"}
    async with AsyncClient(transport=transport, base_url="http://test", headers=headers) as ac:
        yield ac
