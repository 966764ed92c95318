"""FastAPI application factory."""

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from sqlalchemy.exc import SQLAlchemyError

from crownhike.ascents.router import router as ascents_router
from crownhike.badges.router import router as badges_router
from crownhike.badges.seed import seed_badges
from crownhike.config import get_settings
from crownhike.database import close_db, get_session, init_db
from crownhike.emergency.router import router as emergency_router
from crownhike.health.router import router as health_router
from crownhike.hikes.router import router as hikes_router
from crownhike.middleware import setup_middleware
from crownhike.peaks.router import router as peaks_router
from crownhike.redis_client import close_redis, init_redis
from crownhike.users.router import router as users_router

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(_app: FastAPI) -> AsyncGenerator[None, None]:
    """Startup and shutdown lifecycle."""
    settings = get_settings()
    await init_db(settings.database_url)
    await init_redis(settings.redis_url)

    # Badge catalogue upsert (idempotent)
    try:
        async for db in get_session():
            await seed_badges(db)
            break
    except SQLAlchemyError:
        logger.warning("Badge seeding failed (tables may not exist yet)", exc_info=True)

    yield

    await close_db()
    await close_redis()


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    settings = get_settings()

    app = FastAPI(
        title="CrownHike API",
        description="Backend for CrownHike: peaks, hikes, emergency cards and badges",
        version=settings.app_version,
        docs_url="/docs" if settings.debug else None,
        redoc_url="/redoc" if settings.debug else None,
        lifespan=lifespan,
    )

    setup_middleware(app, settings)
    app.include_router(health_router, tags=["Health"])
    app.include_router(users_router)
    app.include_router(peaks_router)
    app.include_router(ascents_router)
    app.include_router(hikes_router)
    app.include_router(emergency_router)
    app.include_router(badges_router)

    return app


app = create_app()
