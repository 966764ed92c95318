"""Ascent persistence."""

from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING

import structlog
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError

from crownhike.db.models import UserPeak, utcnow

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncSession

logger = structlog.get_logger()


class DuplicateAscentError(ValueError):
    """The user has already marked this peak."""


async def record_ascent(
    db: AsyncSession,
    user_id: int,
    peak_id: int,
    lat: float | None = None,
    lng: float | None = None,
    photo_url: str | None = None,
    marked_at: datetime | None = None,
) -> UserPeak:
    """
    Insert an ascent for (user, peak).

    Raises:
        DuplicateAscentError: If the pair already exists. The session is rolled back.
    """
    ascent = UserPeak(
        user_id=user_id,
        peak_id=peak_id,
        marked_at=marked_at or utcnow(),
        lat=lat,
        lng=lng,
        photo_url=photo_url,
    )
    db.add(ascent)
    try:
        await db.flush()
    except IntegrityError as e:
        await db.rollback()
        msg = "Peak already marked as completed"
        raise DuplicateAscentError(msg) from e

    logger.info("ascent_recorded", user_id=user_id, peak_id=peak_id, ascent_id=ascent.id)
    return ascent


async def list_ascents(db: AsyncSession, user_id: int) -> list[UserPeak]:
    """A user's ascents with peak data, newest first."""
    result = await db.execute(
        select(UserPeak)
        .where(UserPeak.user_id == user_id)
        .order_by(UserPeak.marked_at.desc(), UserPeak.id.desc())
    )
    return list(result.scalars().all())
