"""Hike recording. A hike header and its track points are written atomically."""

from __future__ import annotations

import math
from collections.abc import Sequence
from datetime import datetime
from typing import TYPE_CHECKING, Any

import structlog
from sqlalchemy import insert, select
from sqlalchemy.orm import selectinload

from crownhike.db.models import Hike, HikePoint

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncSession

    from crownhike.hikes.schemas import TrackPointIn

logger = structlog.get_logger()


def _coerce(value: Any) -> float | None:  # noqa: ANN401
    """Finite float or None."""
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    return number if math.isfinite(number) else None


def _track_rows(hike_id: int, track: Sequence[TrackPointIn]) -> list[dict[str, Any]]:
    """Rows for the valid points. seq is the point's index in the submitted track."""
    rows = []
    for seq, point in enumerate(track):
        lat, lng = _coerce(point.lat), _coerce(point.lng)
        if lat is None or lng is None:
            continue
        rows.append({"hike_id": hike_id, "seq": seq, "lat": lat, "lng": lng})
    return rows


async def record_hike(
    db: AsyncSession,
    user_id: int,
    peak_id: int,
    started_at: datetime,
    duration_sec: int,
    track_distance_km: float,
    track: Sequence[TrackPointIn],
    straight_distance_km: float | None = None,
) -> int:
    """
    Persist a hike with its track in one transaction and commit it.

    Any failure rolls back both the header and the points, then re-raises.
    Returns the new hike id.
    """
    hike = Hike(
        user_id=user_id,
        peak_id=peak_id,
        started_at=started_at,
        duration_sec=duration_sec,
        track_distance_km=track_distance_km,
        straight_distance_km=straight_distance_km,
    )
    try:
        db.add(hike)
        await db.flush()
        hike_id = hike.id
        rows = _track_rows(hike_id, track)
        if rows:
            await db.execute(insert(HikePoint), rows)
        await db.commit()
    except Exception:
        await db.rollback()
        logger.warning("hike_rolled_back", user_id=user_id, peak_id=peak_id)
        raise

    logger.info(
        "hike_recorded",
        user_id=user_id,
        hike_id=hike_id,
        points=len(rows),
        dropped=len(track) - len(rows),
    )
    return hike_id


async def list_hikes(db: AsyncSession, user_id: int) -> list[Hike]:
    """A user's hikes, newest start first."""
    result = await db.execute(
        select(Hike).where(Hike.user_id == user_id).order_by(Hike.started_at.desc(), Hike.id.desc())
    )
    return list(result.scalars().unique().all())


async def get_hike(db: AsyncSession, user_id: int, hike_id: int) -> Hike | None:
    """A single hike with its track, or None if it does not exist or is not the user's."""
    result = await db.execute(
        select(Hike)
        .options(selectinload(Hike.points))
        .where(Hike.id == hike_id, Hike.user_id == user_id)
        .execution_options(populate_existing=True)
    )
    return result.scalars().unique().one_or_none()
