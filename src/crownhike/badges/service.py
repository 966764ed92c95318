"""Badge award primitives: threshold awards and awards by code.

Both paths write through an INSERT ... ON CONFLICT DO NOTHING on
UNIQUE(user_id, badge_id), so a racing duplicate award is silently dropped
instead of raising or producing a second row.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from datetime import datetime, timezone

from sqlalchemy import distinct, func, select
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.ext.asyncio import AsyncSession

from crownhike.db.models import Badge, UserBadge, UserPeak

logger = logging.getLogger(__name__)

_INSERT_BY_DIALECT = {
    "postgresql": postgresql.insert,
    "sqlite": sqlite.insert,
}


class UnknownBadgeCode(LookupError):
    """A rule referenced a badge code that is missing from the catalogue."""

    def __init__(self, code: str) -> None:
        super().__init__(f"Badge with code {code} not found")
        self.code = code


def dialect_insert(db: AsyncSession):  # noqa: ANN201
    """Backend-specific insert() construct that supports ON CONFLICT."""
    name = db.get_bind().dialect.name
    try:
        return _INSERT_BY_DIALECT[name]
    except KeyError:
        msg = f"Unsupported database dialect for badge awards: {name}"
        raise RuntimeError(msg) from None


async def _insert_missing(db: AsyncSession, user_id: int, badge_ids: Sequence[int]) -> set[int]:
    """Insert (user, badge) pairs that do not exist yet. Returns the badge ids actually inserted."""
    if not badge_ids:
        return set()
    insert = dialect_insert(db)
    now = datetime.now(timezone.utc)
    stmt = (
        insert(UserBadge)
        .values([{"user_id": user_id, "badge_id": badge_id, "earned_at": now} for badge_id in badge_ids])
        .on_conflict_do_nothing(index_elements=["user_id", "badge_id"])
        .returning(UserBadge.badge_id)
    )
    result = await db.execute(stmt)
    return set(result.scalars().all())


async def get_badge_by_code(db: AsyncSession, code: str) -> Badge | None:
    """Fetch a badge definition by its unique code."""
    result = await db.execute(select(Badge).where(Badge.code == code))
    return result.scalar_one_or_none()


async def has_badge(db: AsyncSession, user_id: int, badge_id: int) -> bool:
    """Check if user already has a specific badge."""
    result = await db.execute(
        select(UserBadge.id).where(
            UserBadge.user_id == user_id,
            UserBadge.badge_id == badge_id,
        )
    )
    return result.scalar_one_or_none() is not None


async def count_distinct_peaks(db: AsyncSession, user_id: int) -> int:
    """Number of different peaks the user has ever marked."""
    result = await db.execute(
        select(func.count(distinct(UserPeak.peak_id))).where(UserPeak.user_id == user_id)
    )
    return result.scalar_one()


async def list_badges(db: AsyncSession) -> list[Badge]:
    """Full badge catalogue ordered by id."""
    result = await db.execute(select(Badge).order_by(Badge.id))
    return list(result.scalars().all())


async def list_user_badges(db: AsyncSession, user_id: int) -> list[Badge]:
    """Badges held by a user, in catalogue order."""
    result = await db.execute(
        select(Badge)
        .join(UserBadge, UserBadge.badge_id == Badge.id)
        .where(UserBadge.user_id == user_id)
        .order_by(Badge.id)
    )
    return list(result.scalars().all())


async def award_threshold_badges(db: AsyncSession, user_id: int) -> list[Badge]:
    """Award every threshold badge the user's distinct-peak count now reaches.

    The count is recomputed on every call; there is no running counter. Returns
    only the badges inserted by this call, so a repeat call with no new ascent
    returns an empty list.
    """
    peak_count = await count_distinct_peaks(db, user_id)

    held = select(UserBadge.badge_id).where(UserBadge.user_id == user_id)
    result = await db.execute(
        select(Badge)
        .where(
            Badge.required_peaks.is_not(None),
            Badge.required_peaks <= peak_count,
            Badge.id.not_in(held),
        )
        .order_by(Badge.id)
    )
    candidates = list(result.scalars().all())
    if not candidates:
        return []

    inserted = await _insert_missing(db, user_id, [b.id for b in candidates])
    awarded = [b for b in candidates if b.id in inserted]
    if awarded:
        logger.info(
            "Threshold badges awarded user_id=%s peaks=%d codes=%s",
            user_id, peak_count, [b.code for b in awarded],
        )
    return awarded


async def award_badge_by_code(db: AsyncSession, user_id: int, code: str) -> bool:
    """Award a single badge by code.

    Returns True if newly awarded, False if the user already held it.

    Raises:
        UnknownBadgeCode: If no badge has this code.
    """
    badge = await get_badge_by_code(db, code)
    if badge is None:
        raise UnknownBadgeCode(code)

    if await has_badge(db, user_id, badge.id):
        return False

    inserted = await _insert_missing(db, user_id, [badge.id])
    return badge.id in inserted
