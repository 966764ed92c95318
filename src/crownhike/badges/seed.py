"""Badge catalogue seed data: threshold badges plus the named rule badges."""

from __future__ import annotations

import logging

from sqlalchemy.ext.asyncio import AsyncSession

from crownhike.badges.service import dialect_insert
from crownhike.db.models import Badge

logger = logging.getLogger(__name__)

BADGE_SEED_DATA: list[dict] = [
    # Distinct peaks climbed
    {
        "code": "TATRA_1",
        "name": "First Summit",
        "description": "Mark your first peak as climbed",
        "required_peaks": 1,
    },
    {
        "code": "TATRA_3",
        "name": "Ridge Walker",
        "description": "Climb 3 different peaks",
        "required_peaks": 3,
    },
    {
        "code": "TATRA_5",
        "name": "Summit Collector",
        "description": "Climb 5 different peaks",
        "required_peaks": 5,
    },
    {
        "code": "TATRA_10",
        "name": "Mountain Regular",
        "description": "Climb 10 different peaks",
        "required_peaks": 10,
    },
    {
        "code": "TATRA_25",
        "name": "Crown Seeker",
        "description": "Climb 25 different peaks",
        "required_peaks": 25,
    },
    # Ascent rules
    {
        "code": "THREE_PEAKS_ONE_DAY",
        "name": "Triple Crown Day",
        "description": "Mark three peaks on the same day",
        "required_peaks": None,
    },
    {
        "code": "MORNING_CLIMB",
        "name": "Early Bird",
        "description": "Reach a summit before 8:00",
        "required_peaks": None,
    },
    {
        "code": "SUNSET_CLIMB",
        "name": "Golden Hour",
        "description": "Reach a summit between 18:00 and 21:59",
        "required_peaks": None,
    },
    {
        "code": "NIGHT_CLIMB",
        "name": "Night Owl",
        "description": "Reach a summit between 22:00 and 3:59",
        "required_peaks": None,
    },
    {
        "code": "WINTER_CLIMB",
        "name": "Winter Ascent",
        "description": "Reach a summit in December, January or February",
        "required_peaks": None,
    },
    # Safety
    {
        "code": "SAFETY_CARD_FILLED",
        "name": "Prepared Hiker",
        "description": "Fill in your emergency card",
        "required_peaks": None,
    },
    {
        "code": "TODAYS_PLAN_SET",
        "name": "Left a Note",
        "description": "Share today's hiking plan on your emergency card",
        "required_peaks": None,
    },
]


async def seed_badges(db: AsyncSession) -> int:
    """Upsert the badge catalogue by code. Returns number of badges seeded."""
    insert = dialect_insert(db)
    seeded = 0
    for badge_data in BADGE_SEED_DATA:
        stmt = insert(Badge).values(**badge_data)
        stmt = stmt.on_conflict_do_update(
            index_elements=["code"],
            set_={
                "name": stmt.excluded.name,
                "description": stmt.excluded.description,
                "required_peaks": stmt.excluded.required_peaks,
            },
        )
        await db.execute(stmt)
        seeded += 1

    await db.commit()
    logger.info("Seeded %d badge definitions", seeded)
    return seeded
