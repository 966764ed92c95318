"""Badge rule engine: evaluates ascents and emergency cards against badge rules."""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import datetime, time, timedelta, timezone, tzinfo
from typing import TYPE_CHECKING
from zoneinfo import ZoneInfo

from sqlalchemy import func, select

from crownhike.badges.service import UnknownBadgeCode, award_badge_by_code, award_threshold_badges
from crownhike.config import get_settings
from crownhike.db.models import Badge, UserPeak, as_utc

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncSession

    from crownhike.db.models import EmergencyCard

logger = logging.getLogger(__name__)

THREE_PEAKS_ONE_DAY = "THREE_PEAKS_ONE_DAY"
SAFETY_CARD_FILLED = "SAFETY_CARD_FILLED"
TODAYS_PLAN_SET = "TODAYS_PLAN_SET"

# Checked against the local time of the latest ascent, in this order
ASCENT_TIME_RULES: tuple[tuple[str, Callable[[datetime], bool]], ...] = (
    ("MORNING_CLIMB", lambda t: t.hour < 8),
    ("SUNSET_CLIMB", lambda t: 18 <= t.hour <= 21),
    ("NIGHT_CLIMB", lambda t: t.hour >= 22 or t.hour < 4),
    ("WINTER_CLIMB", lambda t: t.month in (12, 1, 2)),
)

SAME_DAY_ASCENTS = 3


@dataclass
class AscentAwards:
    """Badges newly awarded after one ascent."""

    badges: list[Badge] = field(default_factory=list)
    special_codes: list[str] = field(default_factory=list)


def local_zone() -> tzinfo:
    """Configured wall-clock zone for badge rules."""
    return ZoneInfo(get_settings().timezone)


def has_safety_data(card: EmergencyCard) -> bool:
    return any(
        (card.phone, card.emergency_contact_name, card.emergency_contact_phone, card.blood_type)
    )


def has_todays_plan(card: EmergencyCard) -> bool:
    return bool(card.todays_plan and card.todays_plan.strip())


class BadgeEngine:
    """Evaluates badge rules for one user action.

    Unknown badge codes do not fail the request: they are logged and kept in
    ``skipped`` so callers and tests can see which rules had nothing to award.
    """

    def __init__(
        self,
        db: AsyncSession,
        tz: tzinfo | None = None,
        now: Callable[[], datetime] | None = None,
    ) -> None:
        self.db = db
        self.tz = tz if tz is not None else local_zone()
        self._now = now or (lambda: datetime.now(timezone.utc))
        self.skipped: list[UnknownBadgeCode] = []

    async def award_by_code(self, user_id: int, code: str) -> bool:
        """Award a named badge. Returns True only if this call awarded it."""
        try:
            return await award_badge_by_code(self.db, user_id, code)
        except UnknownBadgeCode as e:
            logger.warning("%s", e)
            self.skipped.append(e)
            return False

    async def _award_all(self, user_id: int, codes: list[str]) -> list[str]:
        return [code for code in codes if await self.award_by_code(user_id, code)]

    async def _ascents_today(self, user_id: int) -> int:
        """Ascents whose local calendar date is today."""
        today = self._now().astimezone(self.tz).date()
        start = datetime.combine(today, time.min, tzinfo=self.tz)
        end = datetime.combine(today + timedelta(days=1), time.min, tzinfo=self.tz)
        result = await self.db.execute(
            select(func.count()).select_from(UserPeak).where(
                UserPeak.user_id == user_id,
                UserPeak.marked_at >= start.astimezone(timezone.utc),
                UserPeak.marked_at < end.astimezone(timezone.utc),
            )
        )
        return result.scalar_one()

    async def _latest_ascent_at(self, user_id: int, peak_id: int) -> datetime | None:
        result = await self.db.execute(
            select(UserPeak.marked_at)
            .where(UserPeak.user_id == user_id, UserPeak.peak_id == peak_id)
            .order_by(UserPeak.marked_at.desc())
            .limit(1)
        )
        marked_at = result.scalar_one_or_none()
        return as_utc(marked_at) if marked_at is not None else None

    async def evaluate_ascent(self, user_id: int, peak_id: int) -> list[str]:
        """Run the same-day and time-of-day rules after a peak is marked.

        Returns the codes newly awarded, in rule order.
        """
        codes: list[str] = []
        if await self._ascents_today(user_id) >= SAME_DAY_ASCENTS:
            codes.append(THREE_PEAKS_ONE_DAY)

        marked_at = await self._latest_ascent_at(user_id, peak_id)
        if marked_at is not None:
            local = marked_at.astimezone(self.tz)
            codes += [code for code, applies in ASCENT_TIME_RULES if applies(local)]

        return await self._award_all(user_id, codes)

    async def evaluate_ascent_full(self, user_id: int, peak_id: int) -> AscentAwards:
        """Threshold badges first, then the named ascent rules."""
        badges = await award_threshold_badges(self.db, user_id)
        special = await self.evaluate_ascent(user_id, peak_id)
        return AscentAwards(badges=badges, special_codes=special)

    async def evaluate_emergency_card(self, user_id: int, card: EmergencyCard) -> list[str]:
        """Run the safety-data rules after an emergency card is saved."""
        codes: list[str] = []
        if has_safety_data(card):
            codes.append(SAFETY_CARD_FILLED)
        if has_todays_plan(card):
            codes.append(TODAYS_PLAN_SET)
        return await self._award_all(user_id, codes)
