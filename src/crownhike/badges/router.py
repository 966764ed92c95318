"""Badge catalogue and per-user badge endpoints."""

from __future__ import annotations

import structlog
from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from crownhike.auth.dependencies import get_current_user
from crownhike.badges.schemas import AwardTestResponse, BadgeListResponse, BadgeResponse
from crownhike.badges.service import award_threshold_badges, list_badges, list_user_badges
from crownhike.database import get_session
from crownhike.db.models import User

logger = structlog.get_logger()

router = APIRouter(prefix="/api/badges", tags=["Badges"])


# ── Public endpoints ──


@router.get("", response_model=BadgeListResponse)
async def get_catalogue(db: AsyncSession = Depends(get_session)) -> BadgeListResponse:
    """All badge definitions ordered by id."""
    badges = await list_badges(db)
    return BadgeListResponse(data=[BadgeResponse.model_validate(b) for b in badges])


# ── Authenticated endpoints ──


@router.get("/user", response_model=BadgeListResponse)
async def get_my_badges(
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_session),
) -> BadgeListResponse:
    badges = await list_user_badges(db, user.id)
    return BadgeListResponse(data=[BadgeResponse.model_validate(b) for b in badges])


@router.post("/award-test", response_model=AwardTestResponse)
async def award_test(
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_session),
) -> AwardTestResponse:
    """Re-run the distinct-peaks threshold award for the caller."""
    awarded = await award_threshold_badges(db, user.id)
    await db.commit()
    logger.info("award_test", user_id=user.id, awarded=len(awarded))
    return AwardTestResponse(awarded=[BadgeResponse.model_validate(b) for b in awarded])
