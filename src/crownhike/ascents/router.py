"""Marking peaks as climbed: POST /peaks/{id}/mark and GET /me/peaks."""

from __future__ import annotations

import structlog
from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession

from crownhike.ascents.schemas import AscentListResponse, AscentResponse, MarkPeakRequest, MarkPeakResponse
from crownhike.ascents.service import DuplicateAscentError, list_ascents, record_ascent
from crownhike.auth.dependencies import get_current_user
from crownhike.badges.engine import BadgeEngine
from crownhike.badges.schemas import BadgeResponse
from crownhike.database import get_session
from crownhike.db.models import User
from crownhike.peaks.service import get_peak

logger = structlog.get_logger()

router = APIRouter(tags=["Ascents"])


@router.post("/peaks/{peak_id}/mark", response_model=MarkPeakResponse, status_code=201)
async def mark_peak(
    peak_id: int,
    body: MarkPeakRequest | None = None,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_session),
) -> MarkPeakResponse:
    """Record an ascent, then award any badges it unlocks.

    The ascent is committed before badge evaluation, so a failure while
    awarding never removes the ascent.
    """
    if peak_id <= 0:
        raise HTTPException(status_code=400, detail="Invalid peak id")

    peak = await get_peak(db, peak_id)
    if peak is None:
        raise HTTPException(status_code=404, detail="Peak not found")
    peak_name = peak.name
    user_id = user.id

    body = body or MarkPeakRequest()
    try:
        await record_ascent(db, user_id, peak_id, lat=body.lat, lng=body.lng, photo_url=body.photo_url)
    except DuplicateAscentError as e:
        raise HTTPException(status_code=400, detail=str(e)) from e
    await db.commit()

    engine = BadgeEngine(db)
    awards = await engine.evaluate_ascent_full(user_id, peak_id)
    await db.commit()

    logger.info(
        "peak_marked",
        user_id=user_id,
        peak_id=peak_id,
        badges=[b.code for b in awards.badges],
        special=awards.special_codes,
        skipped=[e.code for e in engine.skipped],
    )
    return MarkPeakResponse(
        message=f"Marked peak: {peak_name}",
        awarded_badges=[BadgeResponse.model_validate(b) for b in awards.badges],
        awarded_special_badges=awards.special_codes,
    )


@router.get("/me/peaks", response_model=AscentListResponse)
async def my_peaks(
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_session),
) -> AscentListResponse:
    ascents = await list_ascents(db, user.id)
    return AscentListResponse(count=len(ascents), data=[AscentResponse.from_ascent(a) for a in ascents])
