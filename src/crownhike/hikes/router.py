"""Recorded hikes: /hikes endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession

from crownhike.auth.dependencies import get_current_user
from crownhike.database import get_session
from crownhike.db.models import User
from crownhike.hikes.schemas import (
    HikeCreatedResponse,
    HikeCreateRequest,
    HikeDetail,
    HikeDetailResponse,
    HikeIdData,
    HikeListResponse,
    HikeSummary,
    TrackPointOut,
)
from crownhike.hikes.service import get_hike, list_hikes, record_hike
from crownhike.peaks.service import get_peak

router = APIRouter(prefix="/hikes", tags=["Hikes"])


@router.get("", response_model=HikeListResponse)
async def my_hikes(
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_session),
) -> HikeListResponse:
    hikes = await list_hikes(db, user.id)
    return HikeListResponse(count=len(hikes), data=[HikeSummary.from_hike(h) for h in hikes])


@router.get("/{hike_id}", response_model=HikeDetailResponse)
async def hike_detail(
    hike_id: int,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_session),
) -> HikeDetailResponse:
    """One of the caller's hikes with its track. Other users' hikes are 404."""
    if hike_id <= 0:
        raise HTTPException(status_code=400, detail="Invalid hike id")
    hike = await get_hike(db, user.id, hike_id)
    if hike is None:
        raise HTTPException(status_code=404, detail="Hike not found")

    return HikeDetailResponse(
        data=HikeDetail.from_hike(
            hike,
            user_id=hike.user_id,
            track=[TrackPointOut.model_validate(p) for p in hike.points],
        )
    )


@router.post("", response_model=HikeCreatedResponse, status_code=201)
async def create_hike(
    body: HikeCreateRequest,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_session),
) -> HikeCreatedResponse:
    if await get_peak(db, body.peak_id) is None:
        raise HTTPException(status_code=404, detail="Peak not found")

    hike_id = await record_hike(
        db,
        user_id=user.id,
        peak_id=body.peak_id,
        started_at=body.started_at,
        duration_sec=body.duration_sec,
        track_distance_km=body.track_distance_km,
        straight_distance_km=body.straight_distance_km,
        track=body.track,
    )
    return HikeCreatedResponse(data=HikeIdData(id=hike_id))
