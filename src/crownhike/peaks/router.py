"""Public peaks catalogue: /peaks endpoints."""

from __future__ import annotations

import structlog
from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.ext.asyncio import AsyncSession

from crownhike.database import get_session
from crownhike.peaks.directions import DirectionsClient, DirectionsError, RouteNotFound, get_directions_client
from crownhike.peaks.schemas import (
    PeakDetailResponse,
    PeakListResponse,
    PeakResponse,
    RouteData,
    RoutePoint,
    RouteResponse,
)
from crownhike.peaks.service import PeakQuery, get_peak, list_peaks

logger = structlog.get_logger()

router = APIRouter(prefix="/peaks", tags=["Peaks"])


def _check_id(peak_id: int) -> None:
    if peak_id <= 0:
        raise HTTPException(status_code=400, detail="Invalid id")


@router.get("", response_model=PeakListResponse)
async def list_all_peaks(
    page: int | None = Query(None),
    limit: int | None = Query(None),
    difficulty: str | None = Query(None),
    main_trail_color: str | None = Query(None),
    mountain_range: str | None = Query(None),
    search: str | None = Query(None),
    sort: str | None = Query(None),
    dir: str | None = Query(None),  # noqa: A002
    db: AsyncSession = Depends(get_session),
) -> PeakListResponse:
    """List peaks with optional filters, sorting and pagination."""
    query = PeakQuery.from_params(
        page=page,
        limit=limit,
        difficulty=difficulty,
        main_trail_color=main_trail_color,
        mountain_range=mountain_range,
        search=search,
        sort=sort,
        direction=dir,
    )
    peaks = await list_peaks(db, query)
    return PeakListResponse(
        page=query.page,
        limit=query.limit,
        count=len(peaks),
        data=[PeakResponse.model_validate(p) for p in peaks],
    )


@router.get("/{peak_id}", response_model=PeakDetailResponse)
async def get_one_peak(
    peak_id: int,
    db: AsyncSession = Depends(get_session),
) -> PeakDetailResponse:
    _check_id(peak_id)
    peak = await get_peak(db, peak_id)
    if peak is None:
        raise HTTPException(status_code=404, detail="Peak not found")
    return PeakDetailResponse(data=PeakResponse.model_validate(peak))


@router.get("/{peak_id}/route", response_model=RouteResponse)
async def get_route_to_peak(
    peak_id: int,
    lat: float = Query(..., ge=-90, le=90),
    lng: float = Query(..., ge=-180, le=180),
    db: AsyncSession = Depends(get_session),
    directions: DirectionsClient = Depends(get_directions_client),
) -> RouteResponse:
    """Walking route from the caller's position to the summit."""
    _check_id(peak_id)
    peak = await get_peak(db, peak_id)
    if peak is None or peak.lat is None or peak.lng is None:
        raise HTTPException(status_code=404, detail="Peak or coords not found")

    if not directions.configured:
        logger.error("directions_not_configured")
        raise HTTPException(status_code=500, detail="Server missing ORS key")

    try:
        route = await directions.route(lat, lng, peak.lat, peak.lng)
    except RouteNotFound as e:
        raise HTTPException(status_code=404, detail="Route not found") from e
    except DirectionsError as e:
        raise HTTPException(status_code=500, detail="Failed to fetch route") from e

    logger.info("route_computed", peak_id=peak_id, distance_m=route.distance_m)
    return RouteResponse(
        data=RouteData(
            path=[RoutePoint(lat=p_lat, lng=p_lng) for p_lat, p_lng in route.path],
            distance_m=route.distance_m,
            duration_s=route.duration_s,
        )
    )
