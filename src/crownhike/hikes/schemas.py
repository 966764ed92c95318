"""Hike request/response schemas. Wire names are camelCase on input."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from crownhike.db.models import Hike
from crownhike.schemas import UtcDatetime


class TrackPointIn(BaseModel):
    """Raw GPS fix. Values are coerced later; unusable points are dropped, not rejected."""

    lat: Any = None
    lng: Any = None


class HikeCreateRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    peak_id: int = Field(..., gt=0, alias="peakId")
    started_at: UtcDatetime = Field(..., alias="startedAt")
    duration_sec: int = Field(..., ge=0, alias="durationSec")
    track_distance_km: float = Field(..., ge=0, alias="trackDistanceKm")
    straight_distance_km: float | None = Field(None, ge=0, alias="straightDistanceKm")
    track: list[TrackPointIn] = Field(..., min_length=1)


class HikeIdData(BaseModel):
    id: int


class HikeCreatedResponse(BaseModel):
    ok: bool = True
    data: HikeIdData


class HikeSummary(BaseModel):
    id: int
    peak_id: int
    peak_name: str
    peak_height_m: int
    peak_range: str | None = None
    started_at: UtcDatetime
    duration_sec: int
    track_distance_km: float
    straight_distance_km: float | None = None
    created_at: UtcDatetime

    @classmethod
    def from_hike(cls, hike: Hike, **extra: Any) -> HikeSummary:
        return cls(
            id=hike.id,
            peak_id=hike.peak_id,
            peak_name=hike.peak.name,
            peak_height_m=hike.peak.height_m,
            peak_range=hike.peak.mountain_range,
            started_at=hike.started_at,
            duration_sec=hike.duration_sec,
            track_distance_km=hike.track_distance_km,
            straight_distance_km=hike.straight_distance_km,
            created_at=hike.created_at,
            **extra,
        )


class HikeListResponse(BaseModel):
    ok: bool = True
    count: int
    data: list[HikeSummary]


class TrackPointOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    seq: int
    lat: float
    lng: float


class HikeDetail(HikeSummary):
    user_id: int
    track: list[TrackPointOut]


class HikeDetailResponse(BaseModel):
    ok: bool = True
    data: HikeDetail
