"""Response schemas for the peaks catalogue."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class PeakResponse(BaseModel):
    """A peak as exposed to clients: mountain_range as region, height_m as elevation_m."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    region: str | None = Field(None, validation_alias="mountain_range")
    elevation_m: int = Field(..., validation_alias="height_m")
    difficulty: str | None = None
    main_trail_color: str | None = None
    lat: float | None = None
    lng: float | None = None
    description: str | None = None


class PeakListResponse(BaseModel):
    ok: bool = True
    page: int
    limit: int
    count: int
    data: list[PeakResponse]


class PeakDetailResponse(BaseModel):
    ok: bool = True
    data: PeakResponse


class RoutePoint(BaseModel):
    lat: float
    lng: float


class RouteData(BaseModel):
    path: list[RoutePoint]
    distance_m: float = Field(..., serialization_alias="distanceM")
    duration_s: float = Field(..., serialization_alias="durationS")


class RouteResponse(BaseModel):
    ok: bool = True
    data: RouteData
