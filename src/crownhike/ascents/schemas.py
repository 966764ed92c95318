"""Schemas for marking peaks and listing a user's ascents."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from crownhike.badges.schemas import BadgeResponse
from crownhike.db.models import UserPeak
from crownhike.schemas import UtcDatetime


class MarkPeakRequest(BaseModel):
    """Optional position and photo captured at the summit."""

    lat: float | None = Field(None, ge=-90, le=90)
    lng: float | None = Field(None, ge=-180, le=180)
    photo_url: str | None = Field(None, max_length=512)


class MarkPeakResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    ok: bool = True
    message: str
    awarded_badges: list[BadgeResponse] = Field(default_factory=list, serialization_alias="awardedBadges")
    awarded_special_badges: list[str] = Field(default_factory=list, serialization_alias="awardedSpecialBadges")


class AscentResponse(BaseModel):
    id: int
    peak_id: int
    marked_at: UtcDatetime
    name: str
    height_m: int
    mountain_range: str | None = None
    lat: float | None = None
    lng: float | None = None
    photo_url: str | None = None

    @classmethod
    def from_ascent(cls, ascent: UserPeak) -> AscentResponse:
        """Flatten an ascent with its peak. lat/lng are the summit's coordinates."""
        return cls(
            id=ascent.id,
            peak_id=ascent.peak_id,
            marked_at=ascent.marked_at,
            name=ascent.peak.name,
            height_m=ascent.peak.height_m,
            mountain_range=ascent.peak.mountain_range,
            lat=ascent.peak.lat,
            lng=ascent.peak.lng,
            photo_url=ascent.photo_url,
        )


class AscentListResponse(BaseModel):
    ok: bool = True
    count: int
    data: list[AscentResponse]
