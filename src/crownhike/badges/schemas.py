"""Pydantic response models for badge endpoints."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict


class BadgeResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    code: str
    name: str
    description: str | None = None
    required_peaks: int | None = None


class BadgeListResponse(BaseModel):
    ok: bool = True
    data: list[BadgeResponse]


class AwardTestResponse(BaseModel):
    ok: bool = True
    awarded: list[BadgeResponse]
