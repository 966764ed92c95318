"""Hike recording: point coercion and transactional behaviour."""

from __future__ import annotations

from datetime import datetime, timezone

import pytest
from sqlalchemy import func, select

from crownhike.db.models import Hike, HikePoint
from crownhike.hikes import service
from crownhike.hikes.schemas import TrackPointIn
from crownhike.hikes.service import _coerce, get_hike, list_hikes, record_hike

STARTED = datetime(2025, 8, 2, 6, 15, tzinfo=timezone.utc)


async def _count(db, model) -> int:
    result = await db.execute(select(func.count()).select_from(model))
    return result.scalar_one()


class TestCoerce:
    def test_numbers_and_numeric_strings(self):
        assert _coerce(49.1) == 49.1
        assert _coerce("20.5") == 20.5
        assert _coerce(3) == 3.0

    def test_rejects_non_numeric_and_non_finite(self):
        assert _coerce(None) is None
        assert _coerce("abc") is None
        assert _coerce(float("nan")) is None
        assert _coerce(float("inf")) is None
        assert _coerce({"lat": 1}) is None


class TestRecordHike:
    @pytest.mark.asyncio
    async def test_drops_invalid_points_and_keeps_index(self, db_session, user, peaks):
        track = [
            TrackPointIn(lat=49.20, lng=20.00),
            TrackPointIn(lat=float("inf"), lng=20.01),
            TrackPointIn(lat="49.22", lng="20.02"),
        ]
        hike_id = await record_hike(
            db_session,
            user_id=user.id,
            peak_id=peaks[0].id,
            started_at=STARTED,
            duration_sec=3600,
            track_distance_km=7.5,
            track=track,
        )

        hike = await get_hike(db_session, user.id, hike_id)
        assert hike is not None
        assert [(p.seq, p.lat, p.lng) for p in hike.points] == [(0, 49.20, 20.00), (2, 49.22, 20.02)]
        assert hike.straight_distance_km is None

    @pytest.mark.asyncio
    async def test_forced_failure_persists_nothing(self, db_session, user, peaks, monkeypatch):
        user_id, peak_id = user.id, peaks[0].id

        def explode(hike_id, track):
            raise RuntimeError("disk full")

        monkeypatch.setattr(service, "_track_rows", explode)

        with pytest.raises(RuntimeError, match="disk full"):
            await record_hike(
                db_session,
                user_id=user_id,
                peak_id=peak_id,
                started_at=STARTED,
                duration_sec=60,
                track_distance_km=1.0,
                track=[TrackPointIn(lat=49.2, lng=20.0)],
            )

        assert await _count(db_session, Hike) == 0
        assert await _count(db_session, HikePoint) == 0

    @pytest.mark.asyncio
    async def test_other_users_hike_is_hidden(self, db_session, user, peaks):
        hike_id = await record_hike(
            db_session,
            user_id=user.id,
            peak_id=peaks[1].id,
            started_at=STARTED,
            duration_sec=60,
            track_distance_km=1.0,
            track=[TrackPointIn(lat=49.2, lng=20.0)],
        )
        assert await get_hike(db_session, user.id + 1, hike_id) is None
        assert [h.id for h in await list_hikes(db_session, user.id)] == [hike_id]
