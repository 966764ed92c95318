"""Badge catalogue and per-user badge endpoints."""

from __future__ import annotations

import pytest

from crownhike.badges.seed import BADGE_SEED_DATA
from tests.factories import make_ascent


class TestCatalogue:
    @pytest.mark.asyncio
    async def test_public_catalogue(self, client):
        response = await client.get("/api/badges")
        assert response.status_code == 200
        data = response.json()["data"]
        assert len(data) == len(BADGE_SEED_DATA)
        assert data[0] == {
            "id": data[0]["id"],
            "code": "TATRA_1",
            "name": "First Summit",
            "description": "Mark your first peak as climbed",
            "required_peaks": 1,
        }
        assert [b["id"] for b in data] == sorted(b["id"] for b in data)


class TestUserBadges:
    @pytest.mark.asyncio
    async def test_requires_auth(self, client):
        response = await client.get("/api/badges/user")
        assert response.status_code == 401

    @pytest.mark.asyncio
    async def test_empty_for_new_user(self, authed_client):
        response = await authed_client.get("/api/badges/user")
        assert response.json() == {"ok": True, "data": []}


class TestAwardTest:
    @pytest.mark.asyncio
    async def test_awards_thresholds_once(self, authed_client, db_session, user, peaks):
        for peak in peaks[:3]:
            await make_ascent(db_session, user.id, peak.id)

        first = await authed_client.post("/api/badges/award-test")
        assert first.status_code == 200
        assert [b["code"] for b in first.json()["awarded"]] == ["TATRA_1", "TATRA_3"]

        second = await authed_client.post("/api/badges/award-test")
        assert second.json() == {"ok": True, "awarded": []}

        held = await authed_client.get("/api/badges/user")
        assert [b["code"] for b in held.json()["data"]] == ["TATRA_1", "TATRA_3"]
