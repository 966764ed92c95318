"""Emergency card API and the safety badges it triggers."""

from __future__ import annotations

import pytest
from sqlalchemy import select

from crownhike.badges.engine import BadgeEngine
from crownhike.db.models import EmergencyCard


async def _my_badge_codes(client) -> list[str]:
    response = await client.get("/api/badges/user")
    return [b["code"] for b in response.json()["data"]]


class TestEmergencyCard:
    @pytest.mark.asyncio
    async def test_no_card_yet(self, authed_client):
        response = await authed_client.get("/api/emergency/me")
        assert response.status_code == 200
        assert response.json() == {"ok": True, "data": {}}

    @pytest.mark.asyncio
    async def test_put_then_get(self, authed_client):
        response = await authed_client.put(
            "/api/emergency/me",
            json={"phone": "+48 600 100 200", "blood_type": "A Rh+", "todays_plan": "Rysy from Palenica"},
        )
        assert response.status_code == 200
        assert response.json() == {"ok": True}

        data = (await authed_client.get("/api/emergency/me")).json()["data"]
        assert data["phone"] == "+48 600 100 200"
        assert data["blood_type"] == "A Rh+"
        assert data["todays_plan"] == "Rysy from Palenica"
        assert data["allergies"] is None
        assert len(data) == 11

    @pytest.mark.asyncio
    async def test_put_replaces_whole_card(self, authed_client):
        await authed_client.put("/api/emergency/me", json={"phone": "123", "allergies": "nuts"})
        await authed_client.put("/api/emergency/me", json={"medications": "insulin"})

        data = (await authed_client.get("/api/emergency/me")).json()["data"]
        assert data["phone"] is None
        assert data["allergies"] is None
        assert data["medications"] == "insulin"

    @pytest.mark.asyncio
    async def test_awards_safety_badges(self, authed_client):
        await authed_client.put(
            "/api/emergency/me",
            json={"emergency_contact_name": "Anna", "todays_plan": "Giewont loop"},
        )
        assert await _my_badge_codes(authed_client) == ["SAFETY_CARD_FILLED", "TODAYS_PLAN_SET"]

        # Repeating the update awards nothing twice
        await authed_client.put(
            "/api/emergency/me",
            json={"emergency_contact_name": "Anna", "todays_plan": "Giewont loop"},
        )
        assert await _my_badge_codes(authed_client) == ["SAFETY_CARD_FILLED", "TODAYS_PLAN_SET"]

    @pytest.mark.asyncio
    async def test_blank_plan_and_no_safety_data(self, authed_client):
        await authed_client.put("/api/emergency/me", json={"todays_plan": "   ", "allergies": "pollen"})
        assert await _my_badge_codes(authed_client) == []

    @pytest.mark.asyncio
    async def test_field_too_long(self, authed_client):
        response = await authed_client.put("/api/emergency/me", json={"blood_type": "x" * 50})
        assert response.status_code == 400

    @pytest.mark.asyncio
    async def test_requires_auth(self, client):
        response = await client.get("/api/emergency/me")
        assert response.status_code == 401


class TestBadgeFailure:
    @pytest.mark.asyncio
    async def test_engine_error_keeps_card(self, failing_client, db_session, user, monkeypatch):
        async def broken(self, user_id, card):
            raise RuntimeError("badge store unavailable")

        monkeypatch.setattr(BadgeEngine, "evaluate_emergency_card", broken)

        response = await failing_client.put("/api/emergency/me", json={"phone": "+48 600 100 200"})
        assert response.status_code == 500

        result = await db_session.execute(select(EmergencyCard.phone).where(EmergencyCard.user_id == user.id))
        assert result.scalar_one() == "+48 600 100 200"
