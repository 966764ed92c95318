"""Emergency card endpoints: /api/emergency/me."""

from __future__ import annotations

import structlog
from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from crownhike.auth.dependencies import get_current_user
from crownhike.badges.engine import BadgeEngine
from crownhike.database import get_session
from crownhike.db.models import User
from crownhike.emergency.schemas import EmergencyCardFields, EmergencyCardResponse
from crownhike.emergency.service import get_card, upsert_card
from crownhike.schemas import OkResponse

logger = structlog.get_logger()

router = APIRouter(prefix="/api/emergency", tags=["Emergency"])


@router.get("/me", response_model=EmergencyCardResponse)
async def get_my_card(
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_session),
) -> EmergencyCardResponse:
    card = await get_card(db, user.id)
    data = EmergencyCardFields.model_validate(card).model_dump() if card is not None else {}
    return EmergencyCardResponse(data=data)


@router.put("/me", response_model=OkResponse, response_model_exclude_none=True)
async def put_my_card(
    body: EmergencyCardFields,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_session),
) -> OkResponse:
    """Replace the card, then award the safety badges it qualifies for."""
    user_id = user.id
    card = await upsert_card(db, user_id, body.model_dump())
    await db.commit()

    engine = BadgeEngine(db)
    awarded = await engine.evaluate_emergency_card(user_id, card)
    await db.commit()
    if awarded:
        logger.info("safety_badges_awarded", user_id=user_id, codes=awarded)
    return OkResponse()
