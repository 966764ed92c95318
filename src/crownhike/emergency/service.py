"""Emergency card persistence."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

import structlog
from sqlalchemy import select

from crownhike.badges.service import dialect_insert
from crownhike.db.models import EmergencyCard

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncSession

logger = structlog.get_logger()

CARD_FIELDS = (
    "phone",
    "emergency_contact_name",
    "emergency_contact_phone",
    "blood_type",
    "address_street",
    "address_house_number",
    "address_postal_code",
    "address_city",
    "allergies",
    "medications",
    "todays_plan",
)


async def get_card(db: AsyncSession, user_id: int) -> EmergencyCard | None:
    result = await db.execute(
        select(EmergencyCard).where(EmergencyCard.user_id == user_id).execution_options(populate_existing=True)
    )
    return result.scalar_one_or_none()


async def upsert_card(db: AsyncSession, user_id: int, fields: dict[str, Any]) -> EmergencyCard:
    """Insert or fully replace the user's card. Fields not supplied are stored as NULL."""
    values = {name: fields.get(name) for name in CARD_FIELDS}
    insert = dialect_insert(db)
    stmt = insert(EmergencyCard).values(user_id=user_id, **values)
    stmt = stmt.on_conflict_do_update(
        index_elements=["user_id"],
        set_={name: stmt.excluded[name] for name in CARD_FIELDS},
    )
    await db.execute(stmt)

    card = await get_card(db, user_id)
    if card is None:
        msg = f"Emergency card for user {user_id} missing after upsert"
        raise RuntimeError(msg)
    logger.info("emergency_card_saved", user_id=user_id)
    return card
