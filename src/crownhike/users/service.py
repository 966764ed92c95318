"""Account business logic: registration, profile, password and deletion."""

from __future__ import annotations

from typing import TYPE_CHECKING

import structlog
from sqlalchemy import delete, select
from sqlalchemy.exc import IntegrityError

from crownhike.auth.password import hash_password, validate_password_strength, verify_password
from crownhike.db.models import EmergencyCard, Hike, HikePoint, User, UserBadge, UserPeak

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncSession

logger = structlog.get_logger()


class EmailTakenError(ValueError):
    """Raised when registering an email that already has an account."""


class InvalidPasswordError(ValueError):
    """Raised when the supplied current password does not match."""


class NothingToUpdateError(ValueError):
    """Raised when a profile update carries no applicable field."""


async def get_user_by_id(db: AsyncSession, user_id: int) -> User | None:
    result = await db.execute(select(User).where(User.id == user_id))
    return result.scalar_one_or_none()


async def get_user_by_email(db: AsyncSession, email: str) -> User | None:
    result = await db.execute(select(User).where(User.email == email.lower()))
    return result.scalar_one_or_none()


async def register_user(db: AsyncSession, username: str, email: str, password: str) -> User:
    """
    Create a new account.

    Raises:
        PasswordStrengthError: If the password is outside the allowed length.
        EmailTakenError: If the email is already registered.
    """
    validate_password_strength(password)

    if await get_user_by_email(db, email) is not None:
        msg = "Email already registered"
        raise EmailTakenError(msg)

    user = User(username=username, email=email.lower(), password_hash=hash_password(password))
    db.add(user)
    try:
        await db.flush()
    except IntegrityError as e:
        # Concurrent registration won the unique index
        await db.rollback()
        msg = "Email already registered"
        raise EmailTakenError(msg) from e

    logger.info("user_registered", user_id=user.id)
    return user


async def update_profile(
    db: AsyncSession,
    user: User,
    username: str | None = None,
    allow_location_sharing: bool | None = None,
) -> User:
    """
    Apply profile changes. Blank usernames are ignored.

    Raises:
        NothingToUpdateError: If no field would change.
    """
    applied = False
    if username is not None and username.strip():
        user.username = username.strip()
        applied = True
    if allow_location_sharing is not None:
        user.allow_location_sharing = allow_location_sharing
        applied = True

    if not applied:
        msg = "No updatable fields"
        raise NothingToUpdateError(msg)

    await db.flush()
    return user


async def change_password(db: AsyncSession, user: User, old_password: str, new_password: str) -> None:
    """
    Replace the user's password after checking the current one.

    Raises:
        PasswordStrengthError: If the new password is outside the allowed length.
        InvalidPasswordError: If the old password is wrong.
    """
    validate_password_strength(new_password)
    if not verify_password(old_password, user.password_hash):
        msg = "Invalid old password"
        raise InvalidPasswordError(msg)

    user.password_hash = hash_password(new_password)
    await db.flush()


async def delete_user(db: AsyncSession, user_id: int) -> None:
    """Remove the account and every record it owns, children first."""
    hike_ids = select(Hike.id).where(Hike.user_id == user_id)
    await db.execute(delete(UserBadge).where(UserBadge.user_id == user_id))
    await db.execute(delete(UserPeak).where(UserPeak.user_id == user_id))
    await db.execute(delete(EmergencyCard).where(EmergencyCard.user_id == user_id))
    await db.execute(delete(HikePoint).where(HikePoint.hike_id.in_(hike_ids)))
    await db.execute(delete(Hike).where(Hike.user_id == user_id))
    await db.execute(delete(User).where(User.id == user_id))
    logger.info("user_deleted", user_id=user_id)
