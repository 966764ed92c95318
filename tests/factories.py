"""Row builders for tests. Each helper commits so HTTP requests can see the rows."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy.ext.asyncio import AsyncSession

from crownhike.auth.password import hash_password
from crownhike.db.models import Peak, User, UserPeak, utcnow

DEFAULT_PASSWORD = "secret123"


async def make_user(
    db: AsyncSession,
    email: str = "hiker@example.com",
    username: str = "hiker",
    password: str = DEFAULT_PASSWORD,
) -> User:
    user = User(username=username, email=email, password_hash=hash_password(password))
    db.add(user)
    await db.commit()
    return user


async def make_peak(
    db: AsyncSession,
    name: str,
    height_m: int,
    mountain_range: str | None = "Tatry Wysokie",
    difficulty: str | None = "MODERATE",
    main_trail_color: str | None = "RED",
    lat: float | None = None,
    lng: float | None = None,
) -> Peak:
    peak = Peak(
        name=name,
        height_m=height_m,
        mountain_range=mountain_range,
        difficulty=difficulty,
        main_trail_color=main_trail_color,
        lat=lat,
        lng=lng,
    )
    db.add(peak)
    await db.commit()
    return peak


async def make_ascent(db: AsyncSession, user_id: int, peak_id: int, marked_at: datetime | None = None) -> UserPeak:
    ascent = UserPeak(user_id=user_id, peak_id=peak_id, marked_at=marked_at or utcnow())
    db.add(ascent)
    await db.commit()
    return ascent
