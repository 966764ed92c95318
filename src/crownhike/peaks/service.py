"""Peaks catalogue queries."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from sqlalchemy import select

from crownhike.config import get_settings
from crownhike.db.models import Peak

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncSession

_SORT_COLUMNS = {
    "name": Peak.name,
    "height": Peak.height_m,
    "difficulty": Peak.difficulty,
}


@dataclass(frozen=True)
class PeakQuery:
    """Normalized listing parameters."""

    page: int = 1
    limit: int = 50
    difficulty: str | None = None
    main_trail_color: str | None = None
    mountain_range: str | None = None
    search: str | None = None
    sort: str = "height"
    descending: bool = True

    @classmethod
    def from_params(
        cls,
        page: int | None = None,
        limit: int | None = None,
        difficulty: str | None = None,
        main_trail_color: str | None = None,
        mountain_range: str | None = None,
        search: str | None = None,
        sort: str | None = None,
        direction: str | None = None,
    ) -> PeakQuery:
        """Apply defaults: non-positive paging falls back, limit is capped, unknown sort means height."""
        settings = get_settings()
        page = page if page is not None and page > 0 else 1
        limit = limit if limit is not None and limit > 0 else settings.peaks_page_size
        limit = min(limit, settings.peaks_page_size_max)

        sort = sort if sort in _SORT_COLUMNS else "height"
        direction = (direction or "").lower()
        if direction in ("asc", "desc"):
            descending = direction == "desc"
        else:
            # Tallest first by default; alphabetical otherwise
            descending = sort == "height"

        return cls(
            page=page,
            limit=limit,
            difficulty=difficulty or None,
            main_trail_color=main_trail_color or None,
            mountain_range=mountain_range or None,
            search=search or None,
            sort=sort,
            descending=descending,
        )


async def list_peaks(db: AsyncSession, query: PeakQuery) -> list[Peak]:
    stmt = select(Peak)
    if query.difficulty:
        stmt = stmt.where(Peak.difficulty == query.difficulty)
    if query.main_trail_color:
        stmt = stmt.where(Peak.main_trail_color == query.main_trail_color)
    if query.mountain_range:
        stmt = stmt.where(Peak.mountain_range == query.mountain_range)
    if query.search:
        stmt = stmt.where(Peak.name.contains(query.search, autoescape=True))

    column = _SORT_COLUMNS[query.sort]
    stmt = stmt.order_by(column.desc() if query.descending else column.asc(), Peak.id)
    stmt = stmt.limit(query.limit).offset((query.page - 1) * query.limit)

    result = await db.execute(stmt)
    return list(result.scalars().all())


async def get_peak(db: AsyncSession, peak_id: int) -> Peak | None:
    result = await db.execute(select(Peak).where(Peak.id == peak_id))
    return result.scalar_one_or_none()
