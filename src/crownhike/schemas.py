"""Schema types shared across routers."""

from __future__ import annotations

from datetime import datetime
from typing import Annotated

from pydantic import AfterValidator, BaseModel

from crownhike.db.models import as_utc

# SQLite hands back naive datetimes; every stored value is UTC
UtcDatetime = Annotated[datetime, AfterValidator(as_utc)]


class OkResponse(BaseModel):
    ok: bool = True
    message: str | None = None
