"""Record Store: weight records keyed by date plus the singleton settings row.

`RecordStore` is the interface the rest of the app talks to. `SqlRecordStore`
is the server-side implementation over an async SQLAlchemy session; the HTTP
client in `app.client` implements the same protocol for remote callers.
"""

from __future__ import annotations

import calendar
import logging
from collections.abc import Iterator
from contextlib import contextmanager
from datetime import date, datetime, timezone
from typing import Optional, Protocol

from sqlalchemy import delete, desc, select
from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.constants import SETTINGS_ROW_ID
from app.core.errors import StoreError
from app.models.user_settings import UserSettings
from app.models.weight_record import WeightRecord
from app.schemas.settings import UserSettingsRead, UserSettingsUpdate
from app.schemas.weight import WeightRecordCreate, WeightRecordRead, WeightRecordUpdate

logger = logging.getLogger(__name__)


class RecordStore(Protocol):
    """Generic table operations over `date -> {weight, memo}` and the settings row."""

    async def list_records(
        self, year: Optional[int] = None, month: Optional[int] = None
    ) -> list[WeightRecordRead]:
        """Newest date first. Filters to one calendar month when both are given."""
        ...

    async def get_record(self, day: date) -> Optional[WeightRecordRead]:
        ...

    async def upsert_record(self, payload: WeightRecordCreate) -> WeightRecordRead:
        ...

    async def update_record(self, day: date, payload: WeightRecordUpdate) -> Optional[WeightRecordRead]:
        ...

    async def delete_record(self, day: date) -> None:
        ...

    async def get_settings(self) -> UserSettingsRead:
        ...

    async def put_settings(self, payload: UserSettingsUpdate) -> UserSettingsRead:
        ...


def month_range(year: int, month: int) -> tuple[date, date]:
    """First and last day of a calendar month."""
    last_day = calendar.monthrange(year, month)[1]
    return date(year, month, 1), date(year, month, last_day)


@contextmanager
def _store_errors(operation: str) -> Iterator[None]:
    """Translate driver/ORM failures into StoreError."""
    try:
        yield
    except SQLAlchemyError as e:
        logger.exception("Record store %s failed: %s", operation, e)
        raise StoreError(f"{operation} failed") from e


def list_records_stmt(year: Optional[int] = None, month: Optional[int] = None):
    """Newest first; one calendar month when both year and month are given."""
    stmt = select(WeightRecord).order_by(desc(WeightRecord.date))
    if year is not None and month is not None:
        start, end = month_range(year, month)
        stmt = stmt.where(WeightRecord.date >= start, WeightRecord.date <= end)
    return stmt


def upsert_record_stmt(payload: WeightRecordCreate, now: datetime):
    """INSERT ... ON CONFLICT (date) DO UPDATE ... RETURNING the stored row."""
    stmt = pg_insert(WeightRecord).values(
        date=payload.date,
        weight=payload.weight,
        memo=payload.memo,
        updated_at=now,
    )
    stmt = stmt.on_conflict_do_update(
        index_elements=[WeightRecord.date],
        set_={"weight": stmt.excluded.weight, "memo": stmt.excluded.memo, "updated_at": now},
    ).returning(WeightRecord)
    return stmt.execution_options(populate_existing=True)


def put_settings_stmt(payload: UserSettingsUpdate, now: datetime):
    """Full replace of the singleton row: ON CONFLICT (id) overwrites both fields."""
    stmt = pg_insert(UserSettings).values(
        id=SETTINGS_ROW_ID,
        target_weight=payload.target_weight,
        height=payload.height,
        updated_at=now,
    )
    stmt = stmt.on_conflict_do_update(
        index_elements=[UserSettings.id],
        set_={
            "target_weight": stmt.excluded.target_weight,
            "height": stmt.excluded.height,
            "updated_at": now,
        },
    ).returning(UserSettings)
    return stmt.execution_options(populate_existing=True)


class SqlRecordStore:
    """RecordStore backed by PostgreSQL. The session is committed by get_db."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def list_records(
        self, year: Optional[int] = None, month: Optional[int] = None
    ) -> list[WeightRecordRead]:
        with _store_errors("list"):
            result = await self.db.execute(list_records_stmt(year, month))
            rows = result.scalars().all()
        return [WeightRecordRead.model_validate(r) for r in rows]

    async def get_record(self, day: date) -> Optional[WeightRecordRead]:
        with _store_errors("get"):
            result = await self.db.execute(select(WeightRecord).where(WeightRecord.date == day))
            record = result.scalar_one_or_none()
        return WeightRecordRead.model_validate(record) if record else None

    async def upsert_record(self, payload: WeightRecordCreate) -> WeightRecordRead:
        """Insert or overwrite the entry for payload.date (last write wins)."""
        stmt = upsert_record_stmt(payload, datetime.now(timezone.utc))
        with _store_errors("upsert"):
            result = await self.db.execute(stmt)
            record = result.scalar_one()
        return WeightRecordRead.model_validate(record)

    async def update_record(self, day: date, payload: WeightRecordUpdate) -> Optional[WeightRecordRead]:
        """Overwrite weight and memo of an existing entry. None when the day has no entry."""
        with _store_errors("update"):
            result = await self.db.execute(select(WeightRecord).where(WeightRecord.date == day))
            record = result.scalar_one_or_none()
            if record is None:
                return None
            record.weight = payload.weight
            record.memo = payload.memo
            record.updated_at = datetime.now(timezone.utc)
            await self.db.flush()
            await self.db.refresh(record)
        return WeightRecordRead.model_validate(record)

    async def delete_record(self, day: date) -> None:
        """Idempotent: deleting an absent day is a no-op."""
        with _store_errors("delete"):
            await self.db.execute(delete(WeightRecord).where(WeightRecord.date == day))

    async def get_settings(self) -> UserSettingsRead:
        """The singleton settings row, or defaults when it was never saved."""
        with _store_errors("settings-get"):
            result = await self.db.execute(select(UserSettings).where(UserSettings.id == SETTINGS_ROW_ID))
            row = result.scalar_one_or_none()
        if row is None:
            return UserSettingsRead()
        return UserSettingsRead.model_validate(row)

    async def put_settings(self, payload: UserSettingsUpdate) -> UserSettingsRead:
        """Full replace of the settings row."""
        stmt = put_settings_stmt(payload, datetime.now(timezone.utc))
        with _store_errors("settings-put"):
            result = await self.db.execute(stmt)
            row = result.scalar_one()
        return UserSettingsRead.model_validate(row)
