"""Calendar reconciliation: the in-memory date -> record index behind the month view.

The index accumulates across month navigation (fetched months are merged, not
replaced) and is patched from store responses after save/delete so the visible
calendar matches persisted state without a refetch.
"""

from __future__ import annotations

import calendar
import logging
from collections import OrderedDict
from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional, Union

from pydantic import ValidationError

from app.core.enums import EntryMode
from app.core.errors import RecordValidationError
from app.schemas.weight import WeightRecordCreate, WeightRecordRead
from app.services.record_store import RecordStore

logger = logging.getLogger(__name__)

DayLike = Union[date, datetime, str]


def day_key(value: DayLike) -> date:
    """Normalize to a calendar day.

    A datetime keeps its own wall-clock date (no UTC conversion), so an entry
    made late in the evening never lands on the next day.
    """
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    return date.fromisoformat(value[:10])


def _selected_day(value: DayLike) -> date:
    try:
        return day_key(value)
    except (TypeError, ValueError) as e:
        raise RecordValidationError(f"invalid date: {value!r}") from e


@dataclass(frozen=True)
class DateSelection:
    day: date
    mode: EntryMode
    record: Optional[WeightRecordRead] = None


@dataclass(frozen=True)
class CalendarTile:
    day: date
    weight: Optional[float]
    has_record: bool
    is_today: bool


class CalendarSync:
    """Keeps the calendar's record index consistent with the store.

    Responses are applied keyed by date. A month fetch that was issued before a
    local save/delete of some day will not overwrite that day when it lands.
    """

    def __init__(self, store: RecordStore, max_cached_months: Optional[int] = None):
        self.store = store
        self.max_cached_months = max_cached_months
        self.index: dict[date, WeightRecordRead] = {}
        # (year, month) in fetch order, most recent last
        self._months: OrderedDict[tuple[int, int], None] = OrderedDict()
        self._generation = 0
        self._written_at: dict[date, int] = {}
        # start generations of month fetches still awaiting the store
        self._pending: list[int] = []

    def _touch(self, day: date) -> None:
        self._generation += 1
        self._written_at[day] = self._generation
        self._prune_writes()

    def _prune_writes(self) -> None:
        """Drop write generations that no in-flight fetch started before."""
        if not self._pending:
            self._written_at.clear()
            return
        oldest = min(self._pending)
        for day in [d for d, gen in self._written_at.items() if gen <= oldest]:
            del self._written_at[day]

    async def on_month_change(self, year: int, month: int) -> list[WeightRecordRead]:
        """Fetch one month and merge it into the index. Other months are untouched."""
        started = self._generation
        self._pending.append(started)
        try:
            records = await self.store.list_records(year=year, month=month)
            merged = 0
            for record in records:
                day = day_key(record.date)
                if self._written_at.get(day, 0) > started:
                    logger.debug("Skipping stale %s from month fetch %d-%02d", day, year, month)
                    continue
                self.index[day] = record
                merged += 1
        finally:
            self._pending.remove(started)
            self._prune_writes()
        self._remember_month(year, month)
        logger.debug("Merged %d records for %d-%02d", merged, year, month)
        return records

    def _remember_month(self, year: int, month: int) -> None:
        self._months[(year, month)] = None
        self._months.move_to_end((year, month))
        if self.max_cached_months is None:
            return
        while len(self._months) > self.max_cached_months:
            (old_year, old_month), _ = self._months.popitem(last=False)
            for day in [d for d in self.index if d.year == old_year and d.month == old_month]:
                del self.index[day]
            logger.info("Evicted %d-%02d from calendar cache", old_year, old_month)

    def on_date_select(self, value: DayLike) -> DateSelection:
        """Look up a day. Never touches the store."""
        day = _selected_day(value)
        record = self.index.get(day)
        if record is None:
            return DateSelection(day=day, mode=EntryMode.NEW)
        return DateSelection(day=day, mode=EntryMode.EDIT, record=record)

    async def on_save(self, value: DayLike, weight: Optional[float], memo: Optional[str] = None) -> WeightRecordRead:
        """Upsert through the store, then index the store's canonical record.

        Raises RecordValidationError before calling the store when weight is
        missing or non-positive. StoreError propagates with the index unchanged.
        """
        day = _selected_day(value)
        if weight is None or weight <= 0:
            raise RecordValidationError("weight is required")
        try:
            payload = WeightRecordCreate(date=day, weight=weight, memo=memo)
        except ValidationError as e:
            raise RecordValidationError(str(e)) from e
        saved = await self.store.upsert_record(payload)
        self.index[day_key(saved.date)] = saved
        self._touch(day)
        return saved

    async def on_delete(self, value: DayLike) -> None:
        """Delete through the store, then drop the day from the index. Idempotent."""
        day = _selected_day(value)
        await self.store.delete_record(day)
        self.index.pop(day, None)
        self._touch(day)

    def month_tiles(self, year: int, month: int, today: Optional[date] = None) -> list[CalendarTile]:
        """One tile per day of the month, carrying the indexed weight if any."""
        today = today or date.today()
        tiles = []
        for day_num in range(1, calendar.monthrange(year, month)[1] + 1):
            day = date(year, month, day_num)
            record = self.index.get(day)
            tiles.append(
                CalendarTile(
                    day=day,
                    weight=record.weight if record else None,
                    has_record=record is not None,
                    is_today=day == today,
                )
            )
        return tiles
