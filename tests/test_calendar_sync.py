"""Tests for the calendar record index and its store reconciliation."""

from __future__ import annotations

import asyncio
from datetime import date, datetime, timedelta, timezone

import pytest

from app.core.enums import EntryMode
from app.core.errors import RecordValidationError, StoreError
from app.services.calendar_sync import CalendarSync, day_key


@pytest.fixture
def sync(store) -> CalendarSync:
    return CalendarSync(store)


class TestDayKey:
    def test_forms(self) -> None:
        assert day_key(date(2024, 1, 5)) == date(2024, 1, 5)
        assert day_key("2024-01-05") == date(2024, 1, 5)
        assert day_key("2024-01-05T23:30:00+09:00") == date(2024, 1, 5)

    def test_datetime_keeps_wall_clock_day(self) -> None:
        late = datetime(2024, 1, 5, 23, 30, tzinfo=timezone(timedelta(hours=9)))
        assert day_key(late) == date(2024, 1, 5)


class TestInvalidDates:
    @pytest.mark.parametrize("value", ["2024-13-40", "not a date", None])
    def test_save_rejects_before_store(self, store, sync, value) -> None:
        with pytest.raises(RecordValidationError):
            asyncio.run(sync.on_save(value, 70.0))
        assert store.calls == []

    def test_delete_rejects_before_store(self, store, sync) -> None:
        with pytest.raises(RecordValidationError):
            asyncio.run(sync.on_delete("2024-13-40"))
        assert store.calls == []

    def test_select_rejects(self, sync) -> None:
        with pytest.raises(RecordValidationError, match="2024-13-40"):
            sync.on_date_select("2024-13-40")


class TestMonthChange:
    def test_merges_and_accumulates(self, store, sync) -> None:
        store.seed(date(2024, 1, 3), 70.0)
        store.seed(date(2024, 2, 3), 69.0)
        asyncio.run(sync.on_month_change(2024, 1))
        assert set(sync.index) == {date(2024, 1, 3)}
        asyncio.run(sync.on_month_change(2024, 2))
        assert set(sync.index) == {date(2024, 1, 3), date(2024, 2, 3)}

    def test_refetch_overwrites_same_date(self, store, sync) -> None:
        store.seed(date(2024, 1, 3), 70.0)
        asyncio.run(sync.on_month_change(2024, 1))
        store.seed(date(2024, 1, 3), 71.0)
        asyncio.run(sync.on_month_change(2024, 1))
        assert sync.index[date(2024, 1, 3)].weight == 71.0

    def test_fetch_failure_propagates(self, store, sync) -> None:
        store.fail_with = "network down"
        with pytest.raises(StoreError):
            asyncio.run(sync.on_month_change(2024, 1))
        assert sync.index == {}

    def test_bounded_cache_evicts_oldest_month(self, store) -> None:
        sync = CalendarSync(store, max_cached_months=2)
        for m in (1, 2, 3):
            store.seed(date(2024, m, 1), 70.0 + m)
        for m in (1, 2, 3):
            asyncio.run(sync.on_month_change(2024, m))
        assert set(sync.index) == {date(2024, 2, 1), date(2024, 3, 1)}


class TestSelect:
    def test_new_and_edit_modes(self, store, sync) -> None:
        store.seed(date(2024, 1, 3), 70.0, "morning")
        asyncio.run(sync.on_month_change(2024, 1))
        calls = list(store.calls)

        edit = sync.on_date_select("2024-01-03")
        assert edit.mode == EntryMode.EDIT
        assert edit.record.memo == "morning"

        new = sync.on_date_select(date(2024, 1, 4))
        assert new.mode == EntryMode.NEW
        assert new.record is None
        assert store.calls == calls


class TestSave:
    def test_round_trip_uses_canonical_record(self, store, sync) -> None:
        asyncio.run(sync.on_save(date(2024, 1, 5), 70.04, "after run"))
        selection = sync.on_date_select(date(2024, 1, 5))
        assert selection.mode == EntryMode.EDIT
        assert selection.record.weight == 70.0
        assert selection.record.memo == "after run"

    def test_omitted_memo_is_absent(self, store, sync) -> None:
        asyncio.run(sync.on_save(date(2024, 1, 5), 70.0, ""))
        assert sync.on_date_select(date(2024, 1, 5)).record.memo is None

    def test_last_write_wins(self, store, sync) -> None:
        asyncio.run(sync.on_save(date(2024, 1, 5), 70.0))
        asyncio.run(sync.on_save(date(2024, 1, 5), 69.5, "second"))
        assert sync.index[date(2024, 1, 5)].weight == 69.5
        assert store.calls == ["upsert", "upsert"]
        assert len(store.records) == 1

    @pytest.mark.parametrize("weight", [None, 0, -3.0])
    def test_invalid_weight_never_reaches_store(self, store, sync, weight) -> None:
        with pytest.raises(RecordValidationError):
            asyncio.run(sync.on_save(date(2024, 1, 5), weight))
        assert store.calls == []
        assert sync.index == {}

    def test_failure_leaves_index_unchanged(self, store, sync) -> None:
        store.seed(date(2024, 1, 5), 70.0)
        asyncio.run(sync.on_month_change(2024, 1))
        before = dict(sync.index)
        store.fail_with = "timeout"
        with pytest.raises(StoreError):
            asyncio.run(sync.on_save(date(2024, 1, 5), 68.0))
        assert sync.index == before


class TestDelete:
    def test_removes_entry(self, store, sync) -> None:
        asyncio.run(sync.on_save(date(2024, 1, 5), 70.0))
        asyncio.run(sync.on_delete(date(2024, 1, 5)))
        assert date(2024, 1, 5) not in sync.index
        assert date(2024, 1, 5) not in store.records

    def test_absent_date_is_noop(self, store, sync) -> None:
        asyncio.run(sync.on_save(date(2024, 1, 6), 70.0))
        before = dict(sync.index)
        asyncio.run(sync.on_delete(date(2024, 1, 5)))
        assert sync.index == before

    def test_failure_leaves_index_unchanged(self, store, sync) -> None:
        asyncio.run(sync.on_save(date(2024, 1, 5), 70.0))
        store.fail_with = "timeout"
        with pytest.raises(StoreError):
            asyncio.run(sync.on_delete(date(2024, 1, 5)))
        assert date(2024, 1, 5) in sync.index


class TestStaleResponses:
    def test_fetch_started_before_delete_does_not_resurrect(self, store, sync) -> None:
        store.seed(date(2024, 1, 5), 70.0)

        async def scenario():
            gate = asyncio.Event()
            real_list = store.list_records

            async def slow_list(year=None, month=None):
                records = await real_list(year=year, month=month)
                await gate.wait()
                return records

            store.list_records = slow_list
            fetch = asyncio.create_task(sync.on_month_change(2024, 1))
            await asyncio.sleep(0)
            await sync.on_delete(date(2024, 1, 5))
            gate.set()
            await fetch

        asyncio.run(scenario())
        assert date(2024, 1, 5) not in sync.index
        assert sync._written_at == {}

    def test_write_generations_do_not_accumulate(self, store, sync) -> None:
        async def scenario():
            for n in range(28):
                day = date(2024, 2, 1) + timedelta(days=n)
                await sync.on_save(day, 70.0)
                await sync.on_delete(day)

        asyncio.run(scenario())
        assert sync.index == {}
        assert sync._written_at == {}

    def test_writes_kept_while_fetch_in_flight(self, store, sync) -> None:
        store.seed(date(2024, 1, 5), 70.0)

        async def scenario():
            gate = asyncio.Event()
            real_list = store.list_records

            async def slow_list(year=None, month=None):
                records = await real_list(year=year, month=month)
                await gate.wait()
                return records

            store.list_records = slow_list
            fetch = asyncio.create_task(sync.on_month_change(2024, 1))
            await asyncio.sleep(0)
            await sync.on_save(date(2024, 1, 5), 68.0)
            assert date(2024, 1, 5) in sync._written_at
            gate.set()
            await fetch

        asyncio.run(scenario())
        assert sync.index[date(2024, 1, 5)].weight == 68.0
        assert sync._written_at == {}


class TestTiles:
    def test_month_tiles(self, store, sync) -> None:
        asyncio.run(sync.on_save(date(2024, 2, 10), 70.2))
        tiles = sync.month_tiles(2024, 2, today=date(2024, 2, 11))
        assert len(tiles) == 29
        tile = tiles[9]
        assert tile.day == date(2024, 2, 10)
        assert tile.has_record and tile.weight == 70.2
        assert tiles[10].is_today and not tiles[10].has_record
