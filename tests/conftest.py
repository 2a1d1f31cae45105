"""Pytest fixtures: in-memory Record Store and an app client wired to it."""

from __future__ import annotations

import uuid
from datetime import date, datetime, timezone
from typing import Optional

import pytest
from fastapi.testclient import TestClient

from app.api.deps import get_store
from app.core.errors import StoreError
from app.main import app
from app.schemas.settings import UserSettingsRead, UserSettingsUpdate
from app.schemas.weight import WeightRecordCreate, WeightRecordRead, WeightRecordUpdate
from app.services.record_store import month_range


class InMemoryRecordStore:
    """RecordStore fake: same contract as SqlRecordStore, dict-backed.

    `fail_with` makes the next call raise StoreError; `calls` records every
    operation name in order.
    """

    def __init__(self) -> None:
        self.records: dict[date, WeightRecordRead] = {}
        self.settings: Optional[UserSettingsRead] = None
        self.calls: list[str] = []
        self.fail_with: Optional[str] = None
        # Store-side normalization applied on write (e.g. rounding to 0.1 kg)
        self.normalize = lambda w: round(w, 1)

    def _enter(self, op: str) -> None:
        self.calls.append(op)
        if self.fail_with is not None:
            message, self.fail_with = self.fail_with, None
            raise StoreError(message)

    def seed(self, day: date, weight: float, memo: Optional[str] = None) -> WeightRecordRead:
        now = datetime.now(timezone.utc)
        record = WeightRecordRead(
            id=uuid.uuid4(), date=day, weight=weight, memo=memo, created_at=now, updated_at=now
        )
        self.records[day] = record
        return record

    async def list_records(self, year=None, month=None) -> list[WeightRecordRead]:
        self._enter("list")
        records = list(self.records.values())
        if year is not None and month is not None:
            start, end = month_range(year, month)
            records = [r for r in records if start <= r.date <= end]
        return sorted(records, key=lambda r: r.date, reverse=True)

    async def get_record(self, day: date) -> Optional[WeightRecordRead]:
        self._enter("get")
        return self.records.get(day)

    async def upsert_record(self, payload: WeightRecordCreate) -> WeightRecordRead:
        self._enter("upsert")
        now = datetime.now(timezone.utc)
        existing = self.records.get(payload.date)
        record = WeightRecordRead(
            id=existing.id if existing else uuid.uuid4(),
            date=payload.date,
            weight=self.normalize(payload.weight),
            memo=payload.memo,
            created_at=existing.created_at if existing else now,
            updated_at=now,
        )
        self.records[payload.date] = record
        return record

    async def update_record(self, day: date, payload: WeightRecordUpdate) -> Optional[WeightRecordRead]:
        self._enter("update")
        existing = self.records.get(day)
        if existing is None:
            return None
        record = existing.model_copy(
            update={"weight": self.normalize(payload.weight), "memo": payload.memo, "updated_at": datetime.now(timezone.utc)}
        )
        self.records[day] = record
        return record

    async def delete_record(self, day: date) -> None:
        self._enter("delete")
        self.records.pop(day, None)

    async def get_settings(self) -> UserSettingsRead:
        self._enter("settings-get")
        return self.settings or UserSettingsRead()

    async def put_settings(self, payload: UserSettingsUpdate) -> UserSettingsRead:
        self._enter("settings-put")
        now = datetime.now(timezone.utc)
        self.settings = UserSettingsRead(
            target_weight=payload.target_weight,
            height=payload.height,
            created_at=self.settings.created_at if self.settings else now,
            updated_at=now,
        )
        return self.settings


@pytest.fixture
def store() -> InMemoryRecordStore:
    return InMemoryRecordStore()


@pytest.fixture
def client(store):
    """TestClient with the SQL store swapped for the in-memory fake."""

    async def _override():
        return store

    app.dependency_overrides[get_store] = _override
    yield TestClient(app)
    app.dependency_overrides.clear()
