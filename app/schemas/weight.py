"""Weight record Pydantic schemas."""

from __future__ import annotations

import datetime as dt
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator


def _blank_to_none(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    value = value.strip()
    return value or None


class WeightRecordCreate(BaseModel):
    date: dt.date = Field(..., description="Calendar day (YYYY-MM-DD)")
    weight: float = Field(..., gt=0, le=500, description="Body weight in kg")
    memo: Optional[str] = Field(None, max_length=500, description="Free text, e.g. 'before breakfast'")

    @field_validator("memo")
    @classmethod
    def normalize_memo(cls, value: Optional[str]) -> Optional[str]:
        return _blank_to_none(value)


class WeightRecordUpdate(BaseModel):
    weight: float = Field(..., gt=0, le=500)
    memo: Optional[str] = Field(None, max_length=500)

    @field_validator("memo")
    @classmethod
    def normalize_memo(cls, value: Optional[str]) -> Optional[str]:
        return _blank_to_none(value)


class WeightRecordRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    date: dt.date
    weight: float
    memo: Optional[str] = None
    created_at: dt.datetime
    updated_at: dt.datetime
