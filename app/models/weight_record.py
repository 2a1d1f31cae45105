"""WeightRecord model: one weight entry per calendar day."""

from __future__ import annotations

import datetime as dt
import uuid

from sqlalchemy import Date, DateTime, Float, Text
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column

from app.db.base import Base


class WeightRecord(Base):
    """A single day's weight entry.

    `date` is the natural key: saving again for the same day overwrites the row
    (upsert on conflict), so there is never more than one entry per day.
    """

    __tablename__ = "weight_records"

    id: Mapped[uuid.UUID] = mapped_column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    date: Mapped[dt.date] = mapped_column(Date, nullable=False, unique=True, index=True)
    weight: Mapped[float] = mapped_column(Float, nullable=False)
    memo: Mapped[str | None] = mapped_column(Text, nullable=True)
    created_at: Mapped[dt.datetime] = mapped_column(
        DateTime(timezone=True), default=lambda: dt.datetime.now(dt.timezone.utc)
    )
    updated_at: Mapped[dt.datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: dt.datetime.now(dt.timezone.utc),
        onupdate=lambda: dt.datetime.now(dt.timezone.utc),
    )
