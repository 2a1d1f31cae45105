"""Shared request dependencies."""

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.db.session import get_db
from app.services.record_store import RecordStore, SqlRecordStore


async def get_store(db: AsyncSession = Depends(get_db)) -> RecordStore:
    """Record Store bound to this request's session (overridden in tests)."""
    return SqlRecordStore(db)
