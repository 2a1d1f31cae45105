"""Weight record endpoints: list/get/upsert/update/delete by date, CSV export."""

from __future__ import annotations

import logging
from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from fastapi.responses import Response

from app.api.deps import get_store
from app.core.config import get_settings
from app.schemas.weight import WeightRecordCreate, WeightRecordRead, WeightRecordUpdate
from app.services.export import export_filename, records_to_csv
from app.services.record_store import RecordStore

logger = logging.getLogger(__name__)
router = APIRouter()


@router.get("", response_model=list[WeightRecordRead])
async def list_weights(
    year: Optional[int] = Query(None, ge=1, le=9999),
    month: Optional[int] = Query(None, ge=1, le=12, description="Filter to one month (needs year)"),
    store: RecordStore = Depends(get_store),
):
    """All records, newest first. With both year and month, only that calendar month."""
    return await store.list_records(year=year, month=month)


@router.post("", response_model=WeightRecordRead, status_code=201)
async def save_weight(payload: WeightRecordCreate, store: RecordStore = Depends(get_store)):
    """Create or overwrite the entry for payload.date."""
    record = await store.upsert_record(payload)
    logger.info("Saved weight %.1f for %s", record.weight, record.date)
    return record


@router.get("/export")
async def export_weights(store: RecordStore = Depends(get_store)):
    """Download every record as CSV (oldest first)."""
    records = await store.list_records()
    filename = export_filename(get_settings().today())
    return Response(
        content=records_to_csv(records),
        media_type="text/csv; charset=utf-8",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


@router.get("/{day}", response_model=Optional[WeightRecordRead])
async def get_weight(day: date, store: RecordStore = Depends(get_store)):
    """Entry for one day, or null when nothing was logged."""
    return await store.get_record(day)


@router.put("/{day}", response_model=WeightRecordRead)
async def update_weight(day: date, payload: WeightRecordUpdate, store: RecordStore = Depends(get_store)):
    record = await store.update_record(day, payload)
    if record is None:
        raise HTTPException(status_code=404, detail="Weight record not found")
    return record


@router.delete("/{day}")
async def delete_weight(day: date, store: RecordStore = Depends(get_store)):
    """Delete the entry for a day. Deleting a day with no entry also succeeds."""
    await store.delete_record(day)
    return {"success": True}
