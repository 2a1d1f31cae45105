"""Profile settings endpoints: singleton target weight + height."""

from fastapi import APIRouter, Depends

from app.api.deps import get_store
from app.schemas.settings import UserSettingsRead, UserSettingsUpdate
from app.services.record_store import RecordStore

router = APIRouter()


@router.get("", response_model=UserSettingsRead)
async def get_user_settings(store: RecordStore = Depends(get_store)):
    """Saved settings, or defaults (nulls) when never saved."""
    return await store.get_settings()


@router.put("", response_model=UserSettingsRead)
async def put_user_settings(payload: UserSettingsUpdate, store: RecordStore = Depends(get_store)):
    """Full replace: send both fields every time (null clears)."""
    return await store.put_settings(payload)
