"""Health check endpoints for load balancers and monitoring."""

import logging
import os

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from app.api.deps import get_store
from app.core.errors import StoreError
from app.services.record_store import RecordStore

logger = logging.getLogger(__name__)
router = APIRouter()


@router.get("")
async def health():
    """Liveness. Includes built_at when BUILT_AT (or RENDER_GIT_COMMIT_TIMESTAMP) is set."""
    payload: dict = {"status": "ok"}
    built_at = os.environ.get("BUILT_AT") or os.environ.get("RENDER_GIT_COMMIT_TIMESTAMP")
    if built_at:
        payload["built_at"] = built_at
    return payload


@router.get("/ready")
async def readiness(store: RecordStore = Depends(get_store)):
    """Readiness: the store answers a settings read."""
    try:
        await store.get_settings()
    except StoreError as e:
        logger.warning("Readiness check failed: %s", e)
        return JSONResponse(status_code=503, content={"status": "error", "store": str(e)})
    return {"status": "ok", "store": "connected"}
