"""API router aggregation."""

from fastapi import APIRouter

from app.api.v1.endpoints import health, settings, stats, weights

api_router = APIRouter()

api_router.include_router(health.router, prefix="/health", tags=["health"])
api_router.include_router(weights.router, prefix="/weights", tags=["weights"])
api_router.include_router(settings.router, prefix="/settings", tags=["settings"])
api_router.include_router(stats.router, prefix="/stats", tags=["stats"])
