"""Health check endpoints."""
from fastapi import APIRouter, Depends
from pydantic import BaseModel

from api.dependencies import get_cache, get_scheduler
from core.scheduler import RefreshScheduler
from core.whitelist_cache import ExpiringCache


router = APIRouter(tags=["health"])


class HealthResponse(BaseModel):
    """Health check response."""

    status: str
    cached_entries: int
    periodic_refresh: str


@router.get("/health", response_model=HealthResponse)
async def health_check(
    cache: ExpiringCache = Depends(get_cache),
    scheduler: RefreshScheduler = Depends(get_scheduler),
) -> HealthResponse:
    """
    Check application health.

    Note: App returns 'healthy' even if the periodic refresh is disabled or the
    cache is empty (degraded mode). Logins are still answered; everyone without
    bypass is denied.
    """
    return HealthResponse(
        status="healthy",
        cached_entries=len(cache),
        periodic_refresh="armed" if scheduler.is_armed else "disabled",
    )
