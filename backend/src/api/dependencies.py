"""FastAPI dependencies for injection."""
from fastapi import Request

from core.access_gate import AccessGate
from core.scheduler import RefreshScheduler
from core.whitelist_cache import ExpiringCache


def get_cache(request: Request) -> ExpiringCache:
    """The whitelist cache created in the application lifespan."""
    return request.app.state.cache


def get_scheduler(request: Request) -> RefreshScheduler:
    """The refresh scheduler created in the application lifespan."""
    return request.app.state.scheduler


def get_access_gate(request: Request) -> AccessGate:
    """The access gate created in the application lifespan."""
    return request.app.state.access_gate


__all__ = [
    "get_access_gate",
    "get_cache",
    "get_scheduler",
]
