"""Whitelist refresh and login check endpoints."""
from fastapi import APIRouter, Depends, Query

from api.dependencies import get_access_gate, get_scheduler
from core.access_gate import AccessGate
from core.scheduler import RefreshScheduler
from schemas.whitelist import LoginCheckResponse, RefreshResponse

router = APIRouter(prefix="/whitelist", tags=["whitelist"])

REFRESH_CONFIRMATION = "Twitch whitelist refreshed!"


@router.post("/refresh", response_model=RefreshResponse)
async def refresh_whitelist(
    requested_by: str = Query(default="api"),
    scheduler: RefreshScheduler = Depends(get_scheduler),
) -> RefreshResponse:
    """
    Refresh the whitelist now and confirm once it has finished.

    Always succeeds: identifiers that could not be fetched simply contribute
    no usernames.
    """
    result = await scheduler.refresh_now(requested_by)
    return RefreshResponse(
        message=REFRESH_CONFIRMATION,
        service_ids=result.service_ids,
        usernames=result.usernames,
    )


@router.get("/login/{username}", response_model=LoginCheckResponse)
def check_login(
    username: str,
    bypass: bool = Query(default=False),
    gate: AccessGate = Depends(get_access_gate),
) -> LoginCheckResponse:
    """
    Decide whether a connecting player may log in.

    `bypass` is set by the game server when the player holds the bypass
    permission. When `allowed` is false the server should cancel the
    connection and show `message`.
    """
    decision = gate.check_login(username, bypass=bypass)
    return LoginCheckResponse(
        username=decision.username,
        whitelisted=decision.whitelisted,
        allowed=decision.allowed,
        message=decision.message,
    )
