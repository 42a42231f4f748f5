"""Pydantic schemas for whitelist endpoints."""
from pydantic import BaseModel


class RefreshResponse(BaseModel):
    """Schema for the manual refresh confirmation."""

    message: str
    service_ids: int
    usernames: int


class LoginCheckResponse(BaseModel):
    """Schema for a login decision returned to the game server."""

    username: str
    whitelisted: bool
    allowed: bool
    message: str | None = None
