"""Shared fixtures for whitelist tests."""
from collections.abc import AsyncGenerator
from unittest.mock import AsyncMock

import pytest
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient

from api.main import create_app
from core.config import Settings
from core.whitelist_cache import ExpiringCache


class FakeClock:
    """Manually advanced clock for deterministic TTL tests."""

    def __init__(self, start: float = 1000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class FakeFetcher:
    """Fetcher returning canned usernames per service id ([] when unknown)."""

    def __init__(self, responses: dict[str, list[str]] | None = None) -> None:
        self.responses = responses or {}
        self.fetch = AsyncMock(side_effect=self._fetch)

    async def _fetch(self, service_id: str) -> list[str]:
        return list(self.responses.get(service_id, []))


@pytest.fixture
def clock() -> FakeClock:
    """A fake clock starting at t=1000s."""
    return FakeClock()


@pytest.fixture
def cache(clock: FakeClock) -> ExpiringCache:
    """An empty cache driven by the fake clock."""
    return ExpiringCache(clock=clock)


@pytest.fixture
def fake_fetcher() -> FakeFetcher:
    """Fetcher with s1 -> Alice, BOB."""
    return FakeFetcher({"s1": ["Alice", "BOB"]})


@pytest.fixture
def settings() -> Settings:
    """Settings with a single service id and no .env file."""
    return Settings(_env_file=None, whitelist_ids=["s1"])


@pytest.fixture
async def app(settings: Settings, fake_fetcher: FakeFetcher) -> AsyncGenerator[FastAPI]:
    """Application with its lifespan running and no real network access."""
    application = create_app(settings, fetcher=fake_fetcher)
    async with application.router.lifespan_context(application):
        yield application


@pytest.fixture
async def client(app: FastAPI) -> AsyncGenerator[AsyncClient]:
    """HTTP client bound to the running application."""
    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test",
    ) as test_client:
        yield test_client
