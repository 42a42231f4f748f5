"""FastAPI application entry point."""
import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI

from api.routers import health, whitelist
from core.access_gate import AccessGate
from core.config import Settings, get_settings
from core.scheduler import RefreshScheduler
from core.whitelist_cache import ExpiringCache
from services.whitelist_fetcher import WhitelistFetcher
from services.whitelist_refresher import UsernameFetcher, WhitelistRefresher


logger = logging.getLogger(__name__)


def create_app(
    settings: Settings | None = None,
    fetcher: UsernameFetcher | None = None,
) -> FastAPI:
    """
    Build the application.

    The cache and everything that uses it are created once per application
    lifespan and shared through `app.state`.
    """
    settings = settings or get_settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncGenerator[None]:
        cache = ExpiringCache()
        refresher = WhitelistRefresher(
            cache,
            fetcher or WhitelistFetcher(
                list_url=settings.whitelist_list_url,
                timeout=settings.fetch_timeout_seconds,
            ),
        )
        scheduler = RefreshScheduler(refresher, settings.whitelist_ids)

        app.state.cache = cache
        app.state.scheduler = scheduler
        app.state.access_gate = AccessGate(cache, settings.whitelist_activation_url)

        scheduler.start()
        try:
            yield
        finally:
            await scheduler.stop()
            logger.info("whitelist_scheduler_stopped")

    app = FastAPI(
        title="Twitch Whitelist API",
        description="Grants or denies game server logins from a remote Twitch whitelist.",
        version="0.1.0",
        lifespan=lifespan,
    )
    app.include_router(health.router)
    app.include_router(whitelist.router)
    return app


app = create_app()
