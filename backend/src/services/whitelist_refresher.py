"""Service layer that refreshes the whitelist cache from the remote server."""
import asyncio
import logging
from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from typing import Protocol

from core.whitelist_cache import ExpiringCache, normalize_username

logger = logging.getLogger(__name__)


class UsernameFetcher(Protocol):
    """Anything that can fetch the usernames for one service identifier."""

    async def fetch(self, service_id: str) -> list[str]:
        """Return the usernames for `service_id`, or [] on failure."""
        ...


@dataclass
class RefreshResult:
    """Summary of one refresh cycle."""

    service_ids: int  # Identifiers queried
    usernames: int  # Distinct normalized usernames written to the cache


def merge_usernames(batches: Iterable[Sequence[str]]) -> list[str]:
    """
    Flatten per-identifier username lists into distinct normalized usernames.

    Surrounding whitespace is stripped and blank lines are skipped. First
    occurrence order is kept.
    """
    merged: dict[str, None] = {}
    for batch in batches:
        for username in batch:
            name = normalize_username(username.strip())
            if name:
                merged[name] = None
    return list(merged)


class WhitelistRefresher:
    """Fans the fetcher out over service identifiers and upserts the results."""

    def __init__(self, cache: ExpiringCache, fetcher: UsernameFetcher) -> None:
        self._cache = cache
        self._fetcher = fetcher

    async def refresh(
        self, service_ids: Sequence[str], now: float | None = None,
    ) -> RefreshResult:
        """
        Fetch every identifier and mark each returned username as whitelisted.

        Identifiers are fetched concurrently and independently: one failing does
        not affect the others. Usernames omitted by this cycle are left to
        expire on their own. Never raises.
        """
        batches = await asyncio.gather(
            *(self._fetch_isolated(service_id) for service_id in service_ids),
        )
        usernames = merge_usernames(batches)

        if now is None:
            now = self._cache.now()
        for username in usernames:
            self._cache.put(username, True, now)
        self._cache.purge_expired(now)

        logger.info(
            "whitelist_refreshed",
            extra={"service_ids": len(service_ids), "usernames": len(usernames)},
        )
        return RefreshResult(service_ids=len(service_ids), usernames=len(usernames))

    async def _fetch_isolated(self, service_id: str) -> list[str]:
        """Fetch one identifier, treating an unexpected error as an empty list."""
        try:
            return await self._fetcher.fetch(service_id)
        except Exception:
            logger.exception(
                "whitelist_fetch_failed", extra={"service_id": service_id},
            )
            return []
