"""In-memory whitelist cache with a fixed time-to-live per entry."""
import logging
import time
from collections.abc import Callable
from threading import Lock

from schemas.whitelist_entry import WhitelistEntry

logger = logging.getLogger(__name__)

# Entries are valid for 30 minutes after their last write
ENTRY_TTL_SECONDS = 30 * 60


def normalize_username(username: str) -> str:
    """Canonical cache key for a username (usernames are case-insensitive)."""
    return username.lower()


class ExpiringCache:
    """
    Thread-safe map of normalized username to whitelist status.

    Every entry expires `ttl` seconds after it was last written. Expired entries
    are reported as absent immediately; lookups never modify the map, and
    reclaiming them is left to `purge_expired`.

    All timestamps come from `clock` unless the caller passes `now` explicitly.
    The lock guards dictionary access only and is never held across I/O.
    """

    def __init__(
        self,
        ttl: float = ENTRY_TTL_SECONDS,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._ttl = ttl
        self._clock = clock
        self._entries: dict[str, WhitelistEntry] = {}
        self._lock = Lock()

    @property
    def ttl(self) -> float:
        """Entry time-to-live in seconds."""
        return self._ttl

    def now(self) -> float:
        """Current reading of the cache clock."""
        return self._clock()

    def put(self, username: str, present: bool = True, now: float | None = None) -> None:
        """
        Write the entry for `username`, stamped with `now`.

        Last write wins by timestamp: a write older than the stored entry is
        ignored.
        """
        if now is None:
            now = self._clock()
        entry = WhitelistEntry(present=present, written_at=now)
        key = normalize_username(username)
        with self._lock:
            existing = self._entries.get(key)
            if existing is not None and existing.written_at > now:
                return
            self._entries[key] = entry

    def get(self, username: str, now: float | None = None) -> bool:
        """Return True if `username` was marked present within the last TTL window."""
        if now is None:
            now = self._clock()
        key = normalize_username(username)
        with self._lock:
            entry = self._entries.get(key)
        if entry is None or entry.is_expired(now, self._ttl):
            return False
        return entry.present

    def purge_expired(self, now: float | None = None) -> int:
        """Drop every expired entry. Returns the number of entries removed."""
        if now is None:
            now = self._clock()
        with self._lock:
            expired = [
                key for key, entry in self._entries.items()
                if entry.is_expired(now, self._ttl)
            ]
            for key in expired:
                del self._entries[key]
        if expired:
            logger.debug("whitelist_entries_expired", extra={"count": len(expired)})
        return len(expired)

    def __len__(self) -> int:
        """Number of entries still within their TTL window."""
        now = self._clock()
        with self._lock:
            return sum(
                1 for entry in self._entries.values()
                if entry.present and not entry.is_expired(now, self._ttl)
            )
