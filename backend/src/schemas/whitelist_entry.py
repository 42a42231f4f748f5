"""Cached whitelist entry representation."""
from dataclasses import dataclass


@dataclass(frozen=True)
class WhitelistEntry:
    """
    One username's whitelist status as held by the expiring cache.

    Entries are immutable; a refresh replaces the entry rather than touching it,
    so a reader never observes a half-written record.

    - present: whether the username is whitelisted
    - written_at: cache clock reading (seconds) when the entry was last written
    """

    present: bool
    written_at: float

    def is_expired(self, now: float, ttl: float) -> bool:
        """True once `ttl` seconds have passed since the entry was written."""
        return now - self.written_at >= ttl
