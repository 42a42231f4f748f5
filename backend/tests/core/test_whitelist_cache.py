"""
Tests for the expiring whitelist cache.

Timestamps are driven by a fake clock or passed explicitly, so TTL boundaries
are exact.
"""
from concurrent.futures import ThreadPoolExecutor

from conftest import FakeClock

from core.whitelist_cache import ENTRY_TTL_SECONDS, ExpiringCache


class TestExpiringCacheTTL:
    """Tests for entry lifetime."""

    def test__ttl__is_thirty_minutes(self) -> None:
        """Default TTL is 30 minutes."""
        assert ENTRY_TTL_SECONDS == 1800
        assert ExpiringCache().ttl == 1800

    def test__get__true_within_ttl_window(self) -> None:
        """An entry is present from its write until just before TTL elapses."""
        cache = ExpiringCache()
        cache.put("alice", True, now=100.0)

        assert cache.get("alice", now=100.0) is True
        assert cache.get("alice", now=100.0 + 900) is True
        assert cache.get("alice", now=100.0 + ENTRY_TTL_SECONDS - 0.001) is True

    def test__get__false_at_and_after_ttl(self) -> None:
        """An entry is absent once TTL has elapsed."""
        cache = ExpiringCache()
        cache.put("alice", True, now=100.0)

        assert cache.get("alice", now=100.0 + ENTRY_TTL_SECONDS) is False
        # Stays absent, even when checked at a later time
        assert cache.get("alice", now=100.0 + 2 * ENTRY_TTL_SECONDS) is False

    def test__put__rewrite_extends_ttl(self) -> None:
        """Writing a present entry again restarts its TTL window."""
        cache = ExpiringCache()
        cache.put("alice", True, now=0.0)
        cache.put("alice", True, now=1000.0)

        assert cache.get("alice", now=ENTRY_TTL_SECONDS + 500) is True
        assert cache.get("alice", now=1000.0 + ENTRY_TTL_SECONDS) is False

    def test__put__older_write_does_not_shorten_ttl(self) -> None:
        """Last write wins by timestamp: a late write stamped earlier is ignored."""
        cache = ExpiringCache()
        cache.put("alice", True, now=2000.0)
        cache.put("alice", True, now=1000.0)

        assert cache.get("alice", now=2801.0) is True
        assert cache.get("alice", now=2000.0 + ENTRY_TTL_SECONDS) is False

    def test__put__older_write_does_not_override_marker(self) -> None:
        """An older write cannot flip the marker of a newer entry."""
        cache = ExpiringCache()
        cache.put("alice", True, now=2000.0)
        cache.put("alice", False, now=1000.0)

        assert cache.get("alice", now=2000.0) is True

    def test__get__future_lookup_does_not_evict(self) -> None:
        """Lookups are read-only: a lookup past TTL does not hide the entry from in-window lookups."""
        cache = ExpiringCache()
        cache.put("alice", True, now=0.0)

        assert cache.get("alice", now=ENTRY_TTL_SECONDS + 5) is False
        assert cache.get("alice", now=10.0) is True

    def test__get__uses_clock_when_now_omitted(self, clock: FakeClock) -> None:
        """Without `now`, reads and writes use the injected clock."""
        cache = ExpiringCache(clock=clock)
        cache.put("alice")

        clock.advance(ENTRY_TTL_SECONDS - 1)
        assert cache.get("alice") is True

        clock.advance(1)
        assert cache.get("alice") is False

    def test__get__absent_key_is_false(self, cache: ExpiringCache) -> None:
        """A miss is a normal outcome, not an error."""
        assert cache.get("nobody") is False

    def test__put__not_present_marker_reads_false(self, cache: ExpiringCache) -> None:
        """An entry written as not present is reported as absent."""
        cache.put("alice", False)
        assert cache.get("alice") is False


class TestExpiringCacheCaseInsensitivity:
    """Tests for username normalization."""

    def test__get__matches_any_case(self, cache: ExpiringCache) -> None:
        """Usernames differing only in case are the same entry."""
        cache.put("Foo")

        assert cache.get("foo") is True
        assert cache.get("FOO") is True
        assert cache.get("fOo") is True


class TestExpiringCachePurge:
    """Tests for eager expiry and size reporting."""

    def test__purge_expired__removes_only_expired(
        self, cache: ExpiringCache, clock: FakeClock,
    ) -> None:
        """Only entries past TTL are removed."""
        cache.put("old")
        clock.advance(ENTRY_TTL_SECONDS - 10)
        cache.put("new")
        clock.advance(10)

        assert cache.purge_expired() == 1
        assert cache.get("old") is False
        assert cache.get("new") is True

    def test__len__counts_valid_entries(
        self, cache: ExpiringCache, clock: FakeClock,
    ) -> None:
        """Length counts only entries within their TTL window."""
        assert len(cache) == 0

        cache.put("alice")
        cache.put("bob")
        assert len(cache) == 2

        clock.advance(ENTRY_TTL_SECONDS)
        assert len(cache) == 0


class TestExpiringCacheConcurrency:
    """Tests for concurrent access from multiple threads."""

    def test__concurrent_puts_then_gets__no_lost_writes(self) -> None:
        """100 concurrent puts on distinct names are all visible to 100 concurrent gets."""
        cache = ExpiringCache()
        usernames = [f"user{i}" for i in range(100)]

        with ThreadPoolExecutor(max_workers=16) as pool:
            list(pool.map(cache.put, usernames))
        with ThreadPoolExecutor(max_workers=16) as pool:
            results = list(pool.map(cache.get, usernames))

        assert results == [True] * 100
        assert len(cache) == 100

    def test__concurrent_put_and_get_same_key__coherent(self) -> None:
        """Interleaved reads and writes on one key always see a boolean."""
        cache = ExpiringCache()

        def write(_: int) -> None:
            cache.put("alice")

        def read(_: int) -> bool:
            return cache.get("ALICE")

        with ThreadPoolExecutor(max_workers=8) as pool:
            writes = [pool.submit(write, i) for i in range(200)]
            reads = [pool.submit(read, i) for i in range(200)]
            for future in writes:
                future.result()
            observed = {future.result() for future in reads}

        assert observed <= {True, False}
        assert cache.get("alice") is True
