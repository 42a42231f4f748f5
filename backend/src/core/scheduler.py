"""Periodic and on-demand scheduling of whitelist refreshes."""
import asyncio
import logging
from collections.abc import Awaitable, Callable, Sequence

from services.whitelist_refresher import RefreshResult, WhitelistRefresher

logger = logging.getLogger(__name__)

# Periodic refresh every 5 minutes
REFRESH_INTERVAL_SECONDS = 5 * 60


class RecurringTask:
    """
    Runs an async callback now and then every `interval` seconds.

    The interval is measured from the end of one run to the start of the next.
    A run that raises is logged and the loop carries on. Cancelling the task
    is the only way to stop it.
    """

    def __init__(
        self,
        interval: float,
        callback: Callable[[], Awaitable[object]],
        name: str,
    ) -> None:
        self._interval = interval
        self._callback = callback
        self._name = name
        self._task: asyncio.Task | None = None

    @property
    def name(self) -> str:
        """Task name, used in logs and as the asyncio task name."""
        return self._name

    @property
    def is_running(self) -> bool:
        """Check if the loop is armed and not yet cancelled."""
        return self._task is not None and not self._task.done()

    def start(self) -> None:
        """Arm the loop on the running event loop. No-op if already running."""
        if self.is_running:
            return
        self._task = asyncio.create_task(self._run(), name=self._name)

    async def cancel(self) -> None:
        """Cancel the loop and wait for it to unwind."""
        if self._task is None:
            return
        self._task.cancel()
        try:
            await self._task
        except asyncio.CancelledError:
            pass
        self._task = None

    async def _run(self) -> None:
        while True:
            try:
                await self._callback()
            except Exception:
                logger.exception("recurring_task_failed", extra={"task": self._name})
            await asyncio.sleep(self._interval)


class RefreshScheduler:
    """Triggers whitelist refreshes on a fixed interval and on demand."""

    def __init__(
        self,
        refresher: WhitelistRefresher,
        service_ids: Sequence[str],
        interval: float = REFRESH_INTERVAL_SECONDS,
    ) -> None:
        self._refresher = refresher
        self._service_ids = tuple(service_ids)
        self._periodic = RecurringTask(
            interval,
            self._refresh,
            name=f"Whitelist Refresh - Auto ({interval:g}s)",
        )
        self._manual: set[asyncio.Task] = set()

    @property
    def service_ids(self) -> tuple[str, ...]:
        """Service identifiers refreshed by every cycle."""
        return self._service_ids

    @property
    def is_armed(self) -> bool:
        """Check if the periodic refresh is running."""
        return self._periodic.is_running

    def start(self) -> bool:
        """
        Arm the periodic refresh.

        Returns False, after logging an error, when no service identifiers are
        configured; the periodic refresh is then never started.
        """
        if not self._service_ids:
            logger.error(
                "whitelist_ids_missing: no whitelist service ids configured, "
                "periodic refresh disabled",
            )
            return False
        self._periodic.start()
        return True

    def trigger(self, requested_by: str) -> asyncio.Task:
        """Start a manual refresh that runs to completion independently."""
        logger.info("manual_refresh_requested", extra={"requested_by": requested_by})
        task = asyncio.create_task(
            self._refresh(), name=f"Whitelist Refresh - Manual ({requested_by})",
        )
        # Keep a strong reference until the task finishes
        self._manual.add(task)
        task.add_done_callback(self._manual.discard)
        return task

    async def refresh_now(self, requested_by: str) -> RefreshResult:
        """Trigger a manual refresh and wait for it to finish."""
        # Shielded so a dropped request does not abort the refresh itself
        return await asyncio.shield(self.trigger(requested_by))

    async def stop(self) -> None:
        """Cancel the periodic refresh. Manual refreshes are left to finish."""
        await self._periodic.cancel()

    async def _refresh(self) -> RefreshResult:
        return await self._refresher.refresh(self._service_ids)
