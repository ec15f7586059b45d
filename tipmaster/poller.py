"""
Periodic re-fetch driver
"""
import asyncio
import logging
from typing import Awaitable, Callable, Optional, Set

logger = logging.getLogger(__name__)

# Live match refresh interval in seconds
LIVE_MATCH_INTERVAL = 30.0


class Poller:
    """
    Invokes ``fetch`` once on start and then every ``interval`` seconds

    Each invocation runs as its own task, so a slow fetch does not delay the
    schedule and two invocations can be in flight together. stop() ends the
    schedule immediately; fetches already in flight are left to finish.
    """

    def __init__(self, fetch: Callable[[], Awaitable], interval: float = LIVE_MATCH_INTERVAL,
                 name: str = "poller"):
        if interval <= 0:
            raise ValueError(f"Poll interval must be positive, got {interval}")
        self.fetch = fetch
        self.interval = interval
        self.name = name
        self.invocations = 0
        self._task: Optional[asyncio.Task] = None
        self._inflight: Set[asyncio.Task] = set()

    @property
    def running(self) -> bool:
        """True while the schedule task is alive"""
        return self._task is not None and not self._task.done()

    @property
    def inflight(self) -> int:
        """Number of invocations that have not finished yet"""
        return len(self._inflight)

    def start(self) -> None:
        """Start polling; must be called from a running event loop"""
        if self.running:
            raise RuntimeError(f"{self.name} is already running")
        logger.debug("Starting %s every %.1fs", self.name, self.interval)
        self._task = asyncio.get_running_loop().create_task(self._run())

    def stop(self) -> None:
        """Cancel the schedule; idempotent, in-flight fetches are not cancelled"""
        if self._task is None:
            return
        self._task.cancel()
        self._task = None
        logger.debug("Stopped %s after %d invocations", self.name, self.invocations)

    async def aclose(self) -> None:
        """Stop and wait for the schedule task to unwind"""
        task = self._task
        self.stop()
        if task is not None:
            try:
                await task
            except asyncio.CancelledError:
                pass

    async def __aenter__(self):
        self.start()
        return self

    async def __aexit__(self, exc_type, exc, tb):
        await self.aclose()

    async def _run(self) -> None:
        while True:
            self._fire()
            await asyncio.sleep(self.interval)

    def _fire(self) -> None:
        self.invocations += 1
        task = asyncio.ensure_future(self.fetch())
        self._inflight.add(task)
        task.add_done_callback(self._finished)

    def _finished(self, task: asyncio.Task) -> None:
        self._inflight.discard(task)
        if task.cancelled():
            return
        error = task.exception()
        if error is not None:
            logger.error("%s invocation failed", self.name, exc_info=error)
