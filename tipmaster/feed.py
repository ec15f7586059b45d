"""
Per-feed view state machines
"""
import asyncio
import logging
from enum import Enum
from typing import Awaitable, Callable, List, Optional, Sequence

from tipmaster.aggregator import aggregate
from tipmaster.models import PredictionResult, SummaryStats
from tipmaster.notifier import DESTRUCTIVE, Notifier

logger = logging.getLogger(__name__)


class ViewState(Enum):
    LOADING = "loading"
    EMPTY = "empty"
    POPULATED = "populated"
    ERROR = "error"


class Feed:
    """
    Loads one collection from a data provider and tracks its view state

    A refresh enters LOADING while keeping the last good collection in
    ``items``, then settles on EMPTY or POPULATED. A failed fetch notifies
    the user once and either keeps the previous collection (POPULATED) or,
    when there is none, moves to ERROR, which renders like EMPTY.

    Refreshes may overlap. A result is applied when it completes unless a
    newer refresh has already been applied. Every failure is reported to
    the notifier, but only changes the view when nothing newer has landed.
    After close() every pending resolution is discarded until reopen().
    """

    def __init__(self, name: str, fetch: Callable[[], Awaitable[Sequence]],
                 notifier: Notifier, failure_message: Optional[str] = None,
                 timeout: Optional[float] = None):
        self.name = name
        self.notifier = notifier
        self.failure_message = failure_message or f"Failed to load {name}"
        self.timeout = timeout
        self.state = ViewState.LOADING
        self.items: List = []
        self.last_error: Optional[BaseException] = None
        self.closed = False
        self._fetch = fetch
        self._generation = 0
        self._applied_generation = 0
        self._listeners: List[Callable[["Feed"], None]] = []

    def add_listener(self, callback: Callable[["Feed"], None]) -> None:
        """Call ``callback(feed)`` every time a fetch settles"""
        self._listeners.append(callback)

    async def refresh(self) -> bool:
        """
        Fetch the collection again

        Returns:
            True if the fetched collection was applied
        """
        if self.closed:
            return False

        self._generation += 1
        generation = self._generation
        self.state = ViewState.LOADING

        try:
            items = await self._run_fetch()
        except Exception as e:
            if self.closed:
                logger.debug("Dropping %s failure after close: %s", self.name, e)
                return False
            self._fail(e, generation)
            return False

        if self._superseded(generation):
            logger.debug("Dropping out-of-date %s fetch", self.name)
            return False
        self._applied_generation = generation
        self._apply(list(items))
        return True

    def close(self) -> None:
        """Stop applying results; listeners are dropped"""
        self.closed = True
        self._listeners.clear()

    def reopen(self) -> None:
        """Accept results again, ignoring any fetch started before the close"""
        if not self.closed:
            return
        self.closed = False
        self._generation += 1
        self._applied_generation = self._generation

    async def _run_fetch(self):
        if self.timeout is None:
            return await self._fetch()
        return await asyncio.wait_for(self._fetch(), self.timeout)

    def _superseded(self, generation: int) -> bool:
        return self.closed or generation < self._applied_generation

    def _apply(self, items: List) -> None:
        self.items = items
        self.last_error = None
        self.state = ViewState.POPULATED if items else ViewState.EMPTY
        logger.debug("Loaded %d %s", len(items), self.name)
        self._settled()

    def _fail(self, error: BaseException, generation: int) -> None:
        if generation >= self._applied_generation:
            self.last_error = error
            self.state = ViewState.POPULATED if self.items else ViewState.ERROR
        logger.warning("Fetching %s failed: %s", self.name, str(error) or type(error).__name__)
        self.notifier.notify("Error", self.failure_message, DESTRUCTIVE)
        self._settled()

    def _settled(self) -> None:
        for callback in list(self._listeners):
            callback(self)


class HistoryFeed(Feed):
    """Prediction results plus the summary stats of the loaded collection"""

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.stats = SummaryStats()

    def _apply(self, items: List[PredictionResult]) -> None:
        self.stats = aggregate(items)
        super()._apply(items)
