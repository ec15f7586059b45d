"""
The dashboard: four feeds, the live match poller and the tab layout
"""
import asyncio
import logging
from typing import List, Optional

from tipmaster.config import Settings
from tipmaster.feed import Feed, HistoryFeed
from tipmaster.models import SUBSCRIPTION_PLANS, Profile, Session
from tipmaster.notifier import INFO, LoggingNotifier, Notifier
from tipmaster.poller import Poller
from tipmaster.provider import DataProvider
from tipmaster.render import WIDTH, Renderer

logger = logging.getLogger(__name__)

TABS = {
    "predictions": "Today's Predictions",
    "live": "Live Matches",
    "history": "History",
}


class Dashboard:
    """
    Prediction dashboard for one signed-in session

    mount() loads the one-shot feeds (predictions, history, profile) and
    starts polling live matches; unmount() stops the poller and closes every
    feed so late fetch results are ignored.
    """

    def __init__(self, session: Session, provider: DataProvider,
                 notifier: Optional[Notifier] = None,
                 settings: Optional[Settings] = None,
                 renderer: Optional[Renderer] = None):
        self.session = session
        self.provider = provider
        self.notifier = notifier or LoggingNotifier()
        self.settings = settings or Settings()
        self.renderer = renderer or Renderer()

        timeout = self.settings.fetch_timeout
        self.predictions = Feed("predictions", provider.fetch_predictions,
                                self.notifier, timeout=timeout)
        self.live_matches = Feed("live matches", provider.fetch_live_matches,
                                 self.notifier, timeout=timeout)
        self.history = HistoryFeed("prediction history", provider.fetch_prediction_history,
                                   self.notifier, timeout=timeout)
        self.profile = Feed("profile", self._fetch_profile, self.notifier, timeout=timeout)
        self.live_poller = Poller(self.live_matches.refresh,
                                  interval=self.settings.live_poll_interval,
                                  name="live match poller")
        self.mounted = False

    @property
    def feeds(self) -> List[Feed]:
        return [self.predictions, self.live_matches, self.history, self.profile]

    @property
    def current_profile(self) -> Optional[Profile]:
        return self.profile.items[0] if self.profile.items else None

    async def _fetch_profile(self) -> List[Profile]:
        return [await self.provider.fetch_profile()]

    async def load(self) -> None:
        """Fetch every feed once, without polling"""
        await asyncio.gather(*(feed.refresh() for feed in self.feeds))

    async def mount(self) -> None:
        """Start the live poller and load the other feeds; a no-op when mounted"""
        if self.mounted:
            return
        self.mounted = True
        logger.info("Opening dashboard for %s", self.session.email)
        for feed in self.feeds:
            feed.reopen()
        self.live_poller.start()
        await asyncio.gather(
            self.predictions.refresh(),
            self.history.refresh(),
            self.profile.refresh(),
        )

    async def unmount(self) -> None:
        if not self.mounted:
            return
        self.mounted = False
        await self.live_poller.aclose()
        for feed in self.feeds:
            feed.close()
        logger.info("Closed dashboard for %s", self.session.email)

    async def __aenter__(self):
        await self.mount()
        return self

    async def __aexit__(self, exc_type, exc, tb):
        await self.unmount()

    async def refresh(self, tab: str) -> bool:
        """User-initiated refetch of one tab's feed"""
        return await self._feed_for(tab).refresh()

    def subscribe(self, plan: str) -> None:
        if plan not in SUBSCRIPTION_PLANS:
            raise ValueError(f"Unknown plan: {plan!r}")
        self.notifier.notify("Subscription", f"{plan} subscription feature coming soon!", INFO)

    def _feed_for(self, tab: str) -> Feed:
        feeds = {
            "predictions": self.predictions,
            "live": self.live_matches,
            "history": self.history,
            "subscription": self.profile,
        }
        if tab not in feeds:
            raise ValueError(f"Unknown tab: {tab!r}")
        return feeds[tab]

    def render_tab(self, tab: str) -> str:
        feed = self._feed_for(tab)
        if tab == "predictions":
            return self.renderer.predictions(feed)
        if tab == "live":
            return self.renderer.live_matches(feed)
        if tab == "history":
            return self.renderer.history(feed)
        return self.renderer.subscription(feed)

    def render(self, tab: Optional[str] = None) -> str:
        """Header and subscription panel followed by one tab, or all of them"""
        sections = [
            "=" * WIDTH,
            f"{self.settings.app_name} | Sports Prediction Dashboard",
            "Live predictions and match analysis",
            f"Signed in as {self.session.full_name or self.session.email}",
            "=" * WIDTH,
            self.render_tab("subscription"),
        ]
        for name in ([tab] if tab else list(TABS)):
            sections.append("=" * WIDTH)
            sections.append(TABS.get(name, name.title()))
            sections.append("=" * WIDTH)
            sections.append(self.render_tab(name))
        return "\n".join(sections)
