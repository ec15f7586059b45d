"""
Tests for feed state machines, the poller and the dashboard lifecycle
"""
import asyncio
import unittest
from datetime import datetime, timezone

from tipmaster.config import Settings
from tipmaster.dashboard import Dashboard
from tipmaster.feed import Feed, HistoryFeed, ViewState
from tipmaster.models import Match, Session
from tipmaster.notifier import DESTRUCTIVE, INFO, Notifier
from tipmaster.poller import Poller
from tipmaster.provider import FetchFailure, MockDataProvider
from tipmaster.render import Renderer

NOW = datetime(2026, 10, 19, 12, 0, tzinfo=timezone.utc)


class RecordingNotifier(Notifier):
    def __init__(self):
        self.messages = []

    def notify(self, title, message, severity=INFO):
        self.messages.append((title, message, severity))


class ScriptedFetch:
    """Returns (or raises) queued responses; the last one repeats"""

    def __init__(self, *responses):
        self.responses = list(responses)
        self.calls = 0
        self.gate = None

    async def __call__(self):
        self.calls += 1
        gate = self.gate
        if gate is not None:
            await gate.wait()
        response = self.responses.pop(0) if len(self.responses) > 1 else self.responses[0]
        if isinstance(response, Exception):
            raise response
        return response


def match(match_id, home_score=0):
    return Match(id=match_id, home_team="Home", away_team="Away", status="live",
                 home_score=home_score)


class TestFeed(unittest.IsolatedAsyncioTestCase):
    """Test the per-feed view state machine"""

    def setUp(self):
        self.notifier = RecordingNotifier()

    async def test_starts_loading(self):
        feed = Feed("live matches", ScriptedFetch([]), self.notifier)
        self.assertIs(feed.state, ViewState.LOADING)
        self.assertEqual(feed.items, [])

    async def test_zero_items_is_empty_not_error(self):
        feed = Feed("live matches", ScriptedFetch([]), self.notifier)
        self.assertTrue(await feed.refresh())
        self.assertIs(feed.state, ViewState.EMPTY)
        self.assertIsNone(feed.last_error)
        self.assertEqual(self.notifier.messages, [])

    async def test_items_populate(self):
        feed = Feed("live matches", ScriptedFetch([match("1"), match("2")]), self.notifier)
        await feed.refresh()
        self.assertIs(feed.state, ViewState.POPULATED)
        self.assertEqual([m.id for m in feed.items], ["1", "2"])

    async def test_failure_without_items(self):
        fetch = ScriptedFetch(FetchFailure("predictions", "offline"))
        feed = Feed("predictions", fetch, self.notifier)
        self.assertFalse(await feed.refresh())
        self.assertIs(feed.state, ViewState.ERROR)
        self.assertIsInstance(feed.last_error, FetchFailure)
        self.assertEqual(self.notifier.messages,
                         [("Error", "Failed to load predictions", DESTRUCTIVE)])
        self.assertEqual(Renderer().predictions(feed), "No active predictions available")

    async def test_failed_refetch_keeps_collection(self):
        fetch = ScriptedFetch([match("1", 2)], FetchFailure("live matches", "timeout"))
        feed = Feed("live matches", fetch, self.notifier)
        await feed.refresh()
        await feed.refresh()
        self.assertIs(feed.state, ViewState.POPULATED)
        self.assertEqual(feed.items[0].home_score, 2)
        self.assertEqual(len(self.notifier.messages), 1)
        self.assertIn("showing last successful update", Renderer().live_matches(feed))

    async def test_stale_while_revalidate(self):
        fetch = ScriptedFetch([match("1", 1)], [match("1", 2)])
        feed = Feed("live matches", fetch, self.notifier)
        await feed.refresh()

        fetch.gate = asyncio.Event()
        pending = asyncio.create_task(feed.refresh())
        await asyncio.sleep(0)
        self.assertIs(feed.state, ViewState.LOADING)
        self.assertEqual(feed.items[0].home_score, 1)
        self.assertIn("(refreshing...)", Renderer().live_matches(feed))

        fetch.gate.set()
        await pending
        self.assertIs(feed.state, ViewState.POPULATED)
        self.assertEqual(feed.items[0].home_score, 2)

    async def test_older_result_does_not_overwrite_newer(self):
        slow_gate = asyncio.Event()

        async def slow():
            await slow_gate.wait()
            return [match("old")]

        async def fast():
            return [match("new")]

        fetches = [slow, fast]
        feed = Feed("live matches", lambda: fetches.pop(0)(), self.notifier)
        first = asyncio.create_task(feed.refresh())
        await asyncio.sleep(0)
        self.assertTrue(await feed.refresh())
        slow_gate.set()
        self.assertFalse(await first)
        self.assertEqual([m.id for m in feed.items], ["new"])

    async def test_overlapping_results_apply_in_completion_order(self):
        """Test that an earlier refresh still lands when it finishes first"""
        gates = [asyncio.Event(), asyncio.Event()]
        responses = [[match("first")], [match("second")]]

        async def fetch():
            gate, items = gates.pop(0), responses.pop(0)
            await gate.wait()
            return items

        first_gate, second_gate = gates
        feed = Feed("live matches", fetch, self.notifier)
        first = asyncio.create_task(feed.refresh())
        second = asyncio.create_task(feed.refresh())
        await asyncio.sleep(0)

        first_gate.set()
        self.assertTrue(await first)
        self.assertIs(feed.state, ViewState.POPULATED)
        self.assertEqual([m.id for m in feed.items], ["first"])

        second_gate.set()
        self.assertTrue(await second)
        self.assertEqual([m.id for m in feed.items], ["second"])

    async def test_overlapping_failures_each_notify(self):
        fetch = ScriptedFetch(FetchFailure("live matches", "offline"))
        fetch.gate = asyncio.Event()
        feed = Feed("live matches", fetch, self.notifier)
        pending = [asyncio.create_task(feed.refresh()) for _ in range(2)]
        await asyncio.sleep(0)
        fetch.gate.set()
        self.assertEqual(await asyncio.gather(*pending), [False, False])
        self.assertIs(feed.state, ViewState.ERROR)
        self.assertEqual(len(self.notifier.messages), 2)

    async def test_older_failure_keeps_newer_collection(self):
        """Test that a late failure is reported without undoing a newer result"""
        slow_gate = asyncio.Event()

        async def slow():
            await slow_gate.wait()
            raise FetchFailure("live matches", "timeout")

        async def fast():
            return [match("new")]

        fetches = [slow, fast]
        feed = Feed("live matches", lambda: fetches.pop(0)(), self.notifier)
        first = asyncio.create_task(feed.refresh())
        await asyncio.sleep(0)
        self.assertTrue(await feed.refresh())
        slow_gate.set()
        self.assertFalse(await first)
        self.assertIs(feed.state, ViewState.POPULATED)
        self.assertIsNone(feed.last_error)
        self.assertEqual([m.id for m in feed.items], ["new"])
        self.assertEqual(self.notifier.messages,
                         [("Error", "Failed to load live matches", DESTRUCTIVE)])

    async def test_resolution_after_close_is_ignored(self):
        fetch = ScriptedFetch([match("1")])
        fetch.gate = asyncio.Event()
        feed = Feed("live matches", fetch, self.notifier)
        pending = asyncio.create_task(feed.refresh())
        await asyncio.sleep(0)
        feed.close()
        fetch.gate.set()
        self.assertFalse(await pending)
        self.assertEqual(feed.items, [])
        self.assertFalse(await feed.refresh())
        self.assertEqual(fetch.calls, 1)

    async def test_failure_after_close_does_not_notify(self):
        fetch = ScriptedFetch(FetchFailure("live matches", "offline"))
        fetch.gate = asyncio.Event()
        feed = Feed("live matches", fetch, self.notifier)
        pending = asyncio.create_task(feed.refresh())
        await asyncio.sleep(0)
        feed.close()
        fetch.gate.set()
        await pending
        self.assertEqual(self.notifier.messages, [])

    async def test_reopen_after_close(self):
        fetch = ScriptedFetch([match("1")], [match("2")])
        fetch.gate = asyncio.Event()
        feed = Feed("live matches", fetch, self.notifier)
        stale = asyncio.create_task(feed.refresh())
        await asyncio.sleep(0)
        feed.close()
        feed.reopen()
        fetch.gate.set()
        self.assertFalse(await stale)
        self.assertTrue(await feed.refresh())
        self.assertEqual([m.id for m in feed.items], ["2"])

    async def test_timeout_is_a_failure(self):
        async def hang():
            await asyncio.sleep(10)
            return []

        feed = Feed("profile", hang, self.notifier, timeout=0.01)
        self.assertFalse(await feed.refresh())
        self.assertIs(feed.state, ViewState.ERROR)
        self.assertEqual(len(self.notifier.messages), 1)

    async def test_listener_called_when_settled(self):
        seen = []
        feed = Feed("live matches", ScriptedFetch([match("1")]), self.notifier)
        feed.add_listener(lambda f: seen.append(f.state))
        await feed.refresh()
        self.assertEqual(seen, [ViewState.POPULATED])


class TestHistoryFeed(unittest.IsolatedAsyncioTestCase):
    """Test stats recomputation on every fetch"""

    async def test_stats_follow_collection(self):
        results = await MockDataProvider(now=NOW).fetch_prediction_history()
        fetch = ScriptedFetch(results, results, [])
        feed = HistoryFeed("prediction history", fetch, RecordingNotifier())

        await feed.refresh()
        self.assertEqual(feed.stats.total, 2)
        await feed.refresh()
        self.assertEqual(feed.stats.total, 2)
        self.assertAlmostEqual(feed.stats.profit, 45.5)
        await feed.refresh()
        self.assertIs(feed.state, ViewState.EMPTY)
        self.assertEqual(feed.stats.total, 0)
        self.assertEqual(feed.stats.win_rate, 0.0)


class TestPoller(unittest.IsolatedAsyncioTestCase):
    """Test the periodic fetch driver"""

    def test_interval_must_be_positive(self):
        with self.assertRaises(ValueError):
            Poller(ScriptedFetch([]), interval=0)

    async def test_fires_immediately_and_on_every_tick(self):
        fetch = ScriptedFetch([])
        poller = Poller(fetch, interval=0.05)
        poller.start()
        await asyncio.sleep(0.16)
        await poller.aclose()
        await asyncio.sleep(0)
        self.assertGreaterEqual(fetch.calls, 3)
        self.assertEqual(poller.invocations, fetch.calls)

    async def test_no_invocations_after_stop(self):
        fetch = ScriptedFetch([])
        poller = Poller(fetch, interval=0.05)
        poller.start()
        await asyncio.sleep(0.01)
        self.assertEqual(fetch.calls, 1)
        poller.stop()
        self.assertFalse(poller.running)
        await asyncio.sleep(0.15)
        self.assertEqual(fetch.calls, 1)

    async def test_stop_is_idempotent(self):
        poller = Poller(ScriptedFetch([]), interval=1)
        poller.stop()
        poller.start()
        poller.stop()
        poller.stop()
        self.assertFalse(poller.running)

    async def test_double_start(self):
        poller = Poller(ScriptedFetch([]), interval=1)
        poller.start()
        with self.assertRaises(RuntimeError):
            poller.start()
        await poller.aclose()

    async def test_invocations_overlap(self):
        fetch = ScriptedFetch([])
        fetch.gate = asyncio.Event()
        async with Poller(fetch, interval=0.02) as poller:
            await asyncio.sleep(0.07)
            self.assertGreaterEqual(poller.inflight, 2)
            fetch.gate.set()
            await asyncio.sleep(0.01)
        await asyncio.sleep(0.01)
        self.assertEqual(poller.inflight, 0)

    async def test_failing_fetch_keeps_schedule(self):
        fetch = ScriptedFetch(RuntimeError("boom"))
        poller = Poller(fetch, interval=0.02, name="test poller")
        with self.assertLogs("tipmaster.poller", level="ERROR"):
            poller.start()
            await asyncio.sleep(0.07)
            self.assertTrue(poller.running)
        await poller.aclose()
        self.assertGreaterEqual(fetch.calls, 2)

    async def test_polled_feed_keeps_matches_on_failure(self):
        notifier = RecordingNotifier()
        fetch = ScriptedFetch([match("1", 3)], FetchFailure("live matches", "offline"))
        feed = Feed("live matches", fetch, notifier)
        async with Poller(feed.refresh, interval=0.05):
            await asyncio.sleep(0.07)
        feed.close()
        self.assertEqual(fetch.calls, 2)
        self.assertIs(feed.state, ViewState.POPULATED)
        self.assertEqual(feed.items[0].home_score, 3)
        self.assertEqual(notifier.messages, [("Error", "Failed to load live matches", DESTRUCTIVE)])

    async def test_fetch_slower_than_interval_still_populates(self):
        """Test a feed whose fetch outlasts the poll interval"""
        async def slow_fetch():
            await asyncio.sleep(0.08)
            return [match("1")]

        feed = Feed("live matches", slow_fetch, RecordingNotifier())
        async with Poller(feed.refresh, interval=0.03) as poller:
            await asyncio.sleep(0.3)
            self.assertGreaterEqual(poller.invocations, 5)
        feed.close()
        self.assertIsNot(feed.state, ViewState.EMPTY)
        self.assertEqual([m.id for m in feed.items], ["1"])


class CountingProvider(MockDataProvider):
    def __init__(self):
        super().__init__(now=NOW)
        self.live_calls = 0

    async def fetch_live_matches(self):
        self.live_calls += 1
        return await super().fetch_live_matches()


class TestDashboard(unittest.IsolatedAsyncioTestCase):
    """Test dashboard mount, render and teardown"""

    def setUp(self):
        self.notifier = RecordingNotifier()
        self.provider = CountingProvider()
        self.dashboard = Dashboard(Session.demo(), self.provider, notifier=self.notifier,
                                   settings=Settings(live_poll_interval=0.05))

    async def test_mount_loads_every_feed(self):
        await self.dashboard.mount()
        await asyncio.sleep(0.01)
        try:
            for feed in self.dashboard.feeds:
                self.assertIs(feed.state, ViewState.POPULATED, feed.name)
            self.assertTrue(self.dashboard.live_poller.running)
            self.assertFalse(self.dashboard.current_profile.is_active)

            text = self.dashboard.render()
            self.assertIn("Today's Predictions", text)
            self.assertIn("Liverpool vs Arsenal", text)
            self.assertIn("Real Madrid vs Barcelona", text)
            self.assertIn("Win Rate: 50.0%", text)
            self.assertIn("Total P&L: $45.50", text)
            self.assertIn("Upgrade for premium predictions", text)
        finally:
            await self.dashboard.unmount()

    async def test_unmount_stops_polling(self):
        async with self.dashboard:
            await asyncio.sleep(0.07)
        calls = self.provider.live_calls
        self.assertGreaterEqual(calls, 2)
        self.assertFalse(self.dashboard.live_poller.running)
        self.assertTrue(all(feed.closed for feed in self.dashboard.feeds))
        await asyncio.sleep(0.1)
        self.assertEqual(self.provider.live_calls, calls)

    async def test_remount_reopens_feeds(self):
        """Test that a dashboard can be mounted again after unmount"""
        await self.dashboard.mount()
        await self.dashboard.unmount()
        calls = self.provider.live_calls

        await self.dashboard.mount()
        try:
            self.assertFalse(any(feed.closed for feed in self.dashboard.feeds))
            self.assertTrue(self.dashboard.live_poller.running)
            self.assertTrue(await self.dashboard.refresh("predictions"))
            await asyncio.sleep(0.01)
            self.assertGreater(self.provider.live_calls, calls)
            self.assertIs(self.dashboard.live_matches.state, ViewState.POPULATED)
        finally:
            await self.dashboard.unmount()

    async def test_user_refresh(self):
        await self.dashboard.load()
        self.assertTrue(await self.dashboard.refresh("history"))
        self.assertEqual(self.dashboard.history.stats.total, 2)
        with self.assertRaises(ValueError):
            await self.dashboard.refresh("settings")

    async def test_render_single_tab(self):
        await self.dashboard.load()
        text = self.dashboard.render("live")
        self.assertIn("Live Matches", text)
        self.assertNotIn("Today's Predictions", text)

    def test_subscribe(self):
        self.dashboard.subscribe("Premium")
        self.assertEqual(self.notifier.messages,
                         [("Subscription", "Premium subscription feature coming soon!", INFO)])
        with self.assertRaises(ValueError):
            self.dashboard.subscribe("Gold")


if __name__ == "__main__":
    unittest.main()
