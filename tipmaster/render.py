"""
Text rendering of dashboard views

Values are rounded here and nowhere else: win rate to 1 decimal place,
money to 2.
"""
from datetime import datetime
from typing import Callable, Optional

from tipmaster import styles
from tipmaster.feed import Feed, HistoryFeed, ViewState
from tipmaster.models import (
    SUBSCRIPTION_PLANS, Match, Prediction, PredictionResult, Profile, SummaryStats,
)

WIDTH = 60
CARD_RULE = "-" * WIDTH
BOOKMAKERS = ("Betway", "Hollywood")

_ANSI = {
    styles.POSITIVE: "\033[32m",
    styles.WARNING: "\033[33m",
    styles.NEGATIVE: "\033[31m",
    styles.ALERT: "\033[31m",
    styles.INFO: "\033[34m",
    styles.HIGH: "\033[32m",
    styles.MEDIUM: "\033[33m",
    styles.LOW: "\033[31m",
}
_RESET = "\033[0m"


class Renderer:
    """Renders feeds to plain text, optionally with ANSI colours"""

    def __init__(self, color: bool = False):
        self.color = color

    def paint(self, text: str, css_class: str) -> str:
        """Wrap ``text`` in the colour for ``css_class`` when colour is on"""
        code = _ANSI.get(css_class)
        if not self.color or code is None:
            return text
        return f"{code}{text}{_RESET}"

    def badge(self, label: str, css_class: str = styles.NEUTRAL) -> str:
        return self.paint(f"[{label}]", css_class)

    def money(self, amount: float) -> str:
        """Amount coloured by sign"""
        return self.paint(format_money(amount), styles.profit_class(amount))

    # Feed-level rendering

    def feed(self, feed: Feed, card: Callable, loading_text: str, empty_text: str) -> str:
        """
        Render a feed according to its view state

        Args:
            feed: Feed to render
            card: Renders one item of the feed
            loading_text: Shown while nothing has loaded yet
            empty_text: Shown for EMPTY and for ERROR without a collection

        Returns:
            The rendered text
        """
        if feed.state is ViewState.LOADING and not feed.items:
            return f"⏳ {loading_text}"
        if not feed.items:
            return empty_text

        lines = []
        if feed.state is ViewState.LOADING:
            lines.append("(refreshing...)")
        elif feed.last_error is not None:
            lines.append("(showing last successful update)")
        cards = [card(item) for item in feed.items]
        lines.append(f"\n{CARD_RULE}\n".join(cards))
        return "\n".join(lines)

    def predictions(self, feed: Feed) -> str:
        return self.feed(feed, self.prediction_card,
                         "Loading predictions...", "No active predictions available")

    def live_matches(self, feed: Feed) -> str:
        return self.feed(feed, self.match_card,
                         "Loading live matches...", "No live matches at the moment")

    def history(self, feed: HistoryFeed) -> str:
        """Summary stats above the result cards"""
        if feed.state is ViewState.LOADING and not feed.items:
            return "⏳ Loading prediction history..."
        body = self.feed(feed, self.result_card,
                         "Loading prediction history...", "No prediction results available")
        return f"{self.stats(feed.stats)}\n\n{body}"

    def subscription(self, feed: Feed) -> str:
        if feed.state is ViewState.LOADING and not feed.items:
            return "Subscription Status\n⏳ Loading..."
        profile = feed.items[0] if feed.items else None
        return self.subscription_panel(profile)

    # Cards

    def prediction_card(self, prediction: Prediction) -> str:
        match = prediction.match
        type_badge = self.badge(prediction.prediction_type.upper(),
                                styles.prediction_type_class(prediction.prediction_type))
        confidence = self.paint(f"{prediction.confidence_score}%",
                                styles.confidence_tier(prediction.confidence_score))
        lines = [
            f"{match.title}  {type_badge} {self.badge(f'{prediction.odds:.2f} odds')}",
            f"{match.sport.upper()} • {format_timestamp(match.match_date)}",
            f"Prediction: {prediction.predicted_outcome}",
            f"Confidence: {confidence}   Status: {self.badge(match.status, styles.status_class(match.status))}",
        ]
        if prediction.reasoning:
            lines.append(f"Analysis: {prediction.reasoning}")
        lines.append(" ".join(self.badge(f"View on {name}") for name in BOOKMAKERS))
        return "\n".join(lines)

    def match_card(self, match: Match) -> str:
        status = self.badge(match.status.upper(), styles.status_class(match.status))
        return "\n".join([
            f"{styles.sport_icon(match.sport)} {match.title}  {status}",
            f"{match.league} • {match.sport.upper()}",
            f"Score: {match.home_score} - {match.away_score}   "
            f"Corners: {match.home_corners} - {match.away_corners}   "
            f"Bookings: {match.home_bookings} - {match.away_bookings}",
            f"Started: {format_timestamp(match.match_date)}",
        ])

    def result_card(self, result: PredictionResult) -> str:
        prediction = result.prediction
        match = prediction.match
        label, css_class = styles.result_badge(result.is_correct)
        return "\n".join([
            f"{match.title}  {self.badge(label, css_class)} {self.badge(f'{prediction.odds:.2f} odds')}",
            f"{match.sport.upper()} • Final: {match.home_score}-{match.away_score}",
            f"Predicted: {prediction.predicted_outcome}",
            f"Actual: {result.actual_outcome}",
            f"Profit/Loss: {self.money(result.profit_loss)}",
            f"Completed: {format_timestamp(result.created_at)}",
        ])

    def stats(self, stats: SummaryStats) -> str:
        return "   ".join([
            f"Total Predictions: {stats.total}",
            f"Correct: {self.paint(str(stats.correct), styles.POSITIVE)}",
            f"Win Rate: {format_percent(stats.win_rate)}",
            f"Total P&L: {self.money(stats.profit)}",
        ])

    def subscription_panel(self, profile: Optional[Profile]) -> str:
        """Expiry for an active profile, otherwise the plan offers"""
        lines = ["Subscription Status"]
        if profile is not None:
            status = profile.subscription_status
            lines.append(self.badge(status.upper(), styles.subscription_class(status)))
        if profile is not None and profile.is_active:
            lines.append("Premium access until:")
            if profile.subscription_expires_at is None:
                lines.append("Unlimited")
            else:
                lines.append(format_date(profile.subscription_expires_at))
        else:
            lines.append("Upgrade for premium predictions")
            for plan, price in SUBSCRIPTION_PLANS.items():
                lines.append(self.badge(f"{plan} - ${price}/month"))
        return "\n".join(lines)


def format_money(amount: float) -> str:
    """Dollar amount rounded to cents"""
    return f"${amount:.2f}"


def format_percent(value: float) -> str:
    """Percentage with one decimal place"""
    return f"{value:.1f}%"


def format_timestamp(value: Optional[datetime]) -> str:
    """Date and minute, or ``-`` when missing"""
    if value is None:
        return "-"
    return value.strftime("%Y-%m-%d %H:%M")


def format_date(value: Optional[datetime]) -> str:
    """Calendar date, or ``-`` when missing"""
    if value is None:
        return "-"
    return value.strftime("%Y-%m-%d")
