"""
Display classification for predictions, matches and results

Every helper is total: unrecognised values fall back to a neutral class
or a generic icon instead of raising.
"""

POSITIVE = "positive"
WARNING = "warning"
NEGATIVE = "negative"
ALERT = "alert"
INFO = "info"
NEUTRAL = "neutral"

HIGH = "high"
MEDIUM = "medium"
LOW = "low"

HIGH_CONFIDENCE = 80
MEDIUM_CONFIDENCE = 60

SPORT_ICONS = {
    "soccer": "⚽",
    "basketball": "🏀",
    "baseball": "⚾",
    "cricket": "🏏",
}
DEFAULT_SPORT_ICON = "🏆"

_PREDICTION_TYPE_CLASSES = {
    "safe": POSITIVE,
    "risky": WARNING,
}

_STATUS_CLASSES = {
    "live": ALERT,
    "upcoming": INFO,
    "finished": NEUTRAL,
}

_SUBSCRIPTION_CLASSES = {
    "active": POSITIVE,
    "inactive": NEUTRAL,
    "cancelled": NEGATIVE,
}


def prediction_type_class(prediction_type: str) -> str:
    """Class for a prediction type; unknown types are neutral"""
    return _PREDICTION_TYPE_CLASSES.get(prediction_type, NEUTRAL)


def confidence_tier(confidence: int) -> str:
    """
    Tier for a confidence score

    Args:
        confidence: Score from 0 to 100

    Returns:
        HIGH from 80, MEDIUM from 60, LOW below that
    """
    if confidence >= HIGH_CONFIDENCE:
        return HIGH
    if confidence >= MEDIUM_CONFIDENCE:
        return MEDIUM
    return LOW


def status_class(status: str) -> str:
    """Class for a match status; unknown statuses are neutral"""
    return _STATUS_CLASSES.get(status, NEUTRAL)


def profit_class(profit: float) -> str:
    """POSITIVE for a gain, NEGATIVE for a loss, NEUTRAL at exactly zero"""
    if profit > 0:
        return POSITIVE
    if profit < 0:
        return NEGATIVE
    return NEUTRAL


def result_badge(is_correct: bool):
    """Label and class for a settled result"""
    return ("WIN", POSITIVE) if is_correct else ("LOSS", NEGATIVE)


def subscription_class(status: str) -> str:
    """Class for a subscription status"""
    return _SUBSCRIPTION_CLASSES.get(status, NEUTRAL)


def sport_icon(sport: str) -> str:
    """Icon for a sport, or the generic trophy"""
    return SPORT_ICONS.get(sport, DEFAULT_SPORT_ICON)
