"""
Data models for the TipMaster dashboard
"""
from dataclasses import dataclass
from typing import Any, Dict, Optional
from datetime import datetime

PREDICTION_TYPES = ("safe", "risky")

# Monthly price in dollars per plan
SUBSCRIPTION_PLANS = {
    "Premium": 29,
    "VIP": 79,
}


def parse_bool(value: Any) -> bool:
    """Parse a flag given as a bool, a number or text such as ``True`` or ``0``"""
    if isinstance(value, str):
        text = value.strip().lower()
        if text in ("true", "1", "yes"):
            return True
        if text in ("false", "0", "no", ""):
            return False
        raise ValueError(f"Not a boolean: {value!r}")
    return bool(value)


def parse_timestamp(value: Any) -> Optional[datetime]:
    """Parse an ISO-8601 string (a trailing Z is accepted) into a datetime"""
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value
    text = str(value).strip()
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    return datetime.fromisoformat(text)


def _text(value: Any) -> str:
    return "" if value is None else str(value)


@dataclass(frozen=True)
class Match:
    """A fixture snapshot as delivered by one fetch"""

    id: str
    home_team: str
    away_team: str
    sport: str = "soccer"
    league: str = ""
    match_date: Optional[datetime] = None
    status: str = "upcoming"
    home_score: int = 0
    away_score: int = 0
    home_corners: int = 0
    away_corners: int = 0
    home_bookings: int = 0
    away_bookings: int = 0

    @property
    def title(self) -> str:
        """Home vs away label"""
        return f"{self.home_team} vs {self.away_team}"

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Match":
        """Build a match from a provider record"""
        return cls(
            id=_text(data.get("id")),
            home_team=data["home_team"],
            away_team=data["away_team"],
            sport=data.get("sport") or "other",
            league=data.get("league") or "",
            match_date=parse_timestamp(data.get("match_date")),
            status=data.get("status") or "upcoming",
            home_score=int(data.get("home_score") or 0),
            away_score=int(data.get("away_score") or 0),
            home_corners=int(data.get("home_corners") or 0),
            away_corners=int(data.get("away_corners") or 0),
            home_bookings=int(data.get("home_bookings") or 0),
            away_bookings=int(data.get("away_bookings") or 0),
        )


@dataclass(frozen=True)
class Prediction:
    """A published tip on a match"""

    id: str
    match: Match
    predicted_outcome: str
    odds: float
    confidence_score: int
    prediction_type: str = "safe"
    reasoning: str = ""

    def __post_init__(self):
        """Validate prediction data"""
        if self.confidence_score < 0 or self.confidence_score > 100:
            raise ValueError(
                f"Confidence score must be between 0 and 100, got {self.confidence_score}"
            )
        if self.prediction_type not in PREDICTION_TYPES:
            raise ValueError(f"Unknown prediction type: {self.prediction_type!r}")

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Prediction":
        """Build a prediction from a provider record with a nested ``match``"""
        return cls(
            id=_text(data.get("id")),
            match=Match.from_dict(data["match"]),
            predicted_outcome=data["predicted_outcome"],
            odds=float(data["odds"]),
            confidence_score=int(data["confidence_score"]),
            prediction_type=data.get("prediction_type") or "safe",
            reasoning=data.get("reasoning") or "",
        )


@dataclass(frozen=True)
class PredictionResult:
    """How a prediction settled"""

    id: str
    prediction: Prediction
    actual_outcome: str
    is_correct: bool
    profit_loss: float
    created_at: Optional[datetime] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "PredictionResult":
        """
        Build a result from a provider record

        Args:
            data: Record with a nested ``prediction``; ``is_correct`` may be
                a bool or a string such as ``"True"``

        Returns:
            PredictionResult
        """
        return cls(
            id=_text(data.get("id")),
            prediction=Prediction.from_dict(data["prediction"]),
            actual_outcome=data["actual_outcome"],
            is_correct=parse_bool(data["is_correct"]),
            profit_loss=float(data["profit_loss"]),
            created_at=parse_timestamp(data.get("created_at")),
        )


@dataclass(frozen=True)
class Profile:
    """Subscriber profile; no expiry on an active subscription means unlimited"""

    id: str
    subscription_status: str = "inactive"
    subscription_expires_at: Optional[datetime] = None

    @property
    def is_active(self) -> bool:
        """True only for an ``active`` subscription"""
        return self.subscription_status == "active"

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Profile":
        return cls(
            id=_text(data.get("id")),
            subscription_status=data.get("subscription_status") or "inactive",
            subscription_expires_at=parse_timestamp(data.get("subscription_expires_at")),
        )


@dataclass(frozen=True)
class SummaryStats:
    """Derived totals for a set of prediction results, kept at full precision"""

    total: int = 0
    correct: int = 0
    profit: float = 0.0
    win_rate: float = 0.0

    def __str__(self):
        """String representation of the stats, rounded for display"""
        return (
            f"Total Predictions: {self.total}\n"
            f"  Correct: {self.correct}\n"
            f"  Win Rate: {self.win_rate:.1f}%\n"
            f"  Total P&L: ${self.profit:.2f}"
        )


@dataclass
class Session:
    """The signed-in user a dashboard is rendered for"""

    user_id: str
    email: str
    full_name: Optional[str] = None

    @classmethod
    def demo(cls) -> "Session":
        """Session for the demonstration user"""
        return cls(user_id="1", email="demo@example.com", full_name="Demo User")
