"""
Data providers supplying predictions, live matches, history and profile
"""
import asyncio
import logging
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Any, Dict, List, Optional

import pandas as pd

from tipmaster.models import Match, Prediction, PredictionResult, Profile

logger = logging.getLogger(__name__)

PREDICTIONS_FILE = "predictions.csv"
MATCHES_FILE = "matches.csv"
HISTORY_FILE = "history.csv"
PROFILE_FILE = "profile.csv"


class FetchFailure(Exception):
    """A data provider call did not produce a result"""

    def __init__(self, feed: str, message: str):
        super().__init__(f"{feed}: {message}")
        self.feed = feed


class DataProvider:
    """
    Source of dashboard data

    Every fetch is a coroutine and may raise FetchFailure.
    """

    async def fetch_predictions(self) -> List[Prediction]:
        raise NotImplementedError

    async def fetch_live_matches(self) -> List[Match]:
        raise NotImplementedError

    async def fetch_prediction_history(self) -> List[PredictionResult]:
        raise NotImplementedError

    async def fetch_profile(self) -> Profile:
        raise NotImplementedError


class MockDataProvider(DataProvider):
    """
    Built-in demo data

    Identifiers are fixed, so every fetch returns the same ids. Timestamps
    are relative to ``now`` (the current UTC time unless given).
    """

    def __init__(self, now: Optional[datetime] = None):
        self.now = now

    def _now(self) -> datetime:
        return self.now or datetime.now(timezone.utc)

    async def fetch_predictions(self) -> List[Prediction]:
        now = self._now()
        return [
            Prediction(
                id="1",
                predicted_outcome="Liverpool Win",
                odds=2.45,
                confidence_score=85,
                prediction_type="safe",
                reasoning=(
                    "Liverpool has won 8 out of their last 10 home games. Strong attacking "
                    "form with Salah and Mane in excellent condition."
                ),
                match=Match(id="1", home_team="Liverpool", away_team="Arsenal",
                            sport="soccer", match_date=now, status="upcoming"),
            ),
            Prediction(
                id="2",
                predicted_outcome="Over 2.5 Goals",
                odds=1.85,
                confidence_score=92,
                prediction_type="risky",
                reasoning=(
                    "Both teams average over 2.5 goals per game in last 5 matches. "
                    "High-scoring encounter expected."
                ),
                match=Match(id="2", home_team="Manchester City", away_team="Chelsea",
                            sport="soccer", match_date=now + timedelta(hours=1),
                            status="upcoming"),
            ),
        ]

    async def fetch_live_matches(self) -> List[Match]:
        now = self._now()
        return [
            Match(id="1", sport="soccer", home_team="Real Madrid", away_team="Barcelona",
                  league="La Liga", match_date=now, status="live",
                  home_score=2, away_score=1, home_corners=6, away_corners=4,
                  home_bookings=2, away_bookings=3),
            Match(id="2", sport="basketball", home_team="Lakers", away_team="Warriors",
                  league="NBA", match_date=now, status="live",
                  home_score=89, away_score=76, home_corners=0, away_corners=0,
                  home_bookings=4, away_bookings=2),
        ]

    async def fetch_prediction_history(self) -> List[PredictionResult]:
        now = self._now()
        return [
            PredictionResult(
                id="1",
                actual_outcome="Liverpool Win",
                is_correct=True,
                profit_loss=145.50,
                created_at=now,
                prediction=Prediction(
                    id="1", predicted_outcome="Liverpool Win", odds=2.45,
                    confidence_score=85, prediction_type="safe",
                    match=Match(id="1", home_team="Liverpool", away_team="Arsenal",
                                sport="soccer", status="finished",
                                home_score=3, away_score=1),
                ),
            ),
            PredictionResult(
                id="2",
                actual_outcome="Under 2.5 Goals",
                is_correct=False,
                profit_loss=-100.00,
                created_at=now - timedelta(days=1),
                prediction=Prediction(
                    id="2", predicted_outcome="Over 2.5 Goals", odds=1.85,
                    confidence_score=75, prediction_type="risky",
                    match=Match(id="2", home_team="Manchester City", away_team="Chelsea",
                                sport="soccer", status="finished",
                                home_score=1, away_score=0),
                ),
            ),
        ]

    async def fetch_profile(self) -> Profile:
        return Profile(id="1", subscription_status="inactive", subscription_expires_at=None)


def _nest(record: Dict[str, Any], prefix: str) -> Dict[str, Any]:
    """Pull ``prefix``-ed columns out of a flat record into a nested dict"""
    nested = {}
    for key in [k for k in record if k.startswith(prefix)]:
        nested[key[len(prefix):]] = record.pop(key)
    return nested


class CsvDataProvider(DataProvider):
    """
    Reads the four feeds from CSV files in a directory

    Nested objects are flattened into prefixed columns: ``match_home_team``
    in predictions.csv, ``prediction_odds`` and ``prediction_match_sport``
    in history.csv.
    """

    def __init__(self, data_dir):
        self.data_dir = Path(data_dir)

    def _read_records(self, filename: str) -> List[Dict[str, Any]]:
        # Every cell stays text so ids such as "007" survive; blanks read as ""
        df = pd.read_csv(self.data_dir / filename, dtype=str, keep_default_na=False)
        return df.to_dict("records")

    async def _load(self, feed: str, filename: str, parse):
        try:
            records = await asyncio.to_thread(self._read_records, filename)
            return [parse(record) for record in records]
        except (OSError, ValueError, KeyError, TypeError) as e:
            logger.debug("Reading %s failed", self.data_dir / filename, exc_info=True)
            raise FetchFailure(feed, str(e)) from e

    async def fetch_predictions(self) -> List[Prediction]:
        def parse(record):
            record["match"] = _nest(record, "match_")
            return Prediction.from_dict(record)

        return await self._load("predictions", PREDICTIONS_FILE, parse)

    async def fetch_live_matches(self) -> List[Match]:
        return await self._load("live matches", MATCHES_FILE, Match.from_dict)

    async def fetch_prediction_history(self) -> List[PredictionResult]:
        def parse(record):
            prediction = _nest(record, "prediction_")
            prediction["match"] = _nest(prediction, "match_")
            record["prediction"] = prediction
            return PredictionResult.from_dict(record)

        return await self._load("prediction history", HISTORY_FILE, parse)

    async def fetch_profile(self) -> Profile:
        profiles = await self._load("profile", PROFILE_FILE, Profile.from_dict)
        if not profiles:
            raise FetchFailure("profile", f"{PROFILE_FILE} has no rows")
        return profiles[0]
