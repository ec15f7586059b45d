"""
TipMaster - sports prediction dashboard
"""

__version__ = "0.1.0"

from tipmaster.aggregator import aggregate
from tipmaster.dashboard import Dashboard
from tipmaster.feed import Feed, HistoryFeed, ViewState
from tipmaster.models import Match, Prediction, PredictionResult, Profile, Session, SummaryStats
from tipmaster.poller import Poller
from tipmaster.provider import CsvDataProvider, DataProvider, FetchFailure, MockDataProvider

__all__ = [
    "aggregate",
    "Dashboard",
    "Feed",
    "HistoryFeed",
    "ViewState",
    "Match",
    "Prediction",
    "PredictionResult",
    "Profile",
    "Session",
    "SummaryStats",
    "Poller",
    "CsvDataProvider",
    "DataProvider",
    "FetchFailure",
    "MockDataProvider",
]
