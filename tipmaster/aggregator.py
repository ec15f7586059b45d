"""
Summary statistics over settled prediction results
"""
from dataclasses import dataclass, field
from datetime import datetime
from typing import Callable, Dict, List, Sequence

import numpy as np
import pandas as pd

from tipmaster.models import PredictionResult, SummaryStats

# Grouping keys accepted by breakdown()
BREAKDOWN_KEYS: Dict[str, Callable[[PredictionResult], str]] = {
    "prediction_type": lambda r: r.prediction.prediction_type,
    "sport": lambda r: r.prediction.match.sport,
}


def win_rate(correct: int, total: int) -> float:
    """Percentage of correct results, 0 when there are none"""
    if total == 0:
        return 0.0
    return (correct / total) * 100


def aggregate(results: Sequence[PredictionResult]) -> SummaryStats:
    """
    Reduce a collection of results to summary statistics

    Args:
        results: Settled prediction results

    Returns:
        SummaryStats with unrounded profit and win rate
    """
    total = len(results)
    correct = sum(1 for r in results if r.is_correct)
    profit = sum((r.profit_loss for r in results), 0.0)
    return SummaryStats(
        total=total,
        correct=correct,
        profit=profit,
        win_rate=win_rate(correct, total),
    )


def breakdown(results: Sequence[PredictionResult], by: str = "prediction_type") -> Dict[str, SummaryStats]:
    """
    Summary statistics per group of results

    Args:
        results: Settled prediction results
        by: "prediction_type" or "sport"

    Returns:
        Mapping of group value to its SummaryStats, sorted by group value
    """
    if by not in BREAKDOWN_KEYS:
        raise ValueError(f"Cannot break down results by {by!r}")
    if not results:
        return {}

    key = BREAKDOWN_KEYS[by]
    df = pd.DataFrame(
        {
            "group": [key(r) for r in results],
            "is_correct": [bool(r.is_correct) for r in results],
            "profit_loss": [float(r.profit_loss) for r in results],
        }
    )
    grouped = df.groupby("group", sort=True).agg(
        total=("is_correct", "size"),
        correct=("is_correct", "sum"),
        profit=("profit_loss", "sum"),
    )

    stats = {}
    for group, row in grouped.iterrows():
        total = int(row["total"])
        correct = int(row["correct"])
        stats[str(group)] = SummaryStats(
            total=total,
            correct=correct,
            profit=float(row["profit"]),
            win_rate=win_rate(correct, total),
        )
    return stats


@dataclass(frozen=True)
class ProfitCurve:
    """Running profit/loss in settlement order"""

    points: List[float] = field(default_factory=list)
    max_drawdown: float = 0.0

    @property
    def final(self) -> float:
        return self.points[-1] if self.points else 0.0


def _settled_order(result: PredictionResult):
    # Undated results go last, keeping their input order
    return (result.created_at is None, result.created_at or datetime.min)


def profit_curve(results: Sequence[PredictionResult]) -> ProfitCurve:
    """
    Cumulative profit ordered by creation time, with the largest
    peak-to-trough fall measured from a zero starting balance
    """
    if not results:
        return ProfitCurve()

    ordered = sorted(results, key=_settled_order)
    pnl = np.array([r.profit_loss for r in ordered], dtype=float)
    curve = np.cumsum(pnl)
    peaks = np.maximum.accumulate(np.concatenate(([0.0], curve)))[1:]
    drawdown = peaks - curve
    return ProfitCurve(
        points=[float(p) for p in curve],
        max_drawdown=float(drawdown.max()),
    )
