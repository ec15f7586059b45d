"""
Example of summarising prediction history read from CSV files
"""
import asyncio
from pathlib import Path

from tipmaster import CsvDataProvider, aggregate
from tipmaster.aggregator import breakdown, profit_curve

DATA_DIR = Path(__file__).parent / "data"


def main():
    """Run history report example"""
    print("TipMaster - History Report\n")

    provider = CsvDataProvider(DATA_DIR)
    results = asyncio.run(provider.fetch_prediction_history())
    print(f"Loaded {len(results)} settled predictions from {DATA_DIR}\n")

    print("Overall:")
    print(aggregate(results))
    print("-"*60)

    for by in ("prediction_type", "sport"):
        print(f"\nBy {by.replace('_', ' ')}:")
        for group, stats in breakdown(results, by=by).items():
            print(f"  {group:<12} {stats.correct}/{stats.total}  "
                  f"{stats.win_rate:5.1f}%  ${stats.profit:.2f}")

    curve = profit_curve(results)
    print("\nRunning P&L: " + ", ".join(f"${p:.2f}" for p in curve.points))
    print(f"Max drawdown: ${curve.max_drawdown:.2f}")


if __name__ == "__main__":
    main()
