"""
Basic example of loading and rendering the dashboard
"""
import asyncio

from tipmaster import Dashboard, MockDataProvider, Session
from tipmaster.notifier import ConsoleNotifier


async def run():
    dashboard = Dashboard(Session.demo(), MockDataProvider(), notifier=ConsoleNotifier())

    print("Loading dashboard...\n")
    await dashboard.load()
    print(dashboard.render())

    stats = dashboard.history.stats
    print("\n" + "="*60)
    print("Analysis:")
    print(f"  - {stats.correct} of {stats.total} predictions were correct")
    print(f"  - Win rate: {stats.win_rate:.1f}%")

    if stats.win_rate >= 60:
        print("  - This is a STRONG record")
    elif stats.win_rate >= 40:
        print("  - This is an AVERAGE record")
    else:
        print("  - This is a WEAK record")

    print("="*60)


def main():
    """Run basic dashboard example"""
    print("TipMaster - Basic Example\n")
    asyncio.run(run())


if __name__ == "__main__":
    main()
