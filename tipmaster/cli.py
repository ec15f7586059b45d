"""
Command-line interface for the TipMaster dashboard
"""
import argparse
import asyncio
import dataclasses
import sys

from tipmaster.config import Settings, get_settings
from tipmaster.dashboard import Dashboard
from tipmaster.logging import setup_logging
from tipmaster.models import SUBSCRIPTION_PLANS, Session
from tipmaster.notifier import ConsoleNotifier
from tipmaster.provider import CsvDataProvider, MockDataProvider
from tipmaster.render import Renderer


def load_settings(args) -> Settings:
    """Environment settings with command-line overrides applied"""
    settings = get_settings()
    overrides = {}
    if args.data_dir:
        overrides["data_dir"] = args.data_dir
    if args.log_level:
        overrides["log_level"] = args.log_level
    if args.interval is not None:
        overrides["live_poll_interval"] = args.interval
    return dataclasses.replace(settings, **overrides)


def build_dashboard(args) -> Dashboard:
    settings = load_settings(args)
    setup_logging(settings)
    if settings.data_dir:
        provider = CsvDataProvider(settings.data_dir)
    else:
        provider = MockDataProvider()
    color = args.color if args.color is not None else sys.stdout.isatty()
    return Dashboard(
        session=Session.demo(),
        provider=provider,
        notifier=ConsoleNotifier(),
        settings=settings,
        renderer=Renderer(color=color),
    )


async def _render_once(dashboard: Dashboard, tab=None) -> str:
    await dashboard.load()
    if tab == "subscription":
        return dashboard.render_tab(tab)
    return dashboard.render(tab)


def demo_command(args):
    """Handle demo command"""
    dashboard = build_dashboard(args)
    print(asyncio.run(_render_once(dashboard)))
    print("\nNote: All data shown is demonstration data.\n")
    return 0


def view_command(args):
    """Handle predictions, history and subscription commands"""
    dashboard = build_dashboard(args)
    print(asyncio.run(_render_once(dashboard, args.command)))
    return 0


async def _watch_live(dashboard: Dashboard, duration):
    def redraw(feed):
        print(dashboard.render_tab("live"))
        print("-" * 60 + "\n")

    dashboard.live_matches.add_listener(redraw)
    await dashboard.mount()
    try:
        if duration is None:
            await asyncio.Event().wait()
        else:
            await asyncio.sleep(duration)
    finally:
        await dashboard.unmount()


def live_command(args):
    """Handle live command"""
    dashboard = build_dashboard(args)
    print(f"Watching live matches every {dashboard.settings.live_poll_interval:g}s "
          "(Ctrl-C to stop)\n")
    try:
        asyncio.run(_watch_live(dashboard, args.duration))
    except KeyboardInterrupt:
        print("\nStopped.")
    return 0


def subscribe_command(args):
    """Handle subscribe command"""
    dashboard = build_dashboard(args)
    dashboard.subscribe(args.plan)
    return 0


def main(argv=None):
    """Main CLI entry point"""
    parser = argparse.ArgumentParser(
        description="Sports prediction dashboard",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Show every tab with demonstration data
  tipmaster demo

  # Follow live scores for two minutes
  tipmaster live --duration 120

  # Prediction history read from CSV files
  tipmaster --data-dir ./data history
        """
    )
    parser.add_argument("--data-dir", help="Directory with predictions.csv, matches.csv, "
                                           "history.csv and profile.csv (default: demo data)")
    parser.add_argument("--log-level", help="Logging level (default: INFO)")
    parser.add_argument("--interval", type=float,
                        help="Live match refresh interval in seconds (default: 30)")
    parser.add_argument("--color", dest="color", action="store_true", default=None,
                        help="Force coloured output")
    parser.add_argument("--no-color", dest="color", action="store_false",
                        help="Disable coloured output")

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    demo_parser = subparsers.add_parser("demo", help="Show the whole dashboard once")
    demo_parser.set_defaults(func=demo_command)

    for name, help_text in (("predictions", "Show today's predictions"),
                            ("history", "Show prediction history and stats"),
                            ("subscription", "Show subscription status")):
        view_parser = subparsers.add_parser(name, help=help_text)
        view_parser.set_defaults(func=view_command)

    live_parser = subparsers.add_parser("live", help="Follow live matches")
    live_parser.add_argument("--duration", type=float, default=None,
                             help="Stop after this many seconds (default: run until Ctrl-C)")
    live_parser.set_defaults(func=live_command)

    subscribe_parser = subparsers.add_parser("subscribe", help="Choose a subscription plan")
    subscribe_parser.add_argument("plan", choices=sorted(SUBSCRIPTION_PLANS),
                                  help="Plan name")
    subscribe_parser.set_defaults(func=subscribe_command)

    args = parser.parse_args(argv)
    if args.interval is not None and args.interval <= 0:
        parser.error(f"--interval must be positive, got {args.interval:g}")

    if not args.command:
        parser.print_help()
        return 1

    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
