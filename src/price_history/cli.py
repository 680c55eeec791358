"""Command-line entry point for recording prices and reporting minute statistics.

Usage:
    # Fetch the current BTC/GBP price and store it (run this from cron)
    price-history record

    # Best/worst 60 minutes to buy over the last 10 days
    price-history stats

    # Last 30 days, top 20 only, plus the all-time tables
    price-history stats 30 --limit 20 --all-time

Example:
    $ price-history record
    -- START 2026-10-17 09:00:02.114851+00:00
    Record: OK
    -- END 2026-10-17 09:00:02.861003+00:00
"""

import argparse
import sys
from collections.abc import Sequence

from price_history.analytics.reporter import build_report, parse_days, render_report
from price_history.ingestion.recorder import PriceRecorder
from price_history.ingestion.sources.base_source import BasePriceSource
from price_history.ingestion.sources.coingecko_source import CoinGeckoPriceSource
from price_history.shared.config import Config
from price_history.shared.db.storage import PriceStore, open_store
from price_history.shared.exceptions import (
    FetchFailure,
    InvalidArguments,
    InvalidPrice,
    StoreUnavailable,
)
from price_history.shared.utils import PACKAGE_LOGGER, setup_logger, utc_now

COMMANDS = ("record", "stats")


class _ArgumentParser(argparse.ArgumentParser):
    """ArgumentParser that raises InvalidArguments instead of exiting."""

    def error(self, message: str):
        raise InvalidArguments(message)


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser."""
    parser = _ArgumentParser(
        prog="price-history",
        description="Record a coin's spot price and report the cheapest minutes of the day to buy",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )

    parser.add_argument(
        "--database-url",
        type=str,
        default=None,
        help="SQLAlchemy database URL. Default: Config.DATABASE_URL",
        metavar="URL",
    )

    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Enable verbose logging",
    )

    subparsers = parser.add_subparsers(dest="command", metavar="{record,stats}")
    subparsers.required = True

    record = subparsers.add_parser("record", help="Fetch the current price and store it")
    record.add_argument(
        "--asset",
        default=Config.ASSET,
        help=f"Asset symbol. Default: {Config.ASSET}",
    )
    record.add_argument(
        "--currency",
        default=Config.CURRENCY,
        help=f"Currency symbol. Default: {Config.CURRENCY}",
    )

    stats = subparsers.add_parser("stats", help="Report best and worst minutes to buy")
    stats.add_argument(
        "days",
        nargs="?",
        default=None,
        help=(
            f"Window in days. Default: {Config.STATS_DEFAULT_DAYS} "
            "(also used if not a positive integer)"
        ),
    )
    stats.add_argument(
        "--limit",
        type=int,
        default=Config.REPORT_LIMIT,
        help=f"Number of minutes per table. Default: {Config.REPORT_LIMIT}",
    )
    stats.add_argument(
        "--all-time",
        action="store_true",
        help="Also print the tables over the full history",
    )
    stats.add_argument("--asset", default=Config.ASSET, help=f"Default: {Config.ASSET}")
    stats.add_argument("--currency", default=Config.CURRENCY, help=f"Default: {Config.CURRENCY}")

    return parser


def run_record(store: PriceStore, source: BasePriceSource, asset: str, currency: str) -> None:
    recorder = PriceRecorder(store)
    recorder.record_from_source(source, asset, currency, utc_now())
    print("Record: OK")


def run_stats(store: PriceStore, args: argparse.Namespace) -> None:
    days = parse_days(args.days, default=Config.STATS_DEFAULT_DAYS)
    sections = build_report(
        store,
        now=utc_now(),
        asset=args.asset,
        currency=args.currency,
        days=days,
        limit=args.limit,
        include_all_time=args.all_time,
    )
    print(render_report(sections))


def main(argv: Sequence[str] | None = None, source: BasePriceSource | None = None) -> int:
    """Main entry point. Returns the process exit status."""
    parser = build_parser()
    try:
        args = parser.parse_args(argv)
        if args.command == "stats" and args.limit <= 0:
            raise InvalidArguments("--limit must be a positive integer")
    except InvalidArguments as e:
        parser.print_usage(sys.stderr)
        print(f"price-history: error: {e}", file=sys.stderr)
        print(f"Valid subcommands: {', '.join(COMMANDS)}", file=sys.stderr)
        return 2

    logger = setup_logger(PACKAGE_LOGGER, level="DEBUG" if args.verbose else Config.LOG_LEVEL)

    try:
        Config.validate()
    except ValueError as e:
        logger.error("Configuration error: %s", e)
        return 1

    print(f"-- START {utc_now()}")
    try:
        with open_store(args.database_url) as store:
            if args.command == "record":
                run_record(store, source or CoinGeckoPriceSource(), args.asset, args.currency)
            else:
                run_stats(store, args)

    except (FetchFailure, InvalidPrice, ValueError) as e:
        if args.command == "record":
            logger.error("Record failed, nothing stored: %s", e)
        else:
            logger.error("Stats failed: %s", e)
        return 1

    except StoreUnavailable as e:
        logger.error("Price store unavailable: %s", e)
        return 1

    except KeyboardInterrupt:
        logger.warning("Interrupted by user")
        return 130

    print(f"-- END {utc_now()}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
