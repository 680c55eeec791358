"""Minute-of-day aggregation, ranking and report rendering."""

from price_history.analytics.aggregator import MinuteBucket, aggregate, since
from price_history.analytics.reporter import (
    SortOrder,
    build_report,
    format_entry,
    minute_of_day_to_string,
    parse_days,
    rank,
    render_report,
)

__all__ = [
    "MinuteBucket",
    "SortOrder",
    "aggregate",
    "build_report",
    "format_entry",
    "minute_of_day_to_string",
    "parse_days",
    "rank",
    "render_report",
    "since",
]
