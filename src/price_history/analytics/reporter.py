"""Ranking and rendering of minute-of-day buckets.

Ranking sorts buckets by average price. Ascending order breaks ties on the
lower minute first; descending order is the exact reverse of ascending, so
ties there come out highest minute first.

Each ranked entry renders as::

    H:M = Avg. <average> (price <min> - Max <max>)

with hour and minute unpadded (minute 65 -> "1:5").
"""

from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from enum import Enum

import pytz

from price_history.analytics.aggregator import MinuteBucket, aggregate, since
from price_history.shared.db.storage import PriceStore
from price_history.shared.observation import MINUTES_PER_DAY

DEFAULT_DAYS = 10
DEFAULT_LIMIT = 60


class SortOrder(str, Enum):
    ASCENDING = "ascending"  # cheapest first
    DESCENDING = "descending"  # most expensive first


RankedEntry = tuple[int, MinuteBucket]


def rank(
    buckets: Mapping[int, MinuteBucket],
    order: SortOrder = SortOrder.ASCENDING,
    limit: int | None = None,
) -> list[RankedEntry]:
    """Sort buckets by average price and keep the first ``limit`` entries.

    Args:
        buckets: Mapping of minute_of_day to bucket, as returned by aggregate().
        order: ASCENDING for cheapest first, DESCENDING for most expensive first.
        limit: Maximum number of entries; None keeps all of them.

    Raises:
        ValueError: If limit is negative.
    """
    if limit is not None and limit < 0:
        raise ValueError(f"limit must be non-negative, got {limit}")

    ranked = sorted(
        buckets.items(),
        key=lambda item: (item[1].average, item[0]),
        reverse=SortOrder(order) is SortOrder.DESCENDING,
    )
    return ranked if limit is None else ranked[:limit]


def minute_of_day_to_string(minute: int) -> str:
    """``"H:M"`` without zero padding, e.g. 540 -> "9:0"."""
    if not 0 <= minute < MINUTES_PER_DAY:
        raise ValueError(f"minute_of_day out of range: {minute}")
    return f"{minute // 60}:{minute % 60}"


def parse_minute_of_day(text: str) -> int:
    """Inverse of minute_of_day_to_string()."""
    hour_text, _, minute_text = text.partition(":")
    hour, minute = int(hour_text), int(minute_text)
    if not (0 <= hour < 24 and 0 <= minute < 60):
        raise ValueError(f"Not a time of day: {text!r}")
    return hour * 60 + minute


def format_number(value: float) -> str:
    """Shortest decimal form of ``value``; integral values drop the ``.0``."""
    value = float(value)
    if value.is_integer() and abs(value) < 1e16:
        return str(int(value))
    return repr(value)


def format_entry(minute: int, bucket: MinuteBucket) -> str:
    return (
        f"{minute_of_day_to_string(minute)} = Avg. {format_number(bucket.average)} "
        f"(price {format_number(bucket.min)} - Max {format_number(bucket.max)})"
    )


def parse_days(value: str | int | None, default: int = DEFAULT_DAYS) -> int:
    """Window length in days; anything other than a positive integer gives ``default``."""
    if value is None or isinstance(value, bool):
        return default
    try:
        days = int(str(value).strip())
    except ValueError:
        return default
    return days if days > 0 else default


def window_start(now: datetime, days: int) -> datetime:
    """``now`` minus ``days`` days, clamped to the earliest representable instant."""
    try:
        return now - timedelta(days=days)
    except OverflowError:
        return pytz.UTC.localize(datetime.min)


@dataclass
class ReportSection:
    """One ranked table of the report."""

    title: str
    entries: list[RankedEntry] = field(default_factory=list)

    def render(self) -> list[str]:
        return [self.title] + [format_entry(minute, bucket) for minute, bucket in self.entries]


def best_and_worst(
    buckets: Mapping[int, MinuteBucket], label: str, asset: str, limit: int
) -> list[ReportSection]:
    """Best (cheapest) and worst (most expensive) minutes to buy, in that order."""
    return [
        ReportSection(
            title=f"[{label}] Best {limit} mins to buy {asset} (UTC):",
            entries=rank(buckets, SortOrder.ASCENDING, limit),
        ),
        ReportSection(
            title=f"[{label}] Worst {limit} mins to buy {asset} (UTC):",
            entries=rank(buckets, SortOrder.DESCENDING, limit),
        ),
    ]


def build_report(
    store: PriceStore,
    now: datetime,
    asset: str,
    currency: str,
    days: int = DEFAULT_DAYS,
    limit: int = DEFAULT_LIMIT,
    include_all_time: bool = False,
) -> list[ReportSection]:
    """Best/worst minute tables for the last ``days`` days, optionally all-time too.

    Only observations of the given asset/currency pair are considered.
    The store is read once; the window is applied as a filter over that
    snapshot so both tables describe the same data.
    """
    asset, currency = asset.upper(), currency.upper()
    observations = [
        obs for obs in store.query() if obs.asset == asset and obs.currency == currency
    ]
    cutoff = window_start(now, days)

    sections: list[ReportSection] = []
    if include_all_time:
        sections += best_and_worst(aggregate(observations), "All time", asset, limit)

    window = aggregate(observations, filter=since(cutoff))
    sections += best_and_worst(window, f"Last {days} days", asset, limit)
    return sections


def render_report(sections: list[ReportSection]) -> str:
    lines: list[str] = []
    for section in sections:
        lines.extend(section.render())
    return "\n".join(lines)
