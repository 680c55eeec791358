"""Minute-of-day aggregation of price observations.

Observations are grouped by their stored ``minute_of_day`` and reduced to
count/average/min/max per minute. Minutes with no observations are absent
from the result.
"""

from collections.abc import Callable, Iterable
from dataclasses import dataclass
from datetime import datetime

import pandas as pd

from price_history.shared.observation import PriceObservation
from price_history.shared.utils import to_utc

ObservationFilter = Callable[[PriceObservation], bool]


@dataclass(frozen=True)
class MinuteBucket:
    """Price statistics for one minute of the day."""

    minute_of_day: int
    count: int
    average: float
    min: float
    max: float


def since(cutoff: datetime) -> ObservationFilter:
    """Filter keeping observations taken at or after ``cutoff``."""
    utc_cutoff = to_utc(cutoff)

    def _keep(observation: PriceObservation) -> bool:
        return to_utc(observation.timestamp) >= utc_cutoff

    return _keep


def aggregate(
    observations: Iterable[PriceObservation],
    filter: ObservationFilter | None = None,
) -> dict[int, MinuteBucket]:
    """Bucket observations by minute of day.

    Args:
        observations: Observations in any order.
        filter: Optional predicate; observations it rejects are ignored.

    Returns:
        Mapping of minute_of_day to its MinuteBucket, ordered by minute.
    """
    rows = [
        (obs.minute_of_day, obs.price)
        for obs in observations
        if filter is None or filter(obs)
    ]
    if not rows:
        return {}

    df = pd.DataFrame(rows, columns=["minute_of_day", "price"])
    grouped = df.groupby("minute_of_day")["price"]
    stats = pd.DataFrame(
        {
            "count": grouped.count(),
            "total": grouped.sum(),
            "min": grouped.min(),
            "max": grouped.max(),
        }
    ).sort_index()

    return {
        int(minute): MinuteBucket(
            minute_of_day=int(minute),
            count=int(row["count"]),
            average=float(row["total"]) / int(row["count"]),
            min=float(row["min"]),
            max=float(row["max"]),
        )
        for minute, row in stats.iterrows()
    }
