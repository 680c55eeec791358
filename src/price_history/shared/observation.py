"""Price observation record and minute-of-day helpers."""

from dataclasses import dataclass
from datetime import datetime

from price_history.shared.utils import to_utc

MINUTES_PER_DAY = 24 * 60


def minute_of_day(ts: datetime) -> int:
    """Minute of the UTC day for ``ts`` (0..1439). Naive values are read as UTC."""
    utc_ts = to_utc(ts)
    return utc_ts.hour * 60 + utc_ts.minute


@dataclass(frozen=True)
class PriceObservation:
    """One timestamped price sample for an asset/currency pair.

    ``minute_of_day`` is fixed when the observation is created and is carried
    as its own field from then on; it is never recomputed from ``timestamp``.
    """

    timestamp: datetime
    minute_of_day: int
    asset: str
    currency: str
    price: float
    id: int | None = None

    def __post_init__(self) -> None:
        if not 0 <= self.minute_of_day < MINUTES_PER_DAY:
            raise ValueError(f"minute_of_day out of range: {self.minute_of_day}")

    @classmethod
    def create(cls, asset: str, currency: str, price: float, now: datetime) -> "PriceObservation":
        """Build an unsaved observation stamped at ``now`` (converted to UTC)."""
        timestamp = to_utc(now)
        return cls(
            timestamp=timestamp,
            minute_of_day=minute_of_day(timestamp),
            asset=asset,
            currency=currency,
            price=price,
        )

    def with_id(self, observation_id: int) -> "PriceObservation":
        """Copy of this observation carrying the store-assigned id."""
        return PriceObservation(
            timestamp=self.timestamp,
            minute_of_day=self.minute_of_day,
            asset=self.asset,
            currency=self.currency,
            price=self.price,
            id=observation_id,
        )
