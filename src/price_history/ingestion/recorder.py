"""Recorder: turns a fetched price into one stored observation.

Each successful call appends exactly one row. Nothing is retried or
deduplicated, so recording twice in the same minute stores two rows.
"""

from datetime import datetime
from pathlib import Path

from price_history.ingestion.sources.base_source import BasePriceSource, validate_price
from price_history.shared.db.storage import PriceStore
from price_history.shared.observation import PriceObservation
from price_history.shared.utils import get_component_logger


class PriceRecorder:
    """Appends validated price observations to a store.

    Example:
        >>> with open_store() as store:
        ...     recorder = PriceRecorder(store)
        ...     recorder.record("BTC", "GBP", 51234.0, utc_now())
    """

    def __init__(self, store: PriceStore, log_file: Path | None = None) -> None:
        self.store = store
        self.logger = get_component_logger(self.__class__.__name__, log_file)

    def record(self, asset: str, currency: str, price: float, now: datetime) -> PriceObservation:
        """Store one observation of ``price`` taken at ``now``.

        Args:
            asset: Asset symbol, e.g. "BTC".
            currency: Currency symbol, e.g. "GBP".
            price: Finite, non-negative price in ``currency`` per unit of ``asset``.
            now: Instant of the observation. Naive values are read as UTC.

        Returns:
            The stored observation, including its store-assigned id.

        Raises:
            ValueError: If asset or currency is empty.
            InvalidPrice: If price is negative, non-finite or non-numeric.
        """
        if not asset or not asset.strip():
            raise ValueError("asset cannot be empty")
        if not currency or not currency.strip():
            raise ValueError("currency cannot be empty")

        checked_price = validate_price(price)
        observation = PriceObservation.create(
            asset=asset.strip().upper(),
            currency=currency.strip().upper(),
            price=checked_price,
            now=now,
        )

        observation_id = self.store.insert(observation)
        stored = observation.with_id(observation_id)
        self.logger.info(
            "Recorded %s/%s = %s at minute %d (id=%d)",
            stored.asset,
            stored.currency,
            stored.price,
            stored.minute_of_day,
            observation_id,
        )
        return stored

    def record_from_source(
        self, source: BasePriceSource, asset: str, currency: str, now: datetime
    ) -> PriceObservation:
        """Fetch the current price from ``source`` and record it.

        A FetchFailure or InvalidPrice raised while fetching propagates before
        anything is written to the store.
        """
        price = source.get_price(asset, currency)
        return self.record(asset, currency, price, now)
