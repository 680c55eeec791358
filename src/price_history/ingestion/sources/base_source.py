"""Abstract base class for live price sources.

A price source answers one question: what is the current price of an asset in
a given currency. Whatever shape the upstream API responds with is reduced to
a ``PriceQuote`` before it reaches the recorder.
"""

import math
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from pathlib import Path

from price_history.shared.exceptions import InvalidPrice
from price_history.shared.utils import get_component_logger


@dataclass(frozen=True)
class PriceQuote:
    """Current prices of one asset, keyed by lower-case currency code."""

    asset: str
    prices: dict[str, float] = field(default_factory=dict)

    def price_in(self, currency: str) -> float:
        """Price of the asset in ``currency``.

        Raises:
            InvalidPrice: If the currency is missing or its price is not a
                finite, non-negative number.
        """
        key = currency.lower()
        if key not in self.prices:
            raise InvalidPrice(f"No {currency.upper()} price in quote for {self.asset}")
        return validate_price(self.prices[key])


def validate_price(value: object) -> float:
    """Return ``value`` as a float if it is a finite, non-negative number.

    Raises:
        InvalidPrice: Otherwise. Booleans are rejected even though they are ints.
    """
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise InvalidPrice(f"Price is not numeric: {value!r}")
    price = float(value)
    if not math.isfinite(price):
        raise InvalidPrice(f"Price is not finite: {price}")
    if price < 0:
        raise InvalidPrice(f"Price is negative: {price}")
    return price


class BasePriceSource(ABC):
    """Base class for all price sources.

    Subclasses must define:
        SOURCE_NAME (str): identifier used in logs (e.g. "coingecko").

    Subclasses must implement:
        get_quote(): fetch the current quote for an asset.
        health_check(): verify the source is reachable.
    """

    SOURCE_NAME: str

    def __init__(self, log_file: Path | None = None) -> None:
        self.logger = get_component_logger(self.__class__.__name__, log_file)

    @abstractmethod
    def get_quote(self, asset: str, currency: str) -> PriceQuote:
        """Fetch the current quote for ``asset``.

        Raises:
            FetchFailure: If the source is unreachable or the payload unusable.
        """
        ...

    @abstractmethod
    def health_check(self) -> bool:
        """Verify the price source is reachable and responding.

        Returns:
            True if the source is available, False otherwise.
        """
        ...

    def get_price(self, asset: str, currency: str) -> float:
        """Current price of ``asset`` in ``currency``."""
        return self.get_quote(asset, currency).price_in(currency)
