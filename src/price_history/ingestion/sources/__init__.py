"""Live price sources."""

from price_history.ingestion.sources.base_source import (
    BasePriceSource,
    PriceQuote,
    validate_price,
)
from price_history.ingestion.sources.coingecko_source import CoinGeckoPriceSource

__all__ = ["BasePriceSource", "CoinGeckoPriceSource", "PriceQuote", "validate_price"]
