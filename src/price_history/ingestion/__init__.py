"""Price ingestion: live price sources and the recorder that stores them."""

from price_history.ingestion.recorder import PriceRecorder
from price_history.ingestion.sources import BasePriceSource, CoinGeckoPriceSource, PriceQuote

__all__ = ["BasePriceSource", "CoinGeckoPriceSource", "PriceQuote", "PriceRecorder"]
