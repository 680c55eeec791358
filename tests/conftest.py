"""
Root pytest configuration.

Provides store fixtures and an observation factory shared by the suite.
"""

from datetime import datetime, timezone

import pytest

from price_history.shared.db.storage import InMemoryPriceStore, SQLPriceStore
from price_history.shared.observation import PriceObservation


@pytest.fixture
def memory_store() -> InMemoryPriceStore:
    """Fresh list-backed store."""
    return InMemoryPriceStore()


@pytest.fixture
def sql_store(tmp_path) -> SQLPriceStore:
    """SQLite store in a temporary directory, disposed after the test."""
    store = SQLPriceStore(f"sqlite:///{tmp_path / 'history.db'}")
    yield store
    store.close()


@pytest.fixture
def make_observation():
    """Factory for observations at a given UTC day/hour/minute."""

    def _make(
        price: float,
        hour: int = 0,
        minute: int = 0,
        day: int = 1,
        month: int = 3,
        asset: str = "BTC",
        currency: str = "GBP",
    ) -> PriceObservation:
        ts = datetime(2026, month, day, hour, minute, 30, tzinfo=timezone.utc)
        return PriceObservation.create(asset=asset, currency=currency, price=price, now=ts)

    return _make
