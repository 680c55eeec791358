"""
Append-only storage for price observations.

Two implementations share the ``PriceStore`` interface:

- ``SQLPriceStore``: SQLAlchemy ORM over any configured database
  (SQLite file by default).
- ``InMemoryPriceStore``: list-backed store for tests and dry runs.

Example:

    from price_history.shared.db.storage import open_store

    with open_store("sqlite:///data/history.db") as store:
        observations = store.query(since=cutoff)
"""

import itertools
from abc import ABC, abstractmethod
from collections.abc import Iterator
from contextlib import contextmanager
from datetime import datetime

from sqlalchemy import func, select
from sqlalchemy.exc import ArgumentError, SQLAlchemyError
from sqlalchemy.orm import Session

from price_history.shared.exceptions import StoreUnavailable
from price_history.shared.observation import PriceObservation
from price_history.shared.utils import get_component_logger, to_utc

from .base import Base
from .engine import create_db_engine
from .models import PriceEntry
from .session import get_db, make_session_factory


class PriceStore(ABC):
    """Append-only store of price observations."""

    @abstractmethod
    def insert(self, observation: PriceObservation) -> int:
        """Append ``observation`` and return its newly assigned id."""
        ...

    @abstractmethod
    def query(self, since: datetime | None = None) -> list[PriceObservation]:
        """Return stored observations in insertion order.

        Args:
            since: If given, only observations with ``timestamp >= since``.
        """
        ...

    @abstractmethod
    def count(self) -> int:
        """Number of stored observations."""
        ...

    def close(self) -> None:
        """Release any resources held by the store."""


class InMemoryPriceStore(PriceStore):
    """List-backed store; ids start at 1 and increase by one per insert."""

    def __init__(self) -> None:
        self._rows: list[PriceObservation] = []
        self._ids = itertools.count(1)

    def insert(self, observation: PriceObservation) -> int:
        observation_id = next(self._ids)
        self._rows.append(observation.with_id(observation_id))
        return observation_id

    def query(self, since: datetime | None = None) -> list[PriceObservation]:
        if since is None:
            return list(self._rows)
        cutoff = to_utc(since)
        return [row for row in self._rows if row.timestamp >= cutoff]

    def count(self) -> int:
        return len(self._rows)


class SQLPriceStore(PriceStore):
    """SQLAlchemy-backed store. The schema is created on construction.

    Timestamps are written as naive UTC values and read back as aware UTC
    datetimes, since SQLite does not keep timezone offsets. Database errors
    while opening, reading or writing are raised as StoreUnavailable.
    """

    def __init__(self, database_url: str | None = None) -> None:
        self.logger = get_component_logger(self.__class__.__name__)
        try:
            self._engine = create_db_engine(database_url)
            Base.metadata.create_all(self._engine)
        except (ArgumentError, SQLAlchemyError, OSError) as e:
            raise StoreUnavailable(f"Cannot open price store: {e}") from e

        self._session_factory = make_session_factory(self._engine)
        self.logger.debug("Price store ready at %s", self._engine.url)

    def insert(self, observation: PriceObservation) -> int:
        entry = PriceEntry(
            timestamp_utc=_naive_utc(observation.timestamp),
            minute_of_day=observation.minute_of_day,
            asset=observation.asset,
            currency=observation.currency,
            price=observation.price,
        )
        with self._session("write to") as session:
            session.add(entry)
            session.flush()
            observation_id = entry.id

        self.logger.debug("Inserted price entry %d", observation_id)
        return observation_id

    def query(self, since: datetime | None = None) -> list[PriceObservation]:
        stmt = select(PriceEntry).order_by(PriceEntry.id)
        if since is not None:
            stmt = stmt.where(PriceEntry.timestamp_utc >= _naive_utc(since))

        with self._session("read from") as session:
            entries = session.scalars(stmt).all()
            return [_to_observation(entry) for entry in entries]

    def count(self) -> int:
        with self._session("read from") as session:
            return session.scalar(select(func.count(PriceEntry.id))) or 0

    def close(self) -> None:
        self._engine.dispose()

    @contextmanager
    def _session(self, action: str) -> Iterator[Session]:
        """Transactional session; database errors surface as StoreUnavailable."""
        try:
            with get_db(self._session_factory) as session:
                yield session
        except SQLAlchemyError as e:
            self.logger.error("Database error: %s", e)
            raise StoreUnavailable(f"Cannot {action} price store: {e}") from e


@contextmanager
def open_store(database_url: str | None = None) -> Iterator[SQLPriceStore]:
    """Open the configured store for the duration of a ``with`` block.

    Raises:
        StoreUnavailable: If the database cannot be opened or created.
    """
    store = SQLPriceStore(database_url)
    try:
        yield store
    finally:
        store.close()


def _naive_utc(ts: datetime) -> datetime:
    return to_utc(ts).replace(tzinfo=None)


def _to_observation(entry: PriceEntry) -> PriceObservation:
    return PriceObservation(
        id=entry.id,
        timestamp=to_utc(entry.timestamp_utc),
        minute_of_day=entry.minute_of_day,
        asset=entry.asset,
        currency=entry.currency,
        price=entry.price,
    )
