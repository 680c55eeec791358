"""Database engine, session factory, ORM models, and storage utilities."""

from .base import Base
from .engine import create_db_engine
from .models import PriceEntry
from .session import get_db, make_session_factory
from .storage import InMemoryPriceStore, PriceStore, SQLPriceStore, open_store

__all__ = [
    # ORM infrastructure
    "Base",
    "create_db_engine",
    "make_session_factory",
    "get_db",
    # ORM models
    "PriceEntry",
    # Stores
    "PriceStore",
    "SQLPriceStore",
    "InMemoryPriceStore",
    "open_store",
]
