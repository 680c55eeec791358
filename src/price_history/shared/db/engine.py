from pathlib import Path

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine, make_url

from price_history.shared.config import Config


def create_db_engine(database_url: str | None = None) -> Engine:
    """Create an engine for ``database_url`` (defaults to Config.DATABASE_URL).

    For file-backed SQLite the parent directory is created if missing.
    """
    url = make_url(database_url or Config.DATABASE_URL)

    if url.get_backend_name() == "sqlite":
        if url.database and url.database != ":memory:":
            Path(url.database).parent.mkdir(parents=True, exist_ok=True)
        return create_engine(url, echo=False)

    return create_engine(
        url,
        pool_size=5,
        max_overflow=10,
        pool_timeout=30,
        pool_recycle=1800,
        echo=False,
    )
