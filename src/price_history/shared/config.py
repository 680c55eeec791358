"""Configuration management for price-history."""

import os
from pathlib import Path

from dotenv import load_dotenv

# Load environment variables
load_dotenv()


class Config:
    """Application configuration."""

    # Project paths
    ROOT_DIR = Path(os.getenv("PRICE_HISTORY_HOME", Path.cwd()))
    DATA_DIR = ROOT_DIR / "data"

    # Database
    DATABASE_URL: str = os.getenv(
        "PRICE_HISTORY_DATABASE_URL", f"sqlite:///{DATA_DIR / 'history.db'}"
    )

    # Tracked pair
    ASSET: str = os.getenv("PRICE_HISTORY_ASSET", "BTC")
    CURRENCY: str = os.getenv("PRICE_HISTORY_CURRENCY", "GBP")

    # Price source
    COINGECKO_API_URL: str = os.getenv("COINGECKO_API_URL", "https://api.coingecko.com/api/v3")
    REQUEST_TIMEOUT: int = int(os.getenv("REQUEST_TIMEOUT", "30"))

    # Reporting
    STATS_DEFAULT_DAYS: int = int(os.getenv("STATS_DEFAULT_DAYS", "10"))
    REPORT_LIMIT: int = int(os.getenv("REPORT_LIMIT", "60"))

    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")

    @classmethod
    def validate(cls) -> None:
        """Validate configuration values."""
        if not cls.ASSET or not cls.CURRENCY:
            raise ValueError("PRICE_HISTORY_ASSET and PRICE_HISTORY_CURRENCY must not be empty")
        if cls.STATS_DEFAULT_DAYS <= 0:
            raise ValueError("STATS_DEFAULT_DAYS must be a positive integer")
        if cls.REPORT_LIMIT <= 0:
            raise ValueError("REPORT_LIMIT must be a positive integer")
