"""Shared utilities and configuration."""

from price_history.shared.config import Config
from price_history.shared.utils import get_component_logger, setup_logger, to_utc, utc_now

__all__ = ["Config", "get_component_logger", "setup_logger", "to_utc", "utc_now"]
