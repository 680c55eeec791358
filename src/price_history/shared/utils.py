"""Shared utility functions for price-history."""

import logging
from datetime import datetime
from pathlib import Path

import pytz

PACKAGE_LOGGER = "price_history"
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def setup_logger(
    name: str, log_file: Path | None = None, level: int | str = logging.INFO
) -> logging.Logger:
    """Set up logger with console and file handlers.

    Calling it again for the same name reconfigures the level but does not
    attach a second set of handlers.

    Args:
        name: Logger name
        log_file: Optional path to log file
        level: Logging level (int constant or string name like 'DEBUG', 'INFO')

    Returns:
        Configured logger instance
    """
    logger = logging.getLogger(name)

    # Convert string level to int if needed
    if isinstance(level, str):
        numeric_level = getattr(logging, level.upper(), logging.INFO)
        logger.setLevel(numeric_level)
    else:
        logger.setLevel(level)

    if logger.handlers:
        return logger

    formatter = logging.Formatter(LOG_FORMAT)

    # Console handler
    console_handler = logging.StreamHandler()
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    if log_file:
        logger.addHandler(_file_handler(log_file, formatter))

    return logger


def get_component_logger(name: str, log_file: Path | None = None) -> logging.Logger:
    """Logger for one component, nested under the package logger.

    It sets no level and no console handler, so verbosity and console output
    follow whatever ``setup_logger(PACKAGE_LOGGER, ...)`` configured.
    ``log_file`` adds a file handler for this component only.

    Args:
        name: Component name, usually ``self.__class__.__name__``
        log_file: Optional path to log file

    Returns:
        Logger named ``price_history.<name>``
    """
    logger = logging.getLogger(f"{PACKAGE_LOGGER}.{name}")
    if log_file and not logger.handlers:
        logger.addHandler(_file_handler(log_file, logging.Formatter(LOG_FORMAT)))
    return logger


def _file_handler(log_file: Path, formatter: logging.Formatter) -> logging.FileHandler:
    log_file.parent.mkdir(parents=True, exist_ok=True)
    handler = logging.FileHandler(log_file)
    handler.setFormatter(formatter)
    return handler


def to_utc(dt: datetime, from_tz: str = "UTC") -> datetime:
    """Convert datetime to UTC. Naive values are read as ``from_tz``."""
    if dt.tzinfo is None:
        dt = pytz.timezone(from_tz).localize(dt)
    return dt.astimezone(pytz.UTC)


def utc_now() -> datetime:
    """Current instant as an aware UTC datetime."""
    return datetime.now(pytz.UTC)
