"""Logging configuration."""
import logging
import sys
from pathlib import Path

from quishguard.config import config

PACKAGE_LOGGER = "quishguard"
LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'


def _configure_package_logger() -> logging.Logger:
    """Attach console/file handlers to the package logger once."""
    package_logger = logging.getLogger(PACKAGE_LOGGER)
    if package_logger.handlers:
        return package_logger

    level = getattr(logging, config.log_level.upper(), logging.INFO)
    package_logger.setLevel(level)

    formatter = logging.Formatter(LOG_FORMAT)

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setFormatter(formatter)
    package_logger.addHandler(console_handler)

    if config.log_file:
        log_path = Path(config.log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)

        file_handler = logging.FileHandler(config.log_file)
        file_handler.setFormatter(formatter)
        package_logger.addHandler(file_handler)

    return package_logger


def get_logger(name: str) -> logging.Logger:
    """
    Get a logger that reports through the package handlers.

    Module loggers (``quishguard.core.analyzer`` etc.) carry no handlers of
    their own and propagate to the ``quishguard`` logger.

    Args:
        name: Logger name, usually ``__name__``

    Returns:
        Configured logger
    """
    _configure_package_logger()
    if name == "__main__" or not name.startswith(PACKAGE_LOGGER):
        name = f"{PACKAGE_LOGGER}.{name}"
    return logging.getLogger(name)
