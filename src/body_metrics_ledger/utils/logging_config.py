"""
Logging configuration for the body metrics ledger.

Handlers are attached to the ``body_metrics_ledger`` package logger; every
module logs through ``logging.getLogger(__name__)`` and propagates to it.
Console output goes to stderr so command output on stdout stays clean.
"""

import logging
import sys
from pathlib import Path

from body_metrics_ledger.utils.exceptions import ConfigurationError
from body_metrics_ledger.utils.parameters import LoggingConfig

PACKAGE_LOGGER = "body_metrics_ledger"


def resolve_level(level_name: str) -> int:
    """
    Translate a configured level name into a logging level.

    Raises:
        ConfigurationError: If the name is not a standard logging level.
    """
    level = logging.getLevelName(level_name.upper())
    if not isinstance(level, int):
        raise ConfigurationError(f"Unknown logging level: {level_name!r}")
    return level


def setup_logging(config: LoggingConfig, logger_name: str = PACKAGE_LOGGER) -> logging.Logger:
    """
    Configure the package logger from the logging section of the config.

    Existing handlers are replaced, so calling this once per command is safe.

    Args:
        config: Logging configuration.
        logger_name: Logger to configure; defaults to the package logger.

    Returns:
        Configured logger instance.

    Raises:
        ConfigurationError: If the level is unknown.
    """
    level = resolve_level(config.level)
    logger = logging.getLogger(logger_name)
    logger.setLevel(level)

    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    formatter = logging.Formatter(config.format)
    handlers: list[logging.Handler] = []

    if config.console:
        handlers.append(logging.StreamHandler(sys.stderr))

    if config.file:
        log_file = Path(config.file)
        log_file.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(log_file, encoding="utf-8"))

    for handler in handlers:
        handler.setLevel(level)
        handler.setFormatter(formatter)
        logger.addHandler(handler)

    return logger


def get_logger(name: str) -> logging.Logger:
    """Get a module logger; names under the package inherit its handlers."""
    return logging.getLogger(name)
