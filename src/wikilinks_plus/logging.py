"""Logging utilities for wikilinks-plus.

A single ``wikilinks_plus`` logger with:
- info/debug messages on stdout, without a level prefix
- warnings/errors on stderr, prefixed with the level name
- ``--verbose`` and ``--quiet`` switches for the CLI
"""

import logging
import sys

LOGGER_NAME = "wikilinks_plus"

_logger: logging.Logger | None = None

DEBUG = logging.DEBUG
INFO = logging.INFO
WARNING = logging.WARNING
ERROR = logging.ERROR


class PlainFormatter(logging.Formatter):
    """Formatter that outputs the bare message."""

    def format(self, record: logging.LogRecord) -> str:
        return record.getMessage()


class LevelPrefixFormatter(logging.Formatter):
    """Formatter that prefixes warnings and errors with their level name."""

    def format(self, record: logging.LogRecord) -> str:
        if record.levelno >= logging.WARNING:
            return f"{record.levelname.capitalize()}: {record.getMessage()}"
        return record.getMessage()


def _level_for(verbose: bool, quiet: bool) -> int:
    if verbose:
        return logging.DEBUG
    if quiet:
        return logging.WARNING
    return logging.INFO


def setup_logging(verbose: bool = False, quiet: bool = False) -> logging.Logger:
    """Configure the package logger.

    Args:
        verbose: Show debug messages. Takes precedence over ``quiet``.
        quiet: Only show warnings and errors.

    Returns:
        The configured logger.
    """
    global _logger

    logger = logging.getLogger(LOGGER_NAME)
    logger.handlers.clear()
    logger.setLevel(_level_for(verbose, quiet))

    stdout_handler = logging.StreamHandler(sys.stdout)
    stdout_handler.setLevel(logging.DEBUG)
    stdout_handler.addFilter(lambda r: r.levelno < logging.WARNING)
    stdout_handler.setFormatter(PlainFormatter())

    stderr_handler = logging.StreamHandler(sys.stderr)
    stderr_handler.setLevel(logging.WARNING)
    stderr_handler.setFormatter(LevelPrefixFormatter())

    logger.addHandler(stdout_handler)
    logger.addHandler(stderr_handler)
    logger.propagate = False

    _logger = logger
    return logger


def get_logger() -> logging.Logger:
    """Return the package logger, configuring it with defaults on first use."""
    global _logger
    if _logger is None:
        _logger = setup_logging()
    return _logger


def debug(msg: str) -> None:
    """Log a debug message (only shown with --verbose)."""
    get_logger().debug(msg)


def info(msg: str) -> None:
    """Log an info message."""
    get_logger().info(msg)


def warning(msg: str) -> None:
    """Log a warning message to stderr."""
    get_logger().warning(msg)


def error(msg: str) -> None:
    """Log an error message to stderr."""
    get_logger().error(msg)
