"""Logging configuration for Gift Tracker."""

import logging

from rich.console import Console
from rich.logging import RichHandler

PACKAGE_LOGGER = "gift_tracker"


def setup_logging(level: str | int = "WARNING") -> logging.Logger:
    """Send package log records to stderr through Rich.

    Stdout is left alone so ``--json`` output stays machine-readable.
    Calling this again replaces the handler instead of stacking a new one.

    Args:
        level: Level name ("DEBUG", "INFO", ...) or numeric level

    Returns:
        The configured package logger
    """
    if isinstance(level, str):
        level = getattr(logging, level.upper(), logging.WARNING)

    logger = logging.getLogger(PACKAGE_LOGGER)
    logger.setLevel(level)
    logger.handlers.clear()

    handler = RichHandler(
        console=Console(stderr=True),
        show_path=False,
        rich_tracebacks=True,
    )
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter("%(name)s: %(message)s"))
    logger.addHandler(handler)

    return logger
