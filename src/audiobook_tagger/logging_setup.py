"""Logging configuration for audiobook-tagger."""

import logging

from rich.console import Console
from rich.logging import RichHandler

LOGGER_NAME = "audiobook_tagger"


def setup_logging(log_level: str = "WARNING", console: Console | None = None) -> logging.Logger:
    """
    Configure the package logger to print through rich on stderr.

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR)
        console: Console to log to; a stderr console by default

    Returns:
        The package logger
    """
    level = getattr(logging, log_level.upper(), logging.WARNING)

    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(level)
    logger.handlers.clear()

    handler = RichHandler(
        console=console or Console(stderr=True),
        show_time=False,
        show_path=False,
        rich_tracebacks=True,
    )
    handler.setLevel(level)
    logger.addHandler(handler)

    return logger
