"""Logging setup shared by all tools."""

import logging
from typing import Optional

from rich.logging import RichHandler

LOG_FORMAT = "%(message)s"
DATE_FORMAT = "[%X]"


def setup_logger(name: str, level: str = "INFO", handler: Optional[logging.Handler] = None) -> logging.Logger:
    """
    Configure a logger with rich output.

    Args:
        name: Logger name (usually the tool package)
        level: Log level name (DEBUG, INFO, WARNING, ...)
        handler: Handler to use instead of the default RichHandler

    Returns:
        Configured logger
    """
    logger = logging.getLogger(name)
    logger.setLevel(getattr(logging, level.upper(), logging.INFO))

    if handler is None:
        # Avoid stacking handlers when a command runs twice in one process
        if any(isinstance(h, RichHandler) for h in logger.handlers):
            return logger
        handler = RichHandler(rich_tracebacks=True, show_path=False)

    handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT))
    logger.addHandler(handler)
    return logger


def get_logger(name: str) -> logging.Logger:
    """Get a module logger."""
    return logging.getLogger(name)
