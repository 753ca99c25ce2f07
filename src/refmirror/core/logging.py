"""Logging configuration for refmirror.

This module provides logging setup using the Rich library for
colored console output with timestamps and source context.
"""

import logging
from typing import Optional

from rich.console import Console
from rich.logging import RichHandler

LOG_FORMAT = "%(message)s"
DATE_FORMAT = "[%X]"


def setup_logging(verbose: bool = False, level: Optional[int] = None) -> logging.Logger:
    """Configure Python logging with Rich handler.

    Args:
        verbose: If True, set log level to DEBUG for detailed output.
                 If False, set log level to INFO so a mirror run reports
                 what it pushed and pruned.
        level: Explicit log level, overriding ``verbose`` when given.

    Returns:
        The configured ``refmirror`` logger.

    Example:
        >>> logger = setup_logging(verbose=True)
        >>> logger.debug("Fetching refs from source")
    """
    if level is None:
        level = logging.DEBUG if verbose else logging.INFO

    # Logs go to stderr so stdout stays usable for --json output
    rich_handler = RichHandler(
        level=level,
        console=Console(stderr=True),
        show_time=True,
        show_level=True,
        show_path=verbose,
        rich_tracebacks=True,
        markup=False,
    )
    rich_handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT))

    logger = logging.getLogger("refmirror")
    logger.setLevel(level)

    # Remove any existing handlers to avoid duplicates
    logger.handlers.clear()
    logger.addHandler(rich_handler)
    logger.propagate = False

    return logger
