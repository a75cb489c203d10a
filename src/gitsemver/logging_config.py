"""
Logging configuration for gitsemver.

The library logs through loguru under the ``gitsemver`` name but stays
silent until an application opts in by calling ``setup_logging``.
"""

import sys

from loguru import logger
from rich.console import Console

LOG_FORMAT = "<green>{time:YYYY/MM/DD HH:mm:ss}</green> | {level: <8} - <level>{message}</level>"


def setup_logging(log_level: str = "WARNING", console: Console | None = None) -> None:
    """
    Set up logging configuration with an optional shared Rich console.

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        console: Rich Console instance for coordinated output (optional)
    """
    logger.remove()
    logger.enable("gitsemver")

    if console:
        logger.add(
            lambda msg: console.print(msg, end="", markup=False, highlight=False),
            level=log_level,
            format=LOG_FORMAT,
        )
    else:
        logger.add(
            sys.stderr,
            level=log_level,
            format=LOG_FORMAT,
            colorize=True,
        )
