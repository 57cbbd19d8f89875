"""Logging setup for the report-outliner CLI."""

import sys
from pathlib import Path

from loguru import logger


def configure_logging(*, verbose: bool = False, log_file: Path | None = None) -> None:
    """Send log output to stderr, and optionally to a rotating file.

    Args:
        verbose: Log at DEBUG instead of INFO.
        log_file: Extra sink that always records DEBUG, with timestamps.
    """
    logger.remove()
    logger.add(sys.stderr, level="DEBUG" if verbose else "INFO", format="{level.icon} {message}")
    if log_file is not None:
        logger.add(
            log_file,
            level="DEBUG",
            format="{time:YYYY-MM-DD HH:mm:ss} {level: <8} {name}: {message}",
            rotation="1 MB",
            retention=3,
        )
