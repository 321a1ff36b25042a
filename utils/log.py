"""Logging utilities."""

import logging
import sys


def setup_logging(verbose=False, format_str=None):
    """Configure the root handler for CLI/server use and return the package logger."""
    if format_str is None:
        format_str = "[TRACEBACK] %(levelname)s %(name)s - %(message)s"

    level = logging.DEBUG if verbose else logging.WARNING
    logging.basicConfig(
        level=level,
        format=format_str,
        handlers=[logging.StreamHandler(sys.stderr)],
    )

    logger = logging.getLogger("traceback")
    logger.setLevel(level)
    return logger
