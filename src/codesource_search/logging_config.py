"""Logging setup shared by the CLI and embedding hosts."""

import sys

from loguru import logger


def configure_logging(*, verbose: bool = False, quiet: bool = False) -> None:
    """Route loguru to stderr.

    ``verbose`` shows debug records (dispatched and discarded queries);
    ``quiet`` keeps only warnings, for machine-readable output.
    """
    logger.remove()
    if verbose:
        level = "DEBUG"
    elif quiet:
        level = "WARNING"
    else:
        level = "INFO"
    logger.add(sys.stderr, level=level, format="{level.icon} {message}")
