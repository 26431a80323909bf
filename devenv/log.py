"""Logging setup for the devenv command-line tool."""

import logging

from rich.console import Console
from rich.logging import RichHandler

LOGGER_NAME = "devenv"


def setup_logging(verbose: bool = False) -> logging.Logger:
    """
    Setup logging with rich handler.

    Log records go to stderr so they never mix with the check report.
    """
    level = logging.DEBUG if verbose else logging.WARNING

    logger = logging.getLogger(LOGGER_NAME)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)

    handler = RichHandler(
        console=Console(stderr=True),
        rich_tracebacks=True,
        show_path=verbose,
    )
    handler.setFormatter(logging.Formatter("%(message)s", datefmt="[%X]"))

    logger.addHandler(handler)
    logger.setLevel(level)
    logger.propagate = False
    return logger
