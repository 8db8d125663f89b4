"""Logging setup for the command line.

Library modules only call ``logging.getLogger(__name__)``; handlers are
installed here, once, by the CLI.
"""

from __future__ import annotations

import logging

from rich.console import Console
from rich.logging import RichHandler

LOGGER_NAME = "distiller"


def verbosity_level(verbosity: int) -> int:
    """0 -> WARNING, 1 -> INFO, 2+ -> DEBUG."""
    if verbosity <= 0:
        return logging.WARNING
    if verbosity == 1:
        return logging.INFO
    return logging.DEBUG


def setup_logging(verbosity: int = 0, console: Console | None = None) -> logging.Logger:
    """Attach a rich handler (writing to stderr) to the package logger."""
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(verbosity_level(verbosity))

    for handler in list(logger.handlers):
        if isinstance(handler, RichHandler):
            logger.removeHandler(handler)

    handler = RichHandler(
        console=console or Console(stderr=True),
        show_path=verbosity >= 2,
        rich_tracebacks=True,
        markup=False,
    )
    handler.setFormatter(logging.Formatter("%(message)s"))
    logger.addHandler(handler)
    return logger
