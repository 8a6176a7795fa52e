"""
Console output for the `tokparse` loggers.

Nothing is configured on import. Programs call `setup_logging()` if they want to see the records.
"""

from __future__ import annotations

import logging

from rich.console import Console
from rich.logging import RichHandler

LOGGER_NAME = "tokparse"


def setup_logging(verbose: bool = False, console: Console | None = None) -> logging.Logger:
    """
    Shows the records of the `tokparse` loggers through a rich handler, and returns the `tokparse` logger.

    With `verbose`, debug records are shown:
    - `tokparse.main`: every grammar entry rejected by `validate()`, and every token found, value bound, early exit and failure of `match()`.
    - `tokparse.general`: every classifier violation and every whitespace value cleared.

    Otherwise only warnings and errors are shown.

    The records don't propagate to the root logger. Calling it again replaces the handler installed by the previous call.

    `console`: Where to write. Defaults to rich's standard output console.
    """
    logger = logging.getLogger(LOGGER_NAME)
    for old_handler in list(logger.handlers):
        if isinstance(old_handler, RichHandler):
            logger.removeHandler(old_handler)

    handler = RichHandler(
        console=console,
        show_time=True,
        show_path=False,
        markup=False,
        rich_tracebacks=True,
        tracebacks_show_locals=verbose,
        log_time_format="[%H:%M:%S]",
    )
    handler.setFormatter(logging.Formatter("[%(name)s] %(message)s"))

    logger.addHandler(handler)
    logger.setLevel(logging.DEBUG if verbose else logging.WARNING)
    logger.propagate = False
    return logger
