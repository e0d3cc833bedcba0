from __future__ import annotations

import logging
import sys

PACKAGE_LOGGER = "todo_journal"

_LEVELS = {
    0: logging.WARNING,
    1: logging.INFO,
}


def setup_logging(verbosity: int = 0) -> None:
    """
    Configure diagnostic logging on stderr for the todo_journal package.

    verbosity 0 shows warnings only, 1 adds info, 2 or more adds debug.
    Safe to call more than once; the previous handler is replaced.
    """
    logger = logging.getLogger(PACKAGE_LOGGER)
    logger.setLevel(_LEVELS.get(verbosity, logging.DEBUG))

    # Remove any pre-existing handlers to avoid duplicates.
    for h in list(logger.handlers):
        logger.removeHandler(h)

    fmt = logging.Formatter(
        fmt="%(asctime)s %(levelname)s %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    ch = logging.StreamHandler(sys.stderr)
    ch.setFormatter(fmt)
    logger.addHandler(ch)
    logger.propagate = False
