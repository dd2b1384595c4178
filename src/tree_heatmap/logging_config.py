"""
Logging configuration for Tree Heatmap.

Log records go through a rich handler on stderr so the heatmap the CLI draws
on stdout stays clean. Handlers are attached to the ``tree_heatmap`` package
logger rather than the root logger. Each CLI command calls
:func:`setup_logging` on entry and replaces the previous command's handlers,
so running several commands in one process never stacks them.
"""

import logging
from typing import Optional

from rich.console import Console
from rich.logging import RichHandler

LOGGER_NAME = "tree_heatmap"

# Node labels often contain square brackets; never read them as rich markup
_RICH_MARKUP = False


def log_level(verbose: bool = False, quiet: bool = False) -> int:
    """``quiet`` wins over ``verbose``; the default shows warnings only."""
    if quiet:
        return logging.ERROR
    if verbose:
        return logging.DEBUG
    return logging.WARNING


def setup_logging(
    verbose: bool = False, quiet: bool = False, log_file: Optional[str] = None
) -> logging.Logger:
    """
    Configure the package logger for one CLI run.

    Args:
        verbose: Enable DEBUG level logging (grid rebuilds, dropped intents)
        quiet: Suppress all but ERROR level logging
        log_file: Optional file path to append plain-text logs to

    Returns:
        The ``tree_heatmap`` logger
    """
    level = log_level(verbose, quiet)
    logger = logging.getLogger(LOGGER_NAME)

    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    logger.addHandler(
        RichHandler(
            console=Console(stderr=True),
            rich_tracebacks=True,
            tracebacks_show_locals=verbose,
            markup=_RICH_MARKUP,
            show_time=True,
            show_path=verbose,
        )
    )

    if log_file:
        file_handler = logging.FileHandler(log_file, mode="a", encoding="utf-8")
        file_handler.setFormatter(
            logging.Formatter(
                "%(asctime)s - %(name)s - %(levelname)s - %(message)s", datefmt="%Y-%m-%d %H:%M:%S"
            )
        )
        logger.addHandler(file_handler)

    logger.setLevel(level)
    return logger


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """
    Get a logger below the package namespace.

    Args:
        name: A module ``__name__`` (``tree_heatmap.grid``) or a short name
              such as ``cli.render``. If None, returns the package logger.

    Returns:
        Logger instance
    """
    if not name:
        return logging.getLogger(LOGGER_NAME)
    if name != LOGGER_NAME and not name.startswith(LOGGER_NAME + "."):
        name = f"{LOGGER_NAME}.{name}"
    return logging.getLogger(name)
