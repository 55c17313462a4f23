"""
Logging setup for simpleconsole.

Every module logs through logging.getLogger(__name__); nothing is printed
unless the host (or Console.execute) installs a handler. setup_logging()
attaches a single rich handler to the package logger and maps a verbosity
level (the count of -v flags) to a logging level:

    0 → WARNING, 1 → INFO, 2+ → DEBUG

The root logger is never touched.
"""
import logging

from rich.console import Console
from rich.logging import RichHandler

_LEVELS = (logging.WARNING, logging.INFO, logging.DEBUG)


def get_level(verbosity, /):
    return _LEVELS[max(0, min(int(verbosity), len(_LEVELS) - 1))]


def setup_logging(verbosity=0, /, console=None):
    """
    install (once) a RichHandler on the 'simpleconsole' logger and set its level.

    calling it again only updates the level (and the console when given).
    """
    logger = logging.getLogger(__package__)
    logger.setLevel(level := get_level(verbosity))

    for handler in logger.handlers:
        if isinstance(handler, RichHandler):
            if console is not None:
                handler.console = console
            handler.setLevel(level)
            return logger

    handler = RichHandler(
        console=console or Console(stderr=True),
        show_path=False,
        rich_tracebacks=True,
    )
    handler.setLevel(level)
    logger.addHandler(handler)
    logger.propagate = False
    return logger


__all__ = (
    "get_level",
    "setup_logging",
)
