"""Logging configuration for the ``weex`` process.

Library modules only create ``logging.getLogger(__name__)`` loggers;
handlers are attached here, once, by the CLI.  Debug output is enabled
with ``--verbose``, ``WEEX_DEBUG=1`` or a ``DEBUG`` value mentioning
``weex`` (``DEBUG=weex:*``).
"""

from __future__ import annotations

import logging
from collections.abc import Mapping

LOGGER_NAME: str = "weex_cli"
LOG_FORMAT: str = "%(name)s: %(message)s"


def debug_requested(environ: Mapping[str, str], verbose: bool = False) -> bool:
    if verbose or environ.get("WEEX_DEBUG"):
        return True
    return "weex" in environ.get("DEBUG", "")


def configure_logging(debug: bool) -> logging.Logger:
    """Attach a stderr handler to the package logger and set its level."""
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(logging.DEBUG if debug else logging.WARNING)
    if logger.handlers:
        return logger

    handler: logging.Handler
    try:
        from rich.logging import RichHandler
    except ModuleNotFoundError:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(f"[%(levelname)s] {LOG_FORMAT}"))
    else:
        from weex_cli.cli.console import get_rich_console

        handler = RichHandler(
            console=get_rich_console(),
            show_time=False,
            show_path=False,
            markup=False,
        )
        handler.setFormatter(logging.Formatter(LOG_FORMAT))

    logger.addHandler(handler)
    logger.propagate = False
    return logger
