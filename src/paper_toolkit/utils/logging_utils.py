"""
Logging utilities: console setup for the package logger.

Modules log through logging.getLogger(__name__); nothing is printed until
an application calls configure_logging().
"""
from __future__ import annotations

import logging
from typing import Union

PACKAGE_LOGGER = "paper_toolkit"
DEFAULT_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def configure_logging(
    level: Union[int, str] = logging.INFO,
    fmt: str = DEFAULT_FORMAT,
) -> logging.Handler:
    """
    Attach a stream handler to the package logger.

    Calling it again replaces the handler it installed before.

    Args:
        level: Level name or number for the package logger.
        fmt: Format string for the handler.

    Returns:
        The installed handler.
    """
    logger = logging.getLogger(PACKAGE_LOGGER)
    for handler in list(logger.handlers):
        if getattr(handler, "_paper_toolkit_console", False):
            logger.removeHandler(handler)

    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter(fmt))
    handler._paper_toolkit_console = True  # type: ignore[attr-defined]
    logger.addHandler(handler)
    logger.setLevel(level)
    return handler
