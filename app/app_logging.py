"""Logging configuration helpers."""

import logging

from .config import LOG_LEVEL


def configure_logging(level: str = LOG_LEVEL) -> None:
    """Configure the pokedle logger with a single stream handler."""
    logger = logging.getLogger("app")
    logger.setLevel(level.upper())
    if logger.handlers:
        return
    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter("%(levelname)s: %(name)s: %(message)s"))
    logger.addHandler(handler)
    logger.propagate = False
