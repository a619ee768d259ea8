"""Logging configuration helpers."""

import logging
import os

_PACKAGE_LOGGER = "fitness_journal"


def configure_logging(level: str | None = None) -> None:
    """Attach one stream handler to the package logger; safe to call twice."""
    logger = logging.getLogger(_PACKAGE_LOGGER)
    logger.setLevel((level or os.getenv("LOG_LEVEL", "INFO")).upper())
    if logger.handlers:
        return
    handler = logging.StreamHandler()
    handler.setFormatter(
        logging.Formatter("%(asctime)s %(levelname)s: %(name)s: %(message)s")
    )
    logger.addHandler(handler)
    logger.propagate = False
