"""Logging setup. Call once when the application is created."""

import logging

from app.core.config import get_settings

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def setup_logging() -> None:
    settings = get_settings()
    level = getattr(logging, settings.log_level.upper(), logging.INFO)
    logging.basicConfig(level=level, format=LOG_FORMAT)

    # pymongo is chatty at DEBUG
    logging.getLogger("pymongo").setLevel(max(level, logging.WARNING))
