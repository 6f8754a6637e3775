"""
Logging setup for the courses API.

configure_logging runs once from the app lifespan; modules take their logger
from get_logger(__name__) so auth failures and request lines share one
stdout stream.
"""

import logging
import os
import sys

LOG_FORMAT = "%(asctime)s %(levelname)-8s [%(name)s] %(message)s"


def configure_logging(level: str = None) -> None:
    """Send every record to stdout at LOG_LEVEL (INFO unless set)."""
    root_logger = logging.getLogger()
    root_logger.handlers.clear()

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt="%Y-%m-%dT%H:%M:%S"))
    root_logger.addHandler(handler)
    root_logger.setLevel((level or os.environ.get("LOG_LEVEL", "INFO")).upper())

    # engine echo owns SQL output
    logging.getLogger("sqlalchemy").setLevel(logging.WARNING)
    # passlib warns about the bcrypt backend version on first hash
    logging.getLogger("passlib").setLevel(logging.ERROR)


def get_logger(name: str) -> logging.Logger:
    """Logger for a courses_api module."""
    return logging.getLogger(name)
