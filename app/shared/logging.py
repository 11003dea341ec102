"""
Logging configuration shared by the API and the command line.

One line per event, pipe separated. SQL text, bind parameters, request
bodies and DSNs are never logged: SQLAlchemy's own engine logging stays
at WARNING whatever the application level.
"""

import logging
import sys
from typing import TextIO

LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

QUIET_LOGGERS = ("uvicorn.access", "sqlalchemy.engine", "sqlalchemy.pool")


def configure_logging(level: str = "INFO", stream: TextIO | None = None) -> None:
    """Install the root handler.

    Args:
        level: Level name; unknown names fall back to INFO.
        stream: Destination, stdout by default. The CLI logs to stderr so
            command output stays pipeable.
    """
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format=LOG_FORMAT,
        datefmt=LOG_DATE_FORMAT,
        stream=stream or sys.stdout,
        force=True,
    )
    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
