"""Process-wide logging configuration."""
from __future__ import annotations

import logging
import sys

LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"


def setup_logging(level: str = "INFO") -> None:
    """Send every service logger to stdout at ``level``.

    Safe to call more than once; only the first call installs a handler.
    """
    numeric_level = getattr(logging, level.upper(), logging.INFO)
    logging.basicConfig(
        level=numeric_level,
        format=LOG_FORMAT,
        datefmt="%Y-%m-%dT%H:%M:%S%z",
        stream=sys.stdout,
    )
    logging.getLogger("backend.datasets_api").setLevel(numeric_level)
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
