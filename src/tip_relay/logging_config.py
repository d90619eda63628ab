"""Logging setup for the relay process."""

import logging
import sys


def configure_logging(level: str = "INFO") -> None:
    """Configure root logging once for the whole process.

    Args:
        level: Log level name, e.g. "INFO" or "DEBUG"
    """
    logging.basicConfig(
        level=level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )
    # Per-request access lines would drown out the feed logs
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
