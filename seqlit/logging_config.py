"""Logging configuration for the command-line entry point.

Diagnostics go to stderr so stdout stays reserved for NDJSON and match output.
"""

from __future__ import annotations

import logging
import sys

from seqlit.exceptions import ConfigurationError

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


class StderrHandler(logging.StreamHandler):
    """Stream handler bound to whatever ``sys.stderr`` is at emit time."""

    def __init__(self) -> None:
        super().__init__(sys.stderr)

    def emit(self, record: logging.LogRecord) -> None:
        self.stream = sys.stderr
        super().emit(record)


def configure_logging(level: str = "WARNING") -> None:
    """Attach a single stderr handler to the ``seqlit`` logger.

    Args:
        level: Logging level name (DEBUG, INFO, WARNING, ERROR, CRITICAL)

    Raises:
        ConfigurationError: If ``level`` is not a known level name
    """
    log_level = logging.getLevelNamesMapping().get(level.upper())
    if log_level is None:
        raise ConfigurationError(f"Unknown log level: {level!r}")

    package_logger = logging.getLogger("seqlit")
    package_logger.setLevel(log_level)

    for handler in list(package_logger.handlers):
        if isinstance(handler, StderrHandler):
            package_logger.removeHandler(handler)

    handler = StderrHandler()
    handler.setLevel(log_level)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    package_logger.addHandler(handler)

    package_logger.debug("Logging configured at %s", level.upper())
