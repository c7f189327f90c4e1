"""Exception hierarchy for seqlit.

Configuration problems are raised before any record is read. Malformed input
and span invariant violations are raised while streaming and abort the run.
"""

from __future__ import annotations

from pathlib import Path


class SeqlitError(Exception):
    """Base exception for all seqlit errors."""


class ConfigurationError(SeqlitError):
    """Raised when configuration is invalid before processing begins."""


class PatternError(ConfigurationError):
    """Raised when a match pattern cannot be compiled."""

    def __init__(self, pattern: str, reason: str) -> None:
        super().__init__(f"Invalid pattern {pattern!r}: {reason}")
        self.pattern = pattern
        self.reason = reason


class MalformedRecordError(SeqlitError, ValueError):
    """Raised when an input line cannot be decoded into a record."""

    def __init__(self, path: Path, line_number: int, reason: str) -> None:
        super().__init__(f"{path}:{line_number}: malformed line ({reason})")
        self.path = path
        self.line_number = line_number
        self.reason = reason


class SpanInvariantError(SeqlitError, RuntimeError):
    """Raised when stored spans do not fit the record text.

    This indicates corrupted persisted data or a defect upstream; callers
    must not clamp or skip the offending span.
    """
