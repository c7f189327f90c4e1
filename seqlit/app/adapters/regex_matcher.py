"""Matcher adapter backed by the standard ``re`` module."""

from __future__ import annotations

import logging
import re
from collections.abc import Iterator

from seqlit.annotate.spans import encode_text
from seqlit.exceptions import PatternError

logger = logging.getLogger(__name__)


class RegexMatcher:
    """Regex matcher implementing MatcherPort.

    The pattern is compiled once at construction so an invalid expression is
    reported before any input is read. ``re.finditer`` already yields
    leftmost, non-overlapping matches; their code point offsets are
    translated to UTF-8 byte offsets as the port requires.
    """

    def __init__(self, pattern: str, *, flags: int = 0):
        """Compile ``pattern``.

        Args:
            pattern: Regular expression source
            flags: ``re`` flags applied to the compiled pattern

        Raises:
            PatternError: If the expression does not compile
        """
        self.pattern = pattern
        try:
            self._compiled = re.compile(pattern, flags)
        except re.error as exc:
            raise PatternError(pattern, str(exc)) from exc
        logger.debug("Compiled pattern %r", pattern)

    def find_byte_ranges(self, text: str) -> Iterator[tuple[int, int]]:
        char_cursor = 0
        byte_cursor = 0
        for match in self._compiled.finditer(text):
            start, end = match.span()
            byte_start = byte_cursor + len(encode_text(text[char_cursor:start]))
            byte_end = byte_start + len(encode_text(text[start:end]))
            yield byte_start, byte_end
            char_cursor, byte_cursor = end, byte_end

    def __repr__(self) -> str:
        return f"RegexMatcher({self.pattern!r})"
