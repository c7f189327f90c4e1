"""Matcher port interface for pattern matching over record text."""

from collections.abc import Iterator
from typing import Protocol


class MatcherPort(Protocol):
    """Port interface for pattern matching.

    Adapters: Python ``re`` (built-in). Any engine that works over encoded
    bytes can be plugged in as long as it honours the contract below.

    Side effects: None (read-only analysis).
    """

    pattern: str

    def find_byte_ranges(self, text: str) -> Iterator[tuple[int, int]]:
        """Yield match boundaries over ``text``.

        Args:
            text: Text to search

        Returns:
            ``(byte_start, byte_end)`` pairs in UTF-8 byte offsets, left to
            right and mutually non-overlapping. Both offsets fall on
            character boundaries.
        """
        ...
