"""Annotated text records."""

from __future__ import annotations

from bisect import insort
from typing import TYPE_CHECKING

from pydantic import BaseModel, Field, field_validator

from seqlit.annotate.spans import Span, byte_range_to_char_span
from seqlit.exceptions import SpanInvariantError

if TYPE_CHECKING:  # pragma: no cover
    from seqlit.app.ports.matcher import MatcherPort


def _span_key(span: Span) -> tuple[int, int]:
    return (span.start, span.end)


class Record(BaseModel):
    """A line of text and the ordered, non-overlapping spans marked on it.

    Spans hold character offsets into ``text``. They are kept sorted by
    ``(start, end)`` and no two of them conflict. Persisted spans are sorted
    on load but not bounds-checked; ``mask`` reports spans that do not fit.
    """

    text: str
    spans: list[Span] = Field(default_factory=list)

    @field_validator("spans")
    @classmethod
    def _sort_spans(cls, spans: list[Span]) -> list[Span]:
        return sorted(spans, key=_span_key)

    @classmethod
    def from_line(cls, line: str) -> "Record":
        """Create an unannotated record from a raw input line."""
        return cls(text=line)

    @classmethod
    def from_json(cls, line: str) -> "Record":
        """Deserialize one NDJSON line."""
        return cls.model_validate_json(line)

    def to_json(self) -> str:
        """Serialize as a compact NDJSON line (without the newline)."""
        return self.model_dump_json()

    def substring(self, span: Span) -> str:
        return self.text[span.start : span.end]

    def has_no_conflict(self, span: Span) -> bool:
        """Return True when ``span`` intersects none of the stored spans."""
        return not any(existing.conflicts(span) for existing in self.spans)

    def add_span(self, span: Span) -> bool:
        """Insert ``span`` unless it conflicts with or repeats a stored span.

        Returns:
            True if the span was inserted
        """
        if span in self.spans or not self.has_no_conflict(span):
            return False
        insort(self.spans, span, key=_span_key)
        return True

    def add_matches(self, matcher: "MatcherPort") -> int:
        """Mark every match of ``matcher`` that does not overlap a stored span.

        Matches are converted to character spans and inserted in order, so
        for a well-behaved matcher only spans from earlier passes can reject
        a match. Sorting first keeps the result stable for matchers that emit
        overlapping or unordered ranges; the earliest candidate wins.

        Returns:
            Number of spans added
        """
        candidates = sorted(
            (
                byte_range_to_char_span(self.text, byte_start, byte_end)
                for byte_start, byte_end in matcher.find_byte_ranges(self.text)
            ),
            key=_span_key,
        )
        return sum(1 for span in candidates if self.add_span(span))

    def mask(self, label: str) -> str:
        """Return the text with every span replaced by ``label``.

        Text outside the spans is copied unchanged. The record is not
        modified.

        Raises:
            SpanInvariantError: If a span reaches past the end of the text or
                starts inside the previous span
        """
        text_length = len(self.text)
        parts: list[str] = []
        cursor = 0

        for span in self.spans:
            if span.end > text_length:
                raise SpanInvariantError(
                    f"span [{span.start}, {span.end}) exceeds text length {text_length}"
                )
            if span.start < cursor:
                raise SpanInvariantError(
                    f"span [{span.start}, {span.end}) overlaps the preceding span ending at {cursor}"
                )
            parts.append(self.text[cursor : span.start])
            parts.append(label)
            cursor = span.end

        parts.append(self.text[cursor:])
        return "".join(parts)
