"""Annotation service driving import, print, mark, and mask over record streams.

Every operation pulls one record at a time, processes it, writes its output
line, and drops it before reading the next. Output goes either to an open
text stream or atomically to a file.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable, Iterator
from dataclasses import dataclass
from pathlib import Path
from typing import TextIO

from seqlit.annotate.record import Record
from seqlit.annotate.spans import byte_range_to_char_span
from seqlit.app.ports.matcher import MatcherPort
from seqlit.config import Settings, get_settings
from seqlit.ingest.stream import iter_lines, iter_records
from seqlit.utils.jsonl import atomic_write_lines, dumps_line, write_lines

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class RunStats:
    """Counters reported at the end of an operation."""

    records: int = 0
    spans_added: int = 0
    lines_written: int = 0


class AnnotationService:
    """Orchestrates the record pipeline.

    Matchers are built through ``matcher_factory`` so an invalid pattern
    fails in ``compile_pattern`` before any input is opened. All reads go
    through the stream readers with the configured malformed-line policy.
    """

    def __init__(
        self,
        *,
        matcher_factory: Callable[[str], MatcherPort],
        settings: Settings | None = None,
    ):
        """Initialize annotation service.

        Args:
            matcher_factory: Builds a matcher from a pattern string
            settings: Application settings (malformed policy, raw input encoding, fsync)
        """
        self.matcher_factory = matcher_factory
        self._settings = settings or get_settings()

    def compile_pattern(self, pattern: str) -> MatcherPort:
        """Build a matcher for ``pattern``; raises ``PatternError`` if invalid."""
        return self.matcher_factory(pattern)

    def records(self, source: Path) -> Iterator[Record]:
        return iter_records(source, on_malformed=self._settings.on_malformed)

    def import_lines(
        self,
        source: Path,
        *,
        output: Path | None = None,
        stream: TextIO | None = None,
    ) -> RunStats:
        """Emit one unannotated record per raw line of ``source``."""
        stats = RunStats()

        def serialized() -> Iterator[str]:
            for line in iter_lines(
                source,
                on_malformed=self._settings.on_malformed,
                encoding=self._settings.encoding,
            ):
                stats.records += 1
                yield Record.from_line(line).to_json()

        stats.lines_written = self._emit(serialized(), output=output, stream=stream)
        logger.info("Imported %d lines from %s", stats.records, source)
        return stats

    def print_matches(
        self,
        source: Path,
        matcher: MatcherPort,
        *,
        stream: TextIO,
        only_new: bool = False,
    ) -> RunStats:
        """Write every matched substring in ``source`` to ``stream``.

        With ``only_new`` set, matches overlapping a persisted span are
        suppressed, leaving exactly what ``mark`` would add to each record.
        """
        stats = RunStats()

        def matched() -> Iterator[str]:
            for record in self.records(source):
                stats.records += 1
                for byte_start, byte_end in matcher.find_byte_ranges(record.text):
                    span = byte_range_to_char_span(record.text, byte_start, byte_end)
                    if only_new and not record.has_no_conflict(span):
                        continue
                    yield record.substring(span)

        stats.lines_written = self._emit(matched(), stream=stream)
        logger.info(
            "Printed %d matches of %r across %d records",
            stats.lines_written,
            matcher.pattern,
            stats.records,
        )
        return stats

    def mark(
        self,
        source: Path,
        matcher: MatcherPort,
        *,
        output: Path | None = None,
        stream: TextIO | None = None,
    ) -> RunStats:
        """Add non-conflicting matches as spans and re-serialize every record.

        Output goes to ``stream`` if given, else atomically to ``output``,
        else atomically back over ``source``.
        """
        stats = RunStats()

        def marked() -> Iterator[str]:
            for record in self.records(source):
                stats.records += 1
                stats.spans_added += record.add_matches(matcher)
                yield record.to_json()

        destination = output if output is not None else source
        stats.lines_written = self._emit(
            marked(),
            output=None if stream is not None else destination,
            stream=stream,
        )
        logger.info(
            "Marked %d new spans for %r across %d records",
            stats.spans_added,
            matcher.pattern,
            stats.records,
        )
        return stats

    def mask(self, source: Path, label: str, *, stream: TextIO) -> RunStats:
        """Write the masked text of each record as a JSON string."""
        stats = RunStats()

        def masked() -> Iterator[str]:
            for record in self.records(source):
                stats.records += 1
                yield dumps_line(record.mask(label))

        stats.lines_written = self._emit(masked(), stream=stream)
        logger.info("Masked %d records from %s", stats.records, source)
        return stats

    def _emit(
        self,
        lines: Iterable[str],
        *,
        output: Path | None = None,
        stream: TextIO | None = None,
    ) -> int:
        if stream is not None:
            return write_lines(stream, lines)
        if output is None:
            raise ValueError("Either an output path or a stream is required.")
        logger.debug("Writing atomically to %s", output)
        return atomic_write_lines(output, lines, fsync=self._settings.fsync)
