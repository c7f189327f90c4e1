"""Tests for the annotation service pipeline."""

from __future__ import annotations

import io
import json
from pathlib import Path

import pytest

from seqlit.app.adapters.regex_matcher import RegexMatcher
from seqlit.app.annotation_service import AnnotationService
from seqlit.config import MalformedPolicy, Settings
from seqlit.exceptions import MalformedRecordError, PatternError, SpanInvariantError


@pytest.fixture
def service(override_settings: Settings) -> AnnotationService:
    return AnnotationService(matcher_factory=RegexMatcher, settings=override_settings)


def _spans(line: str) -> list[dict[str, int]]:
    return json.loads(line)["spans"]


class TestImport:
    """Raw text import."""

    def test_import_round_trip(self, service: AnnotationService, temp_dir: Path):
        raw = temp_dir / "raw.txt"
        raw.write_text("alpha\nβeta\n\n", encoding="utf-8")
        out = io.StringIO()

        stats = service.import_lines(raw, stream=out)

        assert out.getvalue().splitlines() == [
            '{"text":"alpha","spans":[]}',
            '{"text":"βeta","spans":[]}',
            '{"text":"","spans":[]}',
        ]
        assert stats.records == 3
        assert stats.lines_written == 3

    def test_import_to_file(self, service: AnnotationService, temp_dir: Path):
        raw = temp_dir / "raw.txt"
        raw.write_text("one\ntwo\n", encoding="utf-8")
        output = temp_dir / "out.ndjson"

        service.import_lines(raw, output=output)

        assert [json.loads(line)["text"] for line in output.read_text().splitlines()] == [
            "one",
            "two",
        ]

    def test_import_requires_a_sink(self, service: AnnotationService, temp_dir: Path):
        raw = temp_dir / "raw.txt"
        raw.write_text("one\n", encoding="utf-8")

        with pytest.raises(ValueError, match="output path or a stream"):
            service.import_lines(raw)


class TestFooBarScenarios:
    """End-to-end behaviour over the ``foo bar foo`` record."""

    def test_print_mark_mask(self, service: AnnotationService, foo_records: Path):
        matcher = service.compile_pattern("foo")

        printed = io.StringIO()
        service.print_matches(foo_records, matcher, stream=printed)
        assert printed.getvalue() == "foo\nfoo\n"

        marked = io.StringIO()
        stats = service.mark(foo_records, matcher, stream=marked)
        assert _spans(marked.getvalue()) == [{"start": 0, "end": 3}, {"start": 8, "end": 11}]
        assert stats.spans_added == 2

        annotated = foo_records.with_name("annotated.ndjson")
        annotated.write_text(marked.getvalue(), encoding="utf-8")
        masked = io.StringIO()
        service.mask(annotated, "REDACTED", stream=masked)
        assert masked.getvalue() == '"REDACTED bar REDACTED"\n'

    def test_mark_twice_in_place_is_stable(self, service: AnnotationService, foo_records: Path):
        matcher = service.compile_pattern("foo")

        first = service.mark(foo_records, matcher)
        after_first = foo_records.read_text(encoding="utf-8")
        second = service.mark(foo_records, matcher)

        assert first.spans_added == 2
        assert second.spans_added == 0
        assert foo_records.read_text(encoding="utf-8") == after_first
        assert _spans(after_first) == [{"start": 0, "end": 3}, {"start": 8, "end": 11}]

    def test_print_only_new_suppresses_covered_matches(
        self, service: AnnotationService, write_lines
    ):
        path = write_lines(
            "records.ndjson",
            ['{"text":"foo bar foo","spans":[{"start":0,"end":3}]}'],
        )
        out = io.StringIO()

        stats = service.print_matches(path, service.compile_pattern("foo"), stream=out, only_new=True)

        assert out.getvalue() == "foo\n"
        assert stats.lines_written == 1

    def test_print_without_only_new_includes_covered_matches(
        self, service: AnnotationService, write_lines
    ):
        path = write_lines(
            "records.ndjson",
            ['{"text":"foo bar foo","spans":[{"start":0,"end":3}]}'],
        )
        out = io.StringIO()

        service.print_matches(path, service.compile_pattern("foo"), stream=out)

        assert out.getvalue() == "foo\nfoo\n"


class TestMark:
    """Mark destinations and failure handling."""

    def test_mark_to_separate_file_leaves_source(
        self, service: AnnotationService, foo_records: Path
    ):
        original = foo_records.read_text(encoding="utf-8")
        output = foo_records.with_name("marked.ndjson")

        service.mark(foo_records, service.compile_pattern("bar"), output=output)

        assert foo_records.read_text(encoding="utf-8") == original
        assert _spans(output.read_text(encoding="utf-8")) == [{"start": 4, "end": 7}]

    def test_mark_in_place_leaves_no_temporary_files(
        self, service: AnnotationService, foo_records: Path
    ):
        service.mark(foo_records, service.compile_pattern("foo"))

        assert [p.name for p in foo_records.parent.iterdir()] == [foo_records.name]

    def test_malformed_line_aborts_without_touching_source(
        self, service: AnnotationService, write_lines
    ):
        path = write_lines("records.ndjson", ['{"text":"foo"}', "{oops"])
        original = path.read_text(encoding="utf-8")

        with pytest.raises(MalformedRecordError):
            service.mark(path, service.compile_pattern("foo"))

        assert path.read_text(encoding="utf-8") == original
        assert [p.name for p in path.parent.iterdir()] == [path.name]

    def test_skip_policy_applies_to_mark(self, override_settings: Settings, write_lines):
        override_settings.on_malformed = MalformedPolicy.SKIP
        service = AnnotationService(matcher_factory=RegexMatcher, settings=override_settings)
        path = write_lines("records.ndjson", ['{"text":"foo"}', "{oops", '{"text":"a foo"}'])
        out = io.StringIO()

        stats = service.mark(path, service.compile_pattern("foo"), stream=out)

        assert stats.records == 2
        assert [_spans(line) for line in out.getvalue().splitlines()] == [
            [{"start": 0, "end": 3}],
            [{"start": 2, "end": 5}],
        ]

    def test_multibyte_mark_then_mask(self, service: AnnotationService, write_lines):
        path = write_lines("records.ndjson", [json.dumps({"text": "Zoë met Zoë", "spans": []})])
        matcher = service.compile_pattern("Zoë")

        service.mark(path, matcher)
        assert _spans(path.read_text(encoding="utf-8")) == [
            {"start": 0, "end": 3},
            {"start": 8, "end": 11},
        ]

        out = io.StringIO()
        service.mask(path, "<NAME>", stream=out)
        assert json.loads(out.getvalue()) == "<NAME> met <NAME>"

    def test_mark_in_place_ignores_raw_input_encoding(
        self, override_settings: Settings, temp_dir: Path
    ):
        override_settings.encoding = "latin-1"
        service = AnnotationService(matcher_factory=RegexMatcher, settings=override_settings)
        raw = temp_dir / "raw.txt"
        raw.write_bytes("café x\n".encode("latin-1"))
        records = temp_dir / "records.ndjson"

        service.import_lines(raw, output=records)
        for _ in range(2):
            service.mark(records, service.compile_pattern("x"))

        assert json.loads(records.read_text(encoding="utf-8")) == {
            "text": "café x",
            "spans": [{"start": 5, "end": 6}],
        }


def test_invalid_pattern_rejected(service: AnnotationService):
    with pytest.raises(PatternError):
        service.compile_pattern("[unclosed")


def test_mask_with_out_of_bounds_span_fails(service: AnnotationService, write_lines):
    path = write_lines("records.ndjson", ['{"text":"abc","spans":[{"start":0,"end":9}]}'])

    with pytest.raises(SpanInvariantError):
        service.mask(path, "X", stream=io.StringIO())


def test_bootstrap_wires_custom_matcher_factory(override_settings: Settings, foo_records: Path):
    from seqlit.bootstrap import bootstrap_application

    built: list[str] = []

    def factory(pattern: str) -> RegexMatcher:
        built.append(pattern)
        return RegexMatcher(pattern)

    container = bootstrap_application(override_settings, matcher_factory=factory)
    out = io.StringIO()
    container.annotation_service.print_matches(
        foo_records, container.annotation_service.compile_pattern("bar"), stream=out
    )

    assert container.settings is override_settings
    assert built == ["bar"]
    assert out.getvalue() == "bar\n"
