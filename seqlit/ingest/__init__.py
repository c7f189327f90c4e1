"""Input readers for raw text and NDJSON record files."""

from seqlit.ingest.stream import iter_lines, iter_records

__all__ = ["iter_lines", "iter_records"]
