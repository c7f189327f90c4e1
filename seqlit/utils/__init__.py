"""Utility modules for common operations."""

from seqlit.utils.jsonl import atomic_write_lines, dumps_line, write_lines

__all__ = [
    "atomic_write_lines",
    "dumps_line",
    "write_lines",
]
