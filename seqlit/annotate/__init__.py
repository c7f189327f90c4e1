"""Span/record annotation model."""

from seqlit.annotate.record import Record
from seqlit.annotate.spans import Span, byte_range_to_char_span, conflicts, encode_text

__all__ = [
    "Record",
    "Span",
    "byte_range_to_char_span",
    "conflicts",
    "encode_text",
]
