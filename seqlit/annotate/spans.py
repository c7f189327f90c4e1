"""Character-offset spans and byte-to-character offset conversion.

Matchers report boundaries in UTF-8 byte offsets. Spans are always stored in
code point offsets so they can slice ``str`` values directly regardless of how
many bytes each character occupies.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, model_validator

TEXT_ENCODING = "utf-8"


def encode_text(text: str) -> bytes:
    """Encode ``text`` the way matchers see it."""
    return text.encode(TEXT_ENCODING)


class Span(BaseModel):
    """Half-open ``[start, end)`` interval of character offsets."""

    model_config = ConfigDict(frozen=True)

    start: int = Field(ge=0, strict=True)
    end: int = Field(ge=0, strict=True)

    @model_validator(mode="after")
    def _check_bounds(self) -> "Span":
        if self.start > self.end:
            raise ValueError(f"span start {self.start} is after end {self.end}")
        return self

    @property
    def length(self) -> int:
        return self.end - self.start

    def conflicts(self, other: "Span") -> bool:
        """Return True when the two intervals intersect."""
        return not (self.end <= other.start or other.end <= self.start)


def conflicts(a: Span, b: Span) -> bool:
    return a.conflicts(b)


def byte_range_to_char_span(text: str, byte_start: int, byte_end: int) -> Span:
    """Convert a UTF-8 byte range over ``text`` into a character span.

    Both offsets must fall on character boundaries, which any matcher working
    over the encoded text guarantees. The conversion only counts code points;
    it never realigns an offset.

    Raises:
        ValueError: If the range is inverted, out of bounds, or splits a
            multi-byte character.
    """
    encoded = encode_text(text)
    if not 0 <= byte_start <= byte_end <= len(encoded):
        raise ValueError(
            f"byte range [{byte_start}, {byte_end}) outside text of {len(encoded)} bytes"
        )

    try:
        start = len(encoded[:byte_start].decode(TEXT_ENCODING))
        width = len(encoded[byte_start:byte_end].decode(TEXT_ENCODING))
    except UnicodeDecodeError as exc:
        raise ValueError(
            f"byte range [{byte_start}, {byte_end}) does not fall on character boundaries"
        ) from exc

    return Span(start=start, end=start + width)
