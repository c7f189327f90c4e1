"""Lazy readers for raw text lines and NDJSON records.

Both readers open their source when iteration starts and close it when the
generator is exhausted, fails, or is closed. A line that cannot be decoded is
handled by the same ``MalformedPolicy`` in either reader.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator
from pathlib import Path

from pydantic import ValidationError

from seqlit.annotate.record import Record
from seqlit.config import MalformedPolicy
from seqlit.exceptions import MalformedRecordError

logger = logging.getLogger(__name__)

NDJSON_ENCODING = "utf-8"


def _strip_terminator(line: str) -> str:
    if not line.endswith("\n"):
        return line
    return line[:-1].removesuffix("\r")


def _describe_validation_error(exc: ValidationError) -> str:
    errors = exc.errors(include_url=False)
    if not errors:
        return str(exc)
    first = errors[0]
    location = ".".join(str(part) for part in first.get("loc", ()))
    message = first.get("msg", "invalid record")
    return f"{location}: {message}" if location else message


def _reject(
    path: Path,
    line_number: int,
    reason: str,
    policy: MalformedPolicy,
    cause: Exception,
) -> None:
    if policy is MalformedPolicy.SKIP:
        logger.warning("Skipping malformed line %s:%d (%s)", path, line_number, reason)
        return
    raise MalformedRecordError(path, line_number, reason) from cause


def _iter_numbered_lines(
    path: Path,
    policy: MalformedPolicy,
    encoding: str,
) -> Iterator[tuple[int, str]]:
    with path.open("rb") as handle:
        for line_number, raw in enumerate(handle, start=1):
            try:
                line = raw.decode(encoding)
            except UnicodeDecodeError as exc:
                _reject(path, line_number, f"not valid {encoding}", policy, exc)
                continue
            yield line_number, _strip_terminator(line)


def iter_lines(
    path: Path,
    *,
    on_malformed: MalformedPolicy | str = MalformedPolicy.ABORT,
    encoding: str = "utf-8",
) -> Iterator[str]:
    """Yield raw lines of ``path`` without their line terminators.

    ``encoding`` applies to this raw text only; records are always UTF-8.
    """
    policy = MalformedPolicy(on_malformed)
    for _, line in _iter_numbered_lines(Path(path), policy, encoding):
        yield line


def iter_records(
    path: Path,
    *,
    on_malformed: MalformedPolicy | str = MalformedPolicy.ABORT,
) -> Iterator[Record]:
    """Yield one ``Record`` per NDJSON line of ``path``, in file order.

    NDJSON is always read as UTF-8, the encoding every writer uses. Blank
    lines carry no record and are passed over.

    Raises:
        MalformedRecordError: Under the abort policy, on the first line that
            is not a valid record
        OSError: If ``path`` cannot be opened or read
    """
    source = Path(path)
    policy = MalformedPolicy(on_malformed)
    for line_number, line in _iter_numbered_lines(source, policy, NDJSON_ENCODING):
        if not line.strip():
            continue
        try:
            record = Record.from_json(line)
        except ValidationError as exc:
            _reject(source, line_number, _describe_validation_error(exc), policy, exc)
            continue
        yield record
