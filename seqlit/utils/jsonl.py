"""JSONL writing helpers with durability guarantees."""

from __future__ import annotations

import json
import os
import stat
import tempfile
from collections.abc import Iterable
from pathlib import Path
from typing import Any, TextIO


def dumps_line(value: Any) -> str:
    """Serialize ``value`` as a single compact JSON line (no newline).

    Pydantic models keep their field order; other values go through
    ``json.dumps`` with non-ASCII characters emitted verbatim.
    """
    if hasattr(value, "model_dump_json"):
        return value.model_dump_json()
    return json.dumps(value, separators=(",", ":"), ensure_ascii=False)


def write_lines(handle: TextIO, lines: Iterable[str]) -> int:
    """Write each of ``lines`` followed by a newline; return the count."""
    count = 0
    for line in lines:
        handle.write(line)
        handle.write("\n")
        count += 1
    return count


def atomic_write_lines(
    path: Path,
    lines: Iterable[str],
    *,
    fsync: bool = True,
) -> int:
    """Write ``lines`` to ``path`` atomically.

    The write is performed via a temporary file in the destination directory
    followed by an ``os.replace``, so readers of ``path`` observe either the
    old or the new contents. ``lines`` may lazily read from ``path`` itself;
    the original is only replaced once every line has been written. When
    ``path`` already exists its permission bits carry over to the new file.

    Returns:
        Number of lines written
    """
    destination = Path(path)
    destination.parent.mkdir(parents=True, exist_ok=True)

    fd: int | None = None
    tmp_path: str | None = None

    try:
        fd, tmp_path = tempfile.mkstemp(
            dir=str(destination.parent),
            prefix=f".{destination.name}.",
            suffix=".tmp",
            text=True,
        )

        with os.fdopen(fd, "w", encoding="utf-8") as handle:
            fd = None  # Ownership transferred to file object
            count = write_lines(handle, lines)
            handle.flush()
            if fsync:
                os.fsync(handle.fileno())

        if destination.exists():
            os.chmod(tmp_path, stat.S_IMODE(destination.stat().st_mode))

        os.replace(tmp_path, destination)
        tmp_path = None
    finally:
        if fd is not None:
            os.close(fd)
        if tmp_path is not None:
            try:
                os.unlink(tmp_path)
            except FileNotFoundError:
                pass

    return count
