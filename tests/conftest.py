"""Pytest configuration and fixtures."""

import shutil
import tempfile
from collections.abc import Callable, Generator
from pathlib import Path

import pytest

from seqlit.config import Settings


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Create a temporary directory for tests."""
    tmpdir = tempfile.mkdtemp()
    try:
        yield Path(tmpdir)
    finally:
        shutil.rmtree(tmpdir, ignore_errors=True)


@pytest.fixture
def override_settings(monkeypatch: pytest.MonkeyPatch) -> Generator[Settings, None, None]:
    """Provide isolated seqlit settings scoped to tests."""

    import seqlit.config as config_module

    for name in ("SEQLIT_ON_MALFORMED", "SEQLIT_LOG_LEVEL", "SEQLIT_FSYNC", "SEQLIT_ENCODING"):
        monkeypatch.delenv(name, raising=False)

    original_settings = getattr(config_module, "_settings", None)

    settings = config_module.Settings(_env_file=None)
    config_module._settings = settings

    try:
        yield settings
    finally:
        config_module._settings = original_settings


@pytest.fixture
def write_lines(temp_dir: Path) -> Callable[[str, list[str]], Path]:
    """Return a helper that writes newline-terminated lines to ``temp_dir``."""

    def _write(name: str, lines: list[str]) -> Path:
        path = temp_dir / name
        path.write_text("".join(f"{line}\n" for line in lines), encoding="utf-8")
        return path

    return _write


@pytest.fixture
def foo_records(write_lines: Callable[[str, list[str]], Path]) -> Path:
    """NDJSON file holding a single unannotated ``foo bar foo`` record."""
    return write_lines("records.ndjson", ['{"text":"foo bar foo","spans":[]}'])
