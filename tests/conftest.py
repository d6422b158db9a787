"""Shared pytest fixtures."""

import logging
from pathlib import Path
from typing import Callable

import pytest

from utils.config import Settings


@pytest.fixture
def queue_files(tmp_path: Path) -> Callable[..., tuple[Path, Path]]:
    """Create urls.txt / indexed.txt in tmp_path with the given lines."""

    def _make(pending: list[str], indexed: list[str] | None = None) -> tuple[Path, Path]:
        urls_file = tmp_path / "urls.txt"
        indexed_file = tmp_path / "indexed.txt"
        urls_file.write_text("".join(f"{line}\n" for line in pending), encoding="utf-8")
        indexed_file.write_text("".join(f"{line}\n" for line in indexed or []), encoding="utf-8")
        return urls_file, indexed_file

    return _make


@pytest.fixture
def make_settings(tmp_path: Path) -> Callable[..., Settings]:
    """Build Settings pointing at tmp_path files, with overrides."""

    def _make(**overrides) -> Settings:
        values = {
            "START_HOUR": 9,
            "START_FROM_URL": 0,
            "URLS_FILE": str(tmp_path / "urls.txt"),
            "INDEXED_FILE": str(tmp_path / "indexed.txt"),
            "CREDENTIALS_FILE": str(tmp_path / "key.json"),
            "LOG_DIR": str(tmp_path / "Logs"),
        }
        values.update(overrides)
        return Settings(**values)

    return _make


@pytest.fixture
def restore_root_logger():
    """Put the root logger's handlers and level back after the test."""
    root = logging.getLogger()
    handlers = list(root.handlers)
    level = root.level

    yield root

    for handler in list(root.handlers):
        if handler not in handlers:
            root.removeHandler(handler)
            handler.close()
    for handler in handlers:
        if handler not in root.handlers:
            root.addHandler(handler)
    root.setLevel(level)
