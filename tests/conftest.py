from __future__ import annotations

import logging
from collections.abc import Callable, Iterator
from pathlib import Path

import pytest

MakeTree = Callable[[list[str]], Path]


@pytest.fixture
def make_tree(tmp_path: Path) -> MakeTree:
    """
    Build a directory tree under `tmp_path`. Entries ending in `/` are
    directories, everything else is an empty file (parents created as needed).
    Returns the resolved tree root.
    """
    root = tmp_path.resolve()

    def _make(entries: list[str]) -> Path:
        for entry in entries:
            path = root / entry
            if entry.endswith("/"):
                path.mkdir(parents=True, exist_ok=True)
            else:
                path.parent.mkdir(parents=True, exist_ok=True)
                path.touch()
        return root

    return _make


@pytest.fixture(autouse=True)
def _restore_root_logger() -> Iterator[None]:
    """The CLI installs a console handler on the root logger; undo it after each test."""
    root = logging.getLogger()
    handlers = list(root.handlers)
    level = root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)
