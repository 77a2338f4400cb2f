"""Gitignore and tool-specific ignore file handling using pathspec."""

from __future__ import annotations

import logging
import os
from pathlib import Path

import pathspec

log = logging.getLogger(__name__)

# An ignore spec together with the directory its patterns are relative to.
AnchoredSpec = tuple[Path, pathspec.PathSpec]


def _read_ignore_file(path: Path) -> pathspec.PathSpec | None:
    """
    Compile an ignore file into a `PathSpec`. Returns `None` if the file is
    missing, unreadable, not UTF-8, or has no patterns.
    """
    try:
        text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        log.debug("Skipping ignore file %s: %s", path, e)
        return None
    lines = [
        line for line in text.splitlines() if line.strip() and not line.strip().startswith("#")
    ]
    if not lines:
        return None
    return pathspec.GitIgnoreSpec.from_lines(lines)


def load_gitignore(directory: Path) -> pathspec.PathSpec | None:
    """Read `.gitignore` in `directory`, if there is one."""
    gitignore = directory / ".gitignore"
    if not gitignore.is_file():
        return None
    return _read_ignore_file(gitignore)


def find_ignore_file(ignore_name: str, start_dir: Path) -> AnchoredSpec | None:
    """
    Walk up from `start_dir` looking for an ignore file named `ignore_name`
    (e.g. `.rootfinderignore`). The first one found wins, even if empty.
    """
    current = Path(os.path.abspath(start_dir))
    while True:
        candidate = current / ignore_name
        if candidate.is_file():
            spec = _read_ignore_file(candidate)
            return (current, spec) if spec is not None else None
        parent = current.parent
        if parent == current:
            return None
        current = parent


def is_ignored(path: Path, specs: list[AnchoredSpec], is_dir: bool = False) -> bool:
    """Check `path` against each spec, relative to the directory the spec came from."""
    if not specs:
        return False
    absolute = Path(os.path.abspath(path))
    for base, spec in specs:
        try:
            rel = absolute.relative_to(base).as_posix()
        except ValueError:
            continue
        if is_dir:
            rel += "/"
        if spec.match_file(rel):
            return True
    return False
