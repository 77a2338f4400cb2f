"""
Ancestor-based fallbacks for files without a project marker: the lowest
common ancestor of a dependency cluster, and the orphanage of a lone file.
"""

from __future__ import annotations

from collections.abc import Collection, Iterable
from pathlib import Path

from rootfinder.detection.cache import canonicalize


def ancestors(path: Path) -> list[Path]:
    """Directories above `path`, innermost first, ending at the filesystem root."""
    chain: list[Path] = []
    current = path.parent
    while True:
        chain.append(current)
        parent = current.parent
        if parent == current:
            return chain
        current = parent


def compute_lca(paths: Iterable[str | Path]) -> Path | None:
    """
    Return the deepest directory that is an ancestor of every path.

    Paths are resolved first; ones that can't be resolved are skipped. With
    fewer than two resolvable paths there is no meaningful common ancestor and
    `None` is returned.
    """
    common: set[Path] | None = None
    count = 0
    for path in paths:
        resolved = canonicalize(path)
        if resolved is None:
            continue
        count += 1
        chain = set(ancestors(resolved))
        common = chain if common is None else common & chain

    if common is None or count < 2 or not common:
        return None
    # Common ancestors form a single chain; the deepest has the most parts.
    return max(common, key=lambda p: len(p.parts))


def find_orphanage(source: Path, source_dirs: Collection[Path]) -> Path:
    """
    Return the outermost directory in the ancestry of `source` that is a
    known source directory, falling back to the parent of `source`.

    This lets unmarked files spread over several subdirectories converge on
    one shared root instead of each reporting its own parent.
    """
    outermost: Path | None = None
    for directory in ancestors(source):
        if directory in source_dirs:
            outermost = directory
    return outermost if outermost is not None else source.parent
