"""Exclusion checks with a thread-safe verdict cache."""

from __future__ import annotations

import logging
import threading
from pathlib import Path

from rootfinder.detection.types import DetectorConfig

log = logging.getLogger(__name__)


class ExclusionCache:
    """
    Memoizes exclusion verdicts per canonical (symlink-resolved) path.

    One lock guards the whole map, so an instance can be shared across worker
    threads. A missing entry just means the verdict gets recomputed.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._verdicts: dict[Path, bool] = {}

    def get(self, path: Path) -> bool | None:
        with self._lock:
            return self._verdicts.get(path)

    def insert(self, path: Path, excluded: bool) -> None:
        with self._lock:
            self._verdicts[path] = excluded

    def clear(self) -> None:
        """Drop all verdicts, e.g. after the filesystem has changed."""
        with self._lock:
            self._verdicts.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._verdicts)

    def __contains__(self, path: object) -> bool:
        with self._lock:
            return path in self._verdicts


def canonicalize(path: str | Path) -> Path | None:
    """Resolve `path` to its absolute, symlink-free form, or `None` if that fails."""
    try:
        return Path(path).resolve(strict=True)
    except (OSError, RuntimeError) as e:
        log.debug("Cannot resolve %s: %s", path, e)
        return None


def is_excluded(
    path: str | Path, config: DetectorConfig, cache: ExclusionCache | None = None
) -> bool:
    """
    Check whether `path` lies under an exclusion boundary.

    Symlinks are resolved first, so a link from `site-packages` into a source
    tree is judged by where it points. Paths that can't be resolved (missing,
    broken links, permission errors) count as excluded.
    """
    resolved = canonicalize(path)
    if resolved is None:
        return True

    if cache is not None:
        cached = cache.get(resolved)
        if cached is not None:
            return cached

    excluded = any(config.matches_exclusion(part) for part in resolved.parts)

    if cache is not None:
        cache.insert(resolved, excluded)
    return excluded
