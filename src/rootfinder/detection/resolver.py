"""
Project root resolution for single files and batches.

Resolution order for one file:

1. Excluded file: `None`
2. Marker found: innermost directory containing a project marker
3. Dependency cluster with more than one valid member: their lowest common ancestor
4. Source directories known: the orphanage (outermost source directory above the file)
5. Otherwise: the file's parent directory
"""

from __future__ import annotations

import logging
import os
from collections.abc import Collection, Iterable, Sequence
from pathlib import Path
from typing import TypeVar

from rootfinder.detection.ancestry import compute_lca, find_orphanage
from rootfinder.detection.cache import ExclusionCache, is_excluded
from rootfinder.detection.markers import find_marker_root
from rootfinder.detection.types import DetectorConfig

log = logging.getLogger(__name__)

_P = TypeVar("_P", str, Path)


def find_root(
    source_file: str | Path,
    source_dirs: Collection[Path] | None = None,
    dependency_cluster: Iterable[str | Path] | None = None,
    config: DetectorConfig | None = None,
    cache: ExclusionCache | None = None,
) -> Path | None:
    """
    Find the project root for `source_file`, or `None` if it's excluded.

    `source_dirs` should come from `compute_source_dirs()` over the whole batch;
    without it orphans fall back to their parent directory. `dependency_cluster`
    is a set of files an external analyzer believes belong together.
    """
    if config is None:
        config = DetectorConfig()

    if is_excluded(source_file, config, cache):
        log.debug("%s: excluded", source_file)
        return None

    source = Path(os.path.abspath(source_file))

    marker_root = find_marker_root(source, config)
    if marker_root is not None:
        log.debug("%s: marker root %s", source_file, marker_root)
        return marker_root

    if dependency_cluster is not None:
        valid = [f for f in dependency_cluster if not is_excluded(f, config, cache)]
        if len(valid) > 1:
            lca = compute_lca(valid)
            if lca is not None:
                log.debug("%s: cluster root %s", source_file, lca)
                return lca

    if source_dirs is not None:
        orphanage = find_orphanage(source, source_dirs)
        log.debug("%s: orphanage %s", source_file, orphanage)
        return orphanage

    return source.parent


def compute_source_dirs(
    source_files: Iterable[str | Path],
    config: DetectorConfig,
    cache: ExclusionCache | None = None,
) -> set[Path]:
    """Parent directories of every non-excluded file in `source_files`."""
    return {
        Path(os.path.abspath(f)).parent for f in source_files if not is_excluded(f, config, cache)
    }


def find_roots_batch(
    source_files: Iterable[_P],
    config: DetectorConfig | None = None,
    cache: ExclusionCache | None = None,
) -> list[tuple[_P, Path | None]]:
    """
    Resolve roots for many files at once, in input order.

    Source directories are computed from the full list up front and one
    exclusion cache is shared, so orphanage decisions are consistent across
    the batch.
    """
    if config is None:
        config = DetectorConfig()
    if cache is None:
        cache = ExclusionCache()

    files: Sequence[_P] = list(source_files)
    source_dirs = compute_source_dirs(files, config, cache)
    return [(f, find_root(f, source_dirs, None, config, cache)) for f in files]
