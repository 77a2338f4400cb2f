"""
Directory traversal: collect candidate files while pruning exclusion zones,
then resolve their roots as one batch.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Iterator
from pathlib import Path

from rootfinder.detection.cache import ExclusionCache
from rootfinder.detection.gitignore import (
    AnchoredSpec,
    find_ignore_file,
    is_ignored,
    load_gitignore,
)
from rootfinder.detection.resolver import find_roots_batch
from rootfinder.detection.types import DetectorConfig, TraversalOptions, TraversalResult

log = logging.getLogger(__name__)


def _log_walk_error(error: OSError) -> None:
    log.debug("Skipping unreadable directory %s: %s", error.filename, error.strerror)


def _walk(start: Path, config: DetectorConfig, options: TraversalOptions) -> Iterator[Path]:
    """
    Walk `start` with `os.walk()`, pruning excluded and ignored directories
    in-place so their contents are never listed. Symlinked directories are
    followed; a directory whose real path was already visited is skipped.
    """
    if config.matches_exclusion(Path(os.path.abspath(start)).name):
        return

    base_specs: list[AnchoredSpec] = []
    if options.ignore_file_name:
        found = find_ignore_file(options.ignore_file_name, start)
        if found is not None:
            base_specs.append(found)

    # Ignore specs in effect for each directory still to be visited.
    pending: dict[Path, list[AnchoredSpec]] = {}
    # Real paths of visited directories; stops symlink cycles.
    seen: set[str] = set()

    for dirpath, dirnames, filenames in os.walk(start, onerror=_log_walk_error, followlinks=True):
        current = Path(dirpath)
        specs = pending.pop(current, base_specs)
        real = os.path.realpath(dirpath)
        if real in seen:
            log.debug("Skipping already visited directory %s (%s)", current, real)
            dirnames[:] = []
            continue
        seen.add(real)
        if options.respect_gitignore:
            own = load_gitignore(current)
            if own is not None:
                specs = [*specs, (Path(os.path.abspath(current)), own)]

        depth = len(current.relative_to(start).parts)
        if options.max_depth is not None and depth >= options.max_depth:
            dirnames[:] = []
        else:
            dirnames[:] = sorted(
                d
                for d in dirnames
                if not config.matches_exclusion(d)
                and not is_ignored(current / d, specs, is_dir=True)
            )
            for d in dirnames:
                pending[current / d] = specs

        for filename in sorted(filenames):
            filepath = current / filename
            if not options.matches_extension(filepath):
                continue
            if is_ignored(filepath, specs):
                continue
            # Drops broken symlinks and special files.
            if not os.path.isfile(filepath):
                continue
            yield filepath


def collect_files(
    start_path: str | Path,
    config: DetectorConfig | None = None,
    options: TraversalOptions | None = None,
) -> list[Path]:
    """
    Collect candidate source files under `start_path`, depth-first.

    Exclusion zones are pruned, not filtered afterwards. Unreadable directories
    are skipped. Symlinked directories are followed, each real directory
    at most once.
    """
    return list(_walk(Path(start_path), config or DetectorConfig(), options or TraversalOptions()))


def traverse_and_detect(
    start_path: str | Path,
    config: DetectorConfig | None = None,
    options: TraversalOptions | None = None,
    cache: ExclusionCache | None = None,
) -> list[TraversalResult]:
    """
    Discover source files under `start_path` and detect each one's project root.

    Files are collected first so the source directories of the whole tree are
    known before any orphanage is resolved. Results follow visitation order.
    """
    if config is None:
        config = DetectorConfig()
    files = collect_files(start_path, config, options)
    log.debug("Collected %d files under %s", len(files), start_path)
    return [
        TraversalResult(file=file, root=root)
        for file, root in find_roots_batch(files, config, cache)
    ]


def discover_roots(
    start_path: str | Path,
    config: DetectorConfig | None = None,
    options: TraversalOptions | None = None,
    cache: ExclusionCache | None = None,
) -> set[Path]:
    """Traverse `start_path` and return only the unique project roots."""
    return {
        result.root
        for result in traverse_and_detect(start_path, config, options, cache)
        if result.root is not None
    }
