"""Innermost project-marker search."""

from __future__ import annotations

from pathlib import Path

from rootfinder.detection.types import DetectorConfig


def find_marker_root(source: Path, config: DetectorConfig) -> Path | None:
    """
    Walk up from the parent of `source` and return the first (innermost)
    directory containing a project marker.

    An exclusion-named directory ends the search with `None`, so a marker
    above e.g. `node_modules/` never applies to files beneath it.
    """
    current = source.parent
    while True:
        if config.matches_exclusion(current.name):
            return None
        if config.marker_exists_in(current):
            return current
        parent = current.parent
        if parent == current:
            return None
        current = parent
