"""
Self-contained project root detection.

Maps source file paths to the directory that anchors their project: the
innermost directory holding a project marker, unless the file sits in an
exclusion zone such as `node_modules/` or `.venv/`. Files with no marker fall
back to a dependency cluster's common ancestor, then to their orphanage.

No imports from `rootfinder` outside this package.

Usage::

    from rootfinder.detection import DetectorConfig, find_roots_batch, traverse_and_detect

    config = DetectorConfig().with_markers(["WORKSPACE"])
    for file, root in find_roots_batch(["src/main.py", "tools/gen.py"], config):
        print(file, root)

    results = traverse_and_detect(".", config)
"""

from rootfinder.detection.ancestry import compute_lca, find_orphanage
from rootfinder.detection.cache import ExclusionCache, is_excluded
from rootfinder.detection.defaults import DEFAULT_EXCLUSIONS, DEFAULT_MARKERS
from rootfinder.detection.markers import find_marker_root
from rootfinder.detection.resolver import compute_source_dirs, find_root, find_roots_batch
from rootfinder.detection.traversal import collect_files, discover_roots, traverse_and_detect
from rootfinder.detection.types import DetectorConfig, TraversalOptions, TraversalResult

__all__ = [
    "DEFAULT_EXCLUSIONS",
    "DEFAULT_MARKERS",
    "DetectorConfig",
    "ExclusionCache",
    "TraversalOptions",
    "TraversalResult",
    "collect_files",
    "compute_lca",
    "compute_source_dirs",
    "discover_roots",
    "find_marker_root",
    "find_orphanage",
    "find_root",
    "find_roots_batch",
    "is_excluded",
    "traverse_and_detect",
]
