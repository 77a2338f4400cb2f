from rootfinder.detection import (
    DetectorConfig,
    ExclusionCache,
    TraversalOptions,
    TraversalResult,
    discover_roots,
    find_root,
    find_roots_batch,
    is_excluded,
    traverse_and_detect,
)

__all__ = [
    "DetectorConfig",
    "ExclusionCache",
    "TraversalOptions",
    "TraversalResult",
    "discover_roots",
    "find_root",
    "find_roots_batch",
    "is_excluded",
    "traverse_and_detect",
]
