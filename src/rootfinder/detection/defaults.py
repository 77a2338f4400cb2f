"""
Default exclusion and marker names for root detection.

Names are matched against single path components, never against patterns.
"""

from __future__ import annotations

# Directories that should never anchor a project root or be traversed into:
# virtual environments, installed dependencies, build output and caches.
DEFAULT_EXCLUSIONS: list[str] = [
    # Python
    ".venv",
    "venv",
    "__pycache__",
    "site-packages",
    ".tox",
    ".egg-info",
    ".mypy_cache",
    ".pytest_cache",
    ".ruff_cache",
    # JavaScript/Node
    "node_modules",
    # Build output
    "dist",
    "build",
    "target",
    ".gradle",
    # Other
    "vendor",
]

# Files or directories whose presence marks the start of a project.
DEFAULT_MARKERS: list[str] = [
    # Version control
    ".git",
    ".hg",
    # Package and build manifests
    "pyproject.toml",
    "setup.py",
    "package.json",
    "Cargo.toml",
    "go.mod",
    "pom.xml",
    "build.gradle",
    "CMakeLists.txt",
    "deno.json",
    "composer.json",
    "mix.exs",
]
