"""Configuration and result types for root detection."""

from __future__ import annotations

import os
from collections.abc import Iterable
from dataclasses import dataclass, field, replace
from functools import cached_property
from pathlib import Path

from rootfinder.detection.defaults import DEFAULT_EXCLUSIONS, DEFAULT_MARKERS


@dataclass(frozen=True)
class DetectorConfig:
    """
    Exclusion names, marker names and case sensitivity for root detection.

    Immutable: `with_exclusions()` and `with_markers()` return updated copies.
    `case_insensitive` defaults to `False`; choosing a platform-appropriate
    value is up to the caller (see `rootfinder.cli.platform_case_insensitive`).
    """

    exclusions: frozenset[str] = field(default_factory=lambda: frozenset(DEFAULT_EXCLUSIONS))
    markers: frozenset[str] = field(default_factory=lambda: frozenset(DEFAULT_MARKERS))
    case_insensitive: bool = False

    @classmethod
    def create(
        cls,
        exclusions: Iterable[str],
        markers: Iterable[str],
        case_insensitive: bool = False,
    ) -> DetectorConfig:
        """Build a config with custom exclusions and markers (defaults not included)."""
        return cls(
            exclusions=frozenset(exclusions),
            markers=frozenset(markers),
            case_insensitive=case_insensitive,
        )

    def with_exclusions(self, exclusions: Iterable[str]) -> DetectorConfig:
        """Return a copy with additional exclusion names."""
        return replace(self, exclusions=self.exclusions | frozenset(exclusions))

    def with_markers(self, markers: Iterable[str]) -> DetectorConfig:
        """Return a copy with additional marker names."""
        return replace(self, markers=self.markers | frozenset(markers))

    def with_case_insensitive(self, case_insensitive: bool) -> DetectorConfig:
        return replace(self, case_insensitive=case_insensitive)

    @cached_property
    def _lowered_exclusions(self) -> frozenset[str]:
        return frozenset(name.lower() for name in self.exclusions)

    @cached_property
    def _lowered_markers(self) -> frozenset[str]:
        return frozenset(name.lower() for name in self.markers)

    def matches_exclusion(self, name: str) -> bool:
        """Check whether a single path component names an exclusion zone."""
        if self.case_insensitive:
            return name.lower() in self._lowered_exclusions
        return name in self.exclusions

    def marker_exists_in(self, directory: Path) -> bool:
        """
        Check whether any marker exists directly inside `directory`.

        Only existence is checked, not content. In case-insensitive mode a
        directory listing is scanned as well, since a plain existence check
        misses e.g. `.GIT` on a case-sensitive filesystem.
        """
        for marker in self.markers:
            if os.path.exists(directory / marker):
                return True

        if self.case_insensitive:
            try:
                with os.scandir(directory) as entries:
                    for entry in entries:
                        if entry.name.lower() in self._lowered_markers:
                            return True
            except OSError:
                return False
        return False


@dataclass(frozen=True)
class TraversalOptions:
    """
    Options for directory traversal.

    `extensions` is an allow-list of file extensions without the leading dot
    (leading dots are stripped); empty accepts every file. `max_depth=0` collects
    only the starting directory's own files; `None` means unlimited.
    `respect_gitignore` and `ignore_file_name` enable ignore-file filtering.
    """

    extensions: frozenset[str] = frozenset()
    max_depth: int | None = None
    respect_gitignore: bool = False
    ignore_file_name: str | None = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "extensions", frozenset(e.lstrip(".") for e in self.extensions))
        if self.max_depth is not None and self.max_depth < 0:
            raise ValueError(f"max_depth must be non-negative, got {self.max_depth}")

    def with_extensions(self, extensions: Iterable[str]) -> TraversalOptions:
        """Return a copy accepting only the given extensions."""
        return replace(self, extensions=frozenset(extensions))

    def with_max_depth(self, depth: int | None) -> TraversalOptions:
        return replace(self, max_depth=depth)

    def matches_extension(self, path: Path) -> bool:
        if not self.extensions:
            return True
        suffix = path.suffix
        return bool(suffix) and suffix[1:] in self.extensions


@dataclass(frozen=True)
class TraversalResult:
    """A file discovered during traversal and its detected root (`None` if excluded)."""

    file: Path
    root: Path | None

    @property
    def excluded(self) -> bool:
        return self.root is None
