"""
TOML-based config file loading for rootfinder.

Searches for `.rootfinder.toml`, `rootfinder.toml`, or `pyproject.toml [tool.rootfinder]`
walking up from the current directory. Config values are merged with CLI flags
using three-way precedence: explicit CLI flags > config file > built-in defaults.
"""

from __future__ import annotations

import logging
import sys
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any, TypeVar, cast

from rootfinder.detection import DEFAULT_EXCLUSIONS, DEFAULT_MARKERS, DetectorConfig

if sys.version_info >= (3, 11):
    import tomllib  # pyright: ignore[reportUnreachable]
else:
    import tomli as tomllib  # type: ignore[no-redef]  # pyright: ignore[reportUnreachable]

log = logging.getLogger(__name__)


@dataclass
class RootfinderConfig:
    """
    Parsed config from a TOML file. Fields are `None` when not set in the config,
    allowing the merge logic to distinguish "not configured" from "explicitly set
    to default value".
    """

    # Detection
    exclusions: list[str] | None = None
    extend_exclusions: list[str] | None = None
    markers: list[str] | None = None
    extend_markers: list[str] | None = None
    case_insensitive: bool | None = None
    # Traversal
    extensions: list[str] | None = None
    max_depth: int | None = None
    respect_gitignore: bool | None = None

    def detector_config(self, default_case_insensitive: bool = False) -> DetectorConfig:
        """Build a `DetectorConfig` from these settings, filling gaps with defaults."""
        exclusions = self.exclusions if self.exclusions is not None else DEFAULT_EXCLUSIONS
        markers = self.markers if self.markers is not None else DEFAULT_MARKERS
        case_insensitive = (
            self.case_insensitive if self.case_insensitive is not None else default_case_insensitive
        )
        return (
            DetectorConfig.create(exclusions, markers, case_insensitive)
            .with_exclusions(self.extend_exclusions or [])
            .with_markers(self.extend_markers or [])
        )


# Config file search order (first match wins within each directory level)
_CONFIG_FILENAMES = [".rootfinder.toml", "rootfinder.toml", "pyproject.toml"]

_VALID_FIELDS = {f.name for f in fields(RootfinderConfig)}


def find_config_file(start_dir: Path) -> Path | None:
    """
    Walk up from `start_dir` looking for a config file. Returns the first
    found, or `None`. Search order per directory: `.rootfinder.toml` >
    `rootfinder.toml` > `pyproject.toml` (only if it has `[tool.rootfinder]`).
    """
    current = start_dir.resolve()
    while True:
        for filename in _CONFIG_FILENAMES:
            candidate = current / filename
            if candidate.is_file():
                if filename == "pyproject.toml":
                    if _pyproject_has_rootfinder_section(candidate):
                        return candidate
                else:
                    return candidate
        parent = current.parent
        if parent == current:
            break
        current = parent
    return None


def _pyproject_has_rootfinder_section(path: Path) -> bool:
    try:
        data = tomllib.loads(path.read_text(encoding="utf-8"))
        return "rootfinder" in data.get("tool", {})
    except (tomllib.TOMLDecodeError, OSError, UnicodeDecodeError):
        return False


def load_config(config_path: Path) -> RootfinderConfig:
    """
    Load a `RootfinderConfig` from a TOML file. Supports standalone
    `rootfinder.toml` / `.rootfinder.toml` and `pyproject.toml` (extracts
    `[tool.rootfinder]`). A malformed file yields an empty config.
    """
    try:
        data = tomllib.loads(config_path.read_text(encoding="utf-8"))
    except (tomllib.TOMLDecodeError, OSError, UnicodeDecodeError) as e:
        log.warning("Ignoring unreadable config file %s: %s", config_path, e)
        return RootfinderConfig()

    if config_path.name == "pyproject.toml":
        data = data.get("tool", {}).get("rootfinder", {})

    return _parse_config_data(data, source=config_path)


def _parse_config_data(data: dict[str, Any], source: Path | None = None) -> RootfinderConfig:
    """Parse a flat or sectioned TOML dict into `RootfinderConfig`."""
    # Flatten sections: [detection] and [traversal] merge into top level
    flat: dict[str, Any] = {}
    for key, value in data.items():
        if isinstance(value, dict):
            for sub_key, sub_value in cast(dict[str, Any], value).items():
                flat[sub_key] = sub_value
        else:
            flat[key] = value

    mapped: dict[str, Any] = {}
    for key, value in flat.items():
        snake_key = key.replace("-", "_")
        if snake_key not in _VALID_FIELDS:
            log.warning("Ignoring unrecognized config key %r in %s", key, source or "config")
            continue
        expected = _FIELD_KINDS[snake_key]
        if not _has_kind(value, expected):
            log.warning(
                "Ignoring config key %r in %s: expected %s, got %r",
                key,
                source or "config",
                expected,
                value,
            )
            continue
        mapped[snake_key] = value

    return RootfinderConfig(**mapped)


# Expected TOML value kind for each config field
_FIELD_KINDS = {
    "exclusions": "list of strings",
    "extend_exclusions": "list of strings",
    "markers": "list of strings",
    "extend_markers": "list of strings",
    "case_insensitive": "boolean",
    "extensions": "list of strings",
    "max_depth": "non-negative integer",
    "respect_gitignore": "boolean",
}


def _has_kind(value: Any, kind: str) -> bool:
    if kind == "boolean":
        return isinstance(value, bool)
    if kind == "non-negative integer":
        # bool is a subclass of int
        return isinstance(value, int) and not isinstance(value, bool) and value >= 0
    return isinstance(value, list) and all(
        isinstance(item, str) for item in cast(list[Any], value)
    )


_T = TypeVar("_T")


def merge_cli_with_config(
    cli_opts: _T,
    config: RootfinderConfig | None,
    explicit_flags: set[str],
) -> _T:
    """
    Merge CLI options with config file settings.

    Precedence: explicit CLI flags > config file > built-in defaults.
    """
    if config is None:
        return cli_opts

    for cfg_field in fields(RootfinderConfig):
        cfg_value = getattr(config, cfg_field.name)
        if cfg_value is None:
            continue  # Not set in config

        if cfg_field.name in explicit_flags:
            continue

        if hasattr(cli_opts, cfg_field.name):
            setattr(cli_opts, cfg_field.name, cfg_value)

    return cli_opts
