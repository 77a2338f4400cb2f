"""Tests for config file loading and merging."""

from __future__ import annotations

import logging
from pathlib import Path

import pytest

from rootfinder.config import (
    RootfinderConfig,
    find_config_file,
    load_config,
    merge_cli_with_config,
)
from rootfinder.detection import DEFAULT_EXCLUSIONS, DEFAULT_MARKERS


def test_find_config_rootfinder_toml(tmp_path: Path) -> None:
    config_file = tmp_path / "rootfinder.toml"
    config_file.write_text("[detection]\ncase-insensitive = true\n")
    assert find_config_file(tmp_path) == config_file


def test_find_config_dot_rootfinder_toml_takes_precedence(tmp_path: Path) -> None:
    (tmp_path / "rootfinder.toml").write_text("max-depth = 3\n")
    dot_config = tmp_path / ".rootfinder.toml"
    dot_config.write_text("max-depth = 1\n")
    assert find_config_file(tmp_path) == dot_config


def test_find_config_pyproject_toml(tmp_path: Path) -> None:
    config_file = tmp_path / "pyproject.toml"
    config_file.write_text('[tool.rootfinder]\nextend-markers = ["WORKSPACE"]\n')
    assert find_config_file(tmp_path) == config_file


def test_find_config_pyproject_without_section_skipped(tmp_path: Path) -> None:
    (tmp_path / "pyproject.toml").write_text("[tool.ruff]\nline-length = 100\n")
    assert find_config_file(tmp_path) is None


def test_find_config_walks_up(tmp_path: Path) -> None:
    config_file = tmp_path / "rootfinder.toml"
    config_file.write_text("max-depth = 2\n")
    subdir = tmp_path / "sub" / "deep"
    subdir.mkdir(parents=True)
    assert find_config_file(subdir) == config_file.resolve()


def test_find_config_none_when_missing(tmp_path: Path) -> None:
    assert find_config_file(tmp_path) is None


def test_load_config_sections(tmp_path: Path) -> None:
    config_file = tmp_path / "rootfinder.toml"
    config_file.write_text(
        "[detection]\n"
        'extend-exclusions = ["generated"]\n'
        'extend-markers = ["WORKSPACE"]\n'
        "case-insensitive = true\n"
        "\n"
        "[traversal]\n"
        'extensions = ["py", "rs"]\n'
        "max-depth = 4\n"
        "respect-gitignore = true\n"
    )
    config = load_config(config_file)
    assert config.extend_exclusions == ["generated"]
    assert config.extend_markers == ["WORKSPACE"]
    assert config.case_insensitive is True
    assert config.extensions == ["py", "rs"]
    assert config.max_depth == 4
    assert config.respect_gitignore is True
    assert config.exclusions is None
    assert config.markers is None


def test_load_config_pyproject_toml(tmp_path: Path) -> None:
    config_file = tmp_path / "pyproject.toml"
    config_file.write_text('[project]\nname = "x"\n\n[tool.rootfinder]\nmarkers = [".git"]\n')
    config = load_config(config_file)
    assert config.markers == [".git"]
    assert config.extend_markers is None


def test_load_config_malformed_toml(tmp_path: Path, caplog: pytest.LogCaptureFixture) -> None:
    """Malformed TOML should return an empty config, not crash."""
    config_file = tmp_path / "rootfinder.toml"
    config_file.write_text("this is not valid toml [[[")
    with caplog.at_level(logging.WARNING):
        config = load_config(config_file)
    assert config == RootfinderConfig()
    assert "Ignoring unreadable config file" in caplog.text


def test_parse_config_warns_unknown_keys(
    tmp_path: Path, caplog: pytest.LogCaptureFixture
) -> None:
    config_file = tmp_path / "rootfinder.toml"
    config_file.write_text("unknown_key = true\nmax-depth = 2\n")
    with caplog.at_level(logging.WARNING):
        config = load_config(config_file)
    assert config.max_depth == 2
    assert "unrecognized config key" in caplog.text


def test_detector_config_defaults() -> None:
    detector = RootfinderConfig().detector_config()
    assert detector.exclusions == frozenset(DEFAULT_EXCLUSIONS)
    assert detector.markers == frozenset(DEFAULT_MARKERS)
    assert detector.case_insensitive is False
    assert RootfinderConfig().detector_config(default_case_insensitive=True).case_insensitive


def test_detector_config_replace_and_extend() -> None:
    settings = RootfinderConfig(
        exclusions=["out"],
        extend_exclusions=["tmp"],
        markers=["WORKSPACE"],
        extend_markers=["BUILD"],
        case_insensitive=False,
    )
    detector = settings.detector_config(default_case_insensitive=True)
    assert detector.exclusions == {"out", "tmp"}
    assert detector.markers == {"WORKSPACE", "BUILD"}
    assert detector.case_insensitive is False


class _Opts:
    def __init__(self) -> None:
        self.extend_exclusions: list[str] | None = None
        self.max_depth: int | None = None
        self.case_insensitive: bool | None = None


def test_merge_no_config() -> None:
    opts = _Opts()
    result = merge_cli_with_config(opts, config=None, explicit_flags=set())
    assert result.max_depth is None


def test_merge_config_overrides_defaults() -> None:
    opts = _Opts()
    config = RootfinderConfig(max_depth=3, extend_exclusions=["gen"])
    result = merge_cli_with_config(opts, config=config, explicit_flags=set())
    assert result.max_depth == 3
    assert result.extend_exclusions == ["gen"]


def test_merge_explicit_cli_overrides_config() -> None:
    opts = _Opts()
    opts.max_depth = 1
    config = RootfinderConfig(max_depth=3)
    result = merge_cli_with_config(opts, config=config, explicit_flags={"max_depth"})
    assert result.max_depth == 1


def test_merge_explicit_false_overrides_config() -> None:
    opts = _Opts()
    opts.case_insensitive = False
    config = RootfinderConfig(case_insensitive=True)
    result = merge_cli_with_config(opts, config=config, explicit_flags={"case_insensitive"})
    assert result.case_insensitive is False


def test_merge_skips_fields_options_lack() -> None:
    opts = _Opts()
    config = RootfinderConfig(respect_gitignore=True)
    result = merge_cli_with_config(opts, config=config, explicit_flags=set())
    assert not hasattr(result, "respect_gitignore")


def test_parse_config_drops_values_of_wrong_type(
    tmp_path: Path, caplog: pytest.LogCaptureFixture
) -> None:
    config_file = tmp_path / "rootfinder.toml"
    config_file.write_text(
        "[detection]\n"
        'case-insensitive = "false"\n'
        'extend-markers = ["WORKSPACE", 3]\n'
        "\n"
        "[traversal]\n"
        'extensions = "py"\n'
        "max-depth = -1\n"
        "respect-gitignore = true\n"
    )
    with caplog.at_level(logging.WARNING):
        config = load_config(config_file)
    assert config == RootfinderConfig(respect_gitignore=True)
    assert "expected boolean" in caplog.text
    assert "expected list of strings" in caplog.text
    assert "expected non-negative integer" in caplog.text


def test_parse_config_rejects_bool_as_depth(tmp_path: Path) -> None:
    config_file = tmp_path / "rootfinder.toml"
    config_file.write_text("max-depth = true\n")
    assert load_config(config_file).max_depth is None
