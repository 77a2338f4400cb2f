#!/usr/bin/env python3
"""
rootfinder: Detect the project root directory of source files

Common usage:
  rootfinder traverse .
  rootfinder traverse src/ --extensions py,pyi --roots-only
  rootfinder files src/main.py tools/gen.py
  git ls-files | rootfinder files --batch --json

A file's root is the innermost directory holding a project marker (.git,
pyproject.toml, package.json, ...). Files inside exclusion zones (node_modules,
.venv, build, ...) are reported as excluded. Use --check to exit with status 1
when any file is excluded.
"""

from __future__ import annotations

import argparse
import importlib.metadata
import json
import logging
import sys
from dataclasses import dataclass
from pathlib import Path

from strif import atomic_output_file

from rootfinder.config import RootfinderConfig, find_config_file, load_config, merge_cli_with_config
from rootfinder.detection import (
    DetectorConfig,
    TraversalOptions,
    discover_roots,
    find_roots_batch,
    traverse_and_detect,
)
from rootfinder.logs import setup_logging

log = logging.getLogger(__name__)

IGNORE_FILE_NAME = ".rootfinderignore"


@dataclass
class Options:
    """Command-line options for the rootfinder tool."""

    command: str | None
    version: bool
    # Output
    json: bool
    check: bool
    output: str
    verbose: bool
    # Detection
    exclusions: list[str] | None
    extend_exclusions: list[str] | None
    markers: list[str] | None
    extend_markers: list[str] | None
    case_insensitive: bool | None
    # files
    files: list[str]
    batch: bool
    # traverse
    directory: str | None
    extensions: list[str] | None
    max_depth: int | None
    roots_only: bool
    respect_gitignore: bool | None


# Options that a config file may also set; tracked to apply CLI precedence.
_TRACKED_FLAGS = [
    "extend_exclusions",
    "extend_markers",
    "case_insensitive",
    "extensions",
    "max_depth",
    "respect_gitignore",
]


def platform_case_insensitive() -> bool:
    """Default name matching for this platform: case-insensitive on Windows and macOS."""
    return sys.platform in ("win32", "darwin")


def _comma_list(value: str) -> list[str]:
    return [part.strip() for part in value.split(",") if part.strip()]


def _non_negative_int(value: str) -> int:
    number = int(value)
    if number < 0:
        raise argparse.ArgumentTypeError(f"must be non-negative, got {number}")
    return number


def _build_parser() -> argparse.ArgumentParser:
    # Use the module's docstring as the description
    module_doc = __doc__ or ""
    doc_parts = module_doc.split("\n\n")
    description = doc_parts[0]
    epilog = "\n\n".join(doc_parts[1:])

    parser = argparse.ArgumentParser(
        prog="rootfinder",
        description=description,
        epilog=epilog,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "--version",
        action="store_true",
        help="Show version information and exit",
    )

    # Options shared by every subcommand
    common = argparse.ArgumentParser(add_help=False)
    common.add_argument("--json", action="store_true", help="Output results as JSON")
    common.add_argument(
        "--check",
        action="store_true",
        help="Exit with status 1 if any file is excluded",
    )
    common.add_argument(
        "-o",
        "--output",
        type=str,
        default="-",
        help="Output file (use '-' for stdout)",
    )
    common.add_argument(
        "-v", "--verbose", action="store_true", help="Log resolution details to stderr"
    )
    common.add_argument(
        "--extend-exclusion",
        action="append",
        default=None,
        dest="extend_exclusions",
        metavar="NAME",
        help="Additional directory name to treat as an exclusion zone. Can be repeated",
    )
    common.add_argument(
        "--extend-marker",
        action="append",
        default=None,
        dest="extend_markers",
        metavar="NAME",
        help="Additional file or directory name that marks a project root. Can be repeated",
    )
    case_group = common.add_mutually_exclusive_group()
    case_group.add_argument(
        "--case-insensitive",
        action="store_const",
        const=True,
        default=None,
        dest="case_insensitive",
        help="Match exclusion and marker names case-insensitively "
        "(default on Windows and macOS)",
    )
    case_group.add_argument(
        "--case-sensitive",
        action="store_const",
        const=False,
        dest="case_insensitive",
        help="Match exclusion and marker names case-sensitively (default elsewhere)",
    )

    subparsers = parser.add_subparsers(dest="command", metavar="COMMAND")

    traverse = subparsers.add_parser(
        "traverse",
        parents=[common],
        help="Traverse a directory tree and detect project roots for all source files",
    )
    traverse.add_argument("directory", metavar="DIR", help="Directory to traverse")
    traverse.add_argument(
        "-e",
        "--extensions",
        type=_comma_list,
        default=None,
        metavar="EXTS",
        help="Comma-separated file extensions to include (e.g. 'rs,py,js'). "
        "All files are included if not given",
    )
    traverse.add_argument(
        "-d",
        "--max-depth",
        type=_non_negative_int,
        default=None,
        dest="max_depth",
        metavar="N",
        help="Maximum traversal depth (0 = only the start directory)",
    )
    traverse.add_argument(
        "--roots-only",
        action="store_true",
        dest="roots_only",
        help="Only show unique project roots, not individual files",
    )
    traverse.add_argument(
        "--respect-gitignore",
        action="store_const",
        const=True,
        default=None,
        dest="respect_gitignore",
        help="Skip files and directories matched by .gitignore files",
    )

    files = subparsers.add_parser(
        "files",
        parents=[common],
        help="Detect roots for explicit file paths",
    )
    files.add_argument("files", nargs="*", metavar="FILE", help="Source files to analyze")
    files.add_argument(
        "--batch",
        action="store_true",
        help="Read file paths from stdin, one per line (also used when no FILE is given)",
    )
    return parser


def _parse_args(args: list[str] | None = None) -> tuple[Options, set[str]]:
    """
    Parse command-line arguments.

    Returns a tuple of (options, explicit_flags) where `explicit_flags` tracks
    which settings the user passed explicitly (for config merge precedence).
    """
    opts = _build_parser().parse_args(args)

    explicit_flags = {name for name in _TRACKED_FLAGS if getattr(opts, name, None) is not None}

    options = Options(
        command=opts.command,
        version=opts.version,
        json=getattr(opts, "json", False),
        check=getattr(opts, "check", False),
        output=getattr(opts, "output", "-"),
        verbose=getattr(opts, "verbose", False),
        exclusions=None,
        extend_exclusions=getattr(opts, "extend_exclusions", None),
        markers=None,
        extend_markers=getattr(opts, "extend_markers", None),
        case_insensitive=getattr(opts, "case_insensitive", None),
        files=getattr(opts, "files", []),
        batch=getattr(opts, "batch", False),
        directory=getattr(opts, "directory", None),
        extensions=getattr(opts, "extensions", None),
        max_depth=getattr(opts, "max_depth", None),
        roots_only=getattr(opts, "roots_only", False),
        respect_gitignore=getattr(opts, "respect_gitignore", None),
    )
    return options, explicit_flags


def _detector_config(options: Options) -> DetectorConfig:
    settings = RootfinderConfig(
        exclusions=options.exclusions,
        extend_exclusions=options.extend_exclusions,
        markers=options.markers,
        extend_markers=options.extend_markers,
        case_insensitive=options.case_insensitive,
    )
    return settings.detector_config(default_case_insensitive=platform_case_insensitive())


def _read_stdin_paths() -> list[str]:
    return [line.rstrip("\r\n") for line in sys.stdin if line.strip()]


def _format_file_results(results: list[tuple[Path | str, Path | None]], as_json: bool) -> str:
    if as_json:
        records: list[dict[str, object]] = []
        for file, root in results:
            record: dict[str, object] = {"file": str(file)}
            if root is not None:
                record["root"] = str(root)
            else:
                record["excluded"] = True
            records.append(record)
        return json.dumps(records, indent=2)

    lines = [
        f"{file} -> {root if root is not None else '(excluded)'}" for file, root in results
    ]
    return "\n".join(lines)


def _format_roots(roots: list[Path], as_json: bool) -> str:
    if as_json:
        return json.dumps({"roots": [str(r) for r in roots], "count": len(roots)}, indent=2)
    return "\n".join(str(r) for r in roots)


def _run_traverse(options: Options, config: DetectorConfig) -> tuple[str, bool]:
    """Returns the rendered output and whether any file was excluded."""
    if options.directory is None:
        raise ValueError("No directory provided")
    directory = Path(options.directory)
    if not directory.is_dir():
        raise ValueError(f"Not a directory: {options.directory}")

    traversal_options = TraversalOptions(
        extensions=frozenset(options.extensions or []),
        max_depth=options.max_depth,
        respect_gitignore=bool(options.respect_gitignore),
        ignore_file_name=IGNORE_FILE_NAME,
    )

    if options.roots_only:
        roots = sorted(discover_roots(directory, config, traversal_options))
        # Roots-only output doesn't track exclusions.
        return _format_roots(roots, options.json), False

    results = traverse_and_detect(directory, config, traversal_options)
    pairs: list[tuple[Path | str, Path | None]] = [(r.file, r.root) for r in results]
    any_excluded = any(r.excluded for r in results)
    return _format_file_results(pairs, options.json), any_excluded


def _run_files(options: Options, config: DetectorConfig) -> tuple[str, bool]:
    """Returns the rendered output and whether any file was excluded."""
    files = _read_stdin_paths() if options.batch or not options.files else options.files
    if not files:
        raise ValueError("No files provided")

    results = find_roots_batch(files, config)
    pairs: list[tuple[Path | str, Path | None]] = list(results)
    any_excluded = any(root is None for _, root in results)
    return _format_file_results(pairs, options.json), any_excluded


def _write_output(text: str, output: str) -> None:
    if output == "-":
        if text:
            print(text)
        return
    with atomic_output_file(Path(output), make_parents=True) as temp_path:
        Path(temp_path).write_text(text + "\n" if text else "", encoding="utf-8")


def main(args: list[str] | None = None) -> int:
    """
    Main entry point for the rootfinder CLI.

    Args:
        args: Command-line arguments (uses sys.argv if None)

    Returns:
        Exit code: 0 for success, 1 if `--check` is set and a file was excluded,
        2 for errors
    """
    options, explicit_flags = _parse_args(args)

    if options.version:
        try:
            version = importlib.metadata.version("rootfinder")
            print(f"v{version}")
        except importlib.metadata.PackageNotFoundError:
            print("unknown (package not installed)")
        return 0

    if options.command is None:
        print(
            "Error: No command specified. Use 'traverse DIR' or 'files FILE...'"
            " (use --help for more options)",
            file=sys.stderr,
        )
        return 2

    setup_logging(verbose=options.verbose)

    # Load and merge config file settings
    config_path = find_config_file(Path.cwd())
    if config_path:
        log.debug("Using config file %s", config_path)
        merge_cli_with_config(options, load_config(config_path), explicit_flags)

    config = _detector_config(options)

    try:
        if options.command == "traverse":
            text, any_excluded = _run_traverse(options, config)
        else:
            text, any_excluded = _run_files(options, config)
        _write_output(text, options.output)
    except (ValueError, OSError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 2

    return 1 if options.check and any_excluded else 0


if __name__ == "__main__":
    sys.exit(main())
