#!/usr/bin/env python3
"""
bash-xref CLI

A toolchain for indexing shell scripts: finds scripts, graphs function
definitions and references, and lists the man page corpus as a dependency.
Every command reads JSON from stdin and writes JSON to stdout.
"""

import argparse
import json
import sys
from pathlib import Path
from typing import Any, List

from graph.model import Resolution, SourceUnit
from scanner.builder import build_graph
from scanner.commands import load_command_table
from scanner.discovery import VCS_DIRS, scan_units
from scanner.errors import InputError, XrefError
from exporters import to_json, units_to_json, resolutions_to_json


def parse_args(args=None):
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        prog="bash-xref",
        description="Index shell scripts for definitions and cross-references.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  bash-xref scan < /dev/null               # Find scripts under the current directory
  bash-xref scan --exclude-vcs < /dev/null # Same, skipping .git, .hg, .svn and .bzr
  bash-xref graph < units.json             # Graph defs and refs for source units
  bash-xref graph --no-external-commands   # Treat command names as plain identifiers
  bash-xref depresolve < unit.json         # List the man page corpus dependency
        """,
    )

    subparsers = parser.add_subparsers(dest="command", metavar="command")
    subparsers.required = True

    scan = subparsers.add_parser(
        "scan",
        help="scan for shell scripts",
        description="Scan the directory tree rooted at the current directory for shell scripts.",
    )
    scan.add_argument(
        "--include-ext",
        nargs="+",
        default=None,
        help="File extensions to include (default: .sh)",
    )
    scan.add_argument(
        "--exclude-dir",
        nargs="+",
        default=None,
        help="Directory names to exclude",
    )
    scan.add_argument(
        "--exclude-vcs",
        action="store_true",
        help="Skip version control metadata directories (.git, .hg, .svn, .bzr)",
    )
    scan.set_defaults(handler=run_scan)

    graph = subparsers.add_parser(
        "graph",
        help="graph shell scripts",
        description="Graph the files of the source units on stdin, producing defs and refs.",
    )
    graph.add_argument(
        "--base-dir",
        type=str,
        default=None,
        help="Directory that output file paths are relative to (default: current directory)",
    )
    graph.add_argument(
        "--no-external-commands",
        dest="resolve_external_commands",
        action="store_false",
        help="Do not resolve well-known command names to the man page corpus",
    )
    graph.set_defaults(handler=run_graph)

    depresolve = subparsers.add_parser(
        "depresolve",
        help="resolve a source unit's dependencies",
        description="List the man page corpus as a dependency of the source unit on stdin.",
    )
    depresolve.set_defaults(handler=run_depresolve)

    return parser.parse_args(args)


def read_input() -> str:
    """Read all of stdin and close it."""
    try:
        content = sys.stdin.read()
    except (OSError, UnicodeDecodeError) as e:
        raise InputError(f"failed to read stdin: {e}") from e
    try:
        sys.stdin.close()
    except OSError as e:
        raise InputError(f"failed to close stdin: {e}") from e
    return content


def load_json(content: str) -> Any:
    try:
        return json.loads(content)
    except json.JSONDecodeError as e:
        raise InputError(f"failed to parse source units from input: {e}") from e
    except RecursionError as e:
        raise InputError("failed to parse source units from input: nesting too deep") from e


def decode_units(data: Any) -> List[SourceUnit]:
    """
    Decode source units from parsed input.

    Accepts an array of units, or a single unit object for older hosts.
    """
    if data is None:
        return []
    if isinstance(data, list):
        return [SourceUnit.from_dict(item) for item in data]
    if isinstance(data, dict):
        return [SourceUnit.from_dict(data)]
    raise InputError(f"failed to parse source units from input: unexpected {type(data).__name__}")


def _normalize_ext(extensions):
    normalized = set()
    for ext in extensions:
        if not ext.startswith("."):
            ext = "." + ext
        normalized.add(ext)
    return normalized


def run_scan(parsed) -> str:
    read_input()

    include_ext = _normalize_ext(parsed.include_ext) if parsed.include_ext else None
    exclude_dirs = set(parsed.exclude_dir or [])
    if parsed.exclude_vcs:
        exclude_dirs |= VCS_DIRS

    units = scan_units(Path.cwd(), include_ext=include_ext, exclude_dirs=exclude_dirs)
    return units_to_json(units)


def run_graph(parsed) -> str:
    units = decode_units(load_json(read_input()))
    if not units:
        raise InputError("input contains no source unit data")

    commands = load_command_table()
    base = Path(parsed.base_dir) if parsed.base_dir else Path.cwd()

    output = build_graph(
        units,
        commands,
        base,
        resolve_external_commands=parsed.resolve_external_commands,
    )
    return to_json(output)


def run_depresolve(parsed) -> str:
    data = load_json(read_input())
    if not isinstance(data, dict):
        raise InputError("failed to parse source unit from input: expected an object")
    unit = SourceUnit.from_dict(data)

    resolutions = []
    if unit.files:
        commands = load_command_table()
        resolutions.append(Resolution(
            to_repo_clone_url=commands.repository,
            to_unit_type=commands.unit_type,
            to_unit=commands.unit,
        ))
    return resolutions_to_json(resolutions)


def main(args=None):
    """Main entry point."""
    parsed = parse_args(args)

    try:
        output = parsed.handler(parsed)
    except (XrefError, OSError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    try:
        print(output)
    except OSError as e:
        print(f"Error writing output: {e}", file=sys.stderr)
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
