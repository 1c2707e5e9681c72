"""Command-line entry point.

Prints the Visual Studio instances matching the given selection as JSON:

    python -m vswhere.main --prerelease --products "*" --version-range 16.0,17.0
    python -m vswhere.main --legacy
    python -m vswhere.main --path "C:\\Program Files\\Microsoft Visual Studio\\2022\\Community"

Exit codes: 0 on success, 1 on any vswhere error, 2 on invalid arguments.
"""

import argparse
import dataclasses
import json
import sys
from datetime import datetime
from pathlib import Path
from typing import Sequence

from vswhere.application import discovery
from vswhere.core.errors import VersionParseError, VsWhereError
from vswhere.core.instance_types import InstallationRecord
from vswhere.core.selection import Legacy, Modern, PathSelection, Selection
from vswhere.core.version import Version
from vswhere.logging import init_logger


def _parse_version_range(text: str) -> tuple[Version | None, Version | None]:
    """Parses `LOWER,UPPER`, where either side may be empty."""
    lower, sep, upper = text.partition(",")
    if not sep:
        raise argparse.ArgumentTypeError("expected LOWER,UPPER (either may be empty)")
    try:
        return (
            Version.parse(lower) if lower else None,
            Version.parse(upper) if upper else None,
        )
    except VersionParseError as e:
        raise argparse.ArgumentTypeError(str(e)) from e


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="vswhere-py",
        description="List Visual Studio instances reported by vswhere as JSON.",
    )
    parser.add_argument("--all", action="store_true", help="include incomplete instances")
    parser.add_argument("--prerelease", action="store_true", help="include prereleases")
    parser.add_argument("--products", nargs="+", default=[], metavar="ID")
    parser.add_argument("--requires", nargs="+", default=[], metavar="ID")
    parser.add_argument("--requires-any", action="store_true")
    parser.add_argument(
        "--version-range",
        type=_parse_version_range,
        default=(None, None),
        metavar="LOWER,UPPER",
    )
    shape = parser.add_mutually_exclusive_group()
    shape.add_argument("--legacy", action="store_true", help="query legacy instances")
    shape.add_argument("--path", type=Path, help="select the instance at PATH")
    where = parser.add_mutually_exclusive_group()
    where.add_argument("--vswhere", type=Path, help="vswhere.exe to run")
    where.add_argument(
        "--search-path-only",
        action="store_true",
        help="only look for vswhere.exe on PATH",
    )
    parser.add_argument("--log", action="store_true", help="write log output")
    return parser


def check_args(parser: argparse.ArgumentParser, args: argparse.Namespace) -> None:
    """Rejects selection flags that the chosen query shape would ignore."""
    modern_only = bool(args.products or args.requires or args.requires_any)
    if args.legacy and modern_only:
        parser.error("--products, --requires and --requires-any cannot be used with --legacy")
    if args.path is not None and (
        modern_only or args.all or args.prerelease or args.version_range != (None, None)
    ):
        parser.error("--path cannot be combined with other selection flags")


def selection_from_args(args: argparse.Namespace) -> Selection:
    if args.path is not None:
        return PathSelection(args.path)
    lower, upper = args.version_range
    if args.legacy:
        return Legacy().all(args.all).prerelease(args.prerelease).version(lower, upper)
    return (
        Modern()
        .all(args.all)
        .prerelease(args.prerelease)
        .products(args.products)
        .requires(args.requires)
        .requires_any(args.requires_any)
        .version(lower, upper)
    )


def _to_plain(value: object) -> object:
    if isinstance(value, Version):
        return str(value)
    if isinstance(value, datetime):
        return value.isoformat()
    if dataclasses.is_dataclass(value):
        return {f.name: _to_plain(getattr(value, f.name)) for f in dataclasses.fields(value)}
    return value


def dump_instances(instances: Sequence[InstallationRecord]) -> str:
    return json.dumps([_to_plain(i) for i in instances], indent=2)


def main(argv: Sequence[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    check_args(parser, args)
    if args.log:
        init_logger(log_dir=None)

    selection = selection_from_args(args)
    try:
        if args.search_path_only:
            instances = discovery.run_via_search_path(selection)
        elif args.vswhere is not None:
            instances = discovery.run_at_path(args.vswhere, selection)
        else:
            instances = discovery.run(selection)
    except VsWhereError as e:
        print(f"error: {e}", file=sys.stderr)
        return 1

    print(dump_instances(instances))
    return 0


if __name__ == "__main__":
    sys.exit(main())
