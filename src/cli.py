"""Command-line interface for modchanges."""

from __future__ import annotations

import argparse
import os
import sys
from pathlib import Path

import orjson

from changes.pipeline import RunOptions, find_changed_modules
from errors import ModChangesError
from logs import configure_logging

OUTPUT_FORMATS = ("lines", "json")


def _readable_file(value: str) -> Path:
    path = Path(value).expanduser()
    if not path.is_file():
        msg = f"file '{value}' does not exist"
        raise argparse.ArgumentTypeError(msg)
    if not os.access(path, os.R_OK):
        msg = f"file '{value}' is not readable"
        raise argparse.ArgumentTypeError(msg)
    return path.resolve()


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="modchanges",
        description=(
            "List the modules of a multi-module build that changed between "
            "two revisions."
        ),
    )
    parser.add_argument(
        "--parent-pom-file",
        required=True,
        type=_readable_file,
        help="Top level build descriptor",
    )
    parser.add_argument(
        "--compared-to-commit",
        default=None,
        help="Commit hash or tag to compare to (the older release)",
    )
    parser.add_argument(
        "--current-commit",
        default=None,
        help="Commit hash or tag to compare from (the newer release, default: HEAD)",
    )
    parser.add_argument(
        "--include-dependents",
        action="store_true",
        help="Also list modules depending on changed modules",
    )
    parser.add_argument(
        "--include-dependencies",
        action="store_true",
        help=(
            "Also list modules changed modules depend on "
            "(takes precedence over --include-dependents)"
        ),
    )
    parser.add_argument(
        "--use-checkout",
        action="store_true",
        help="Check out each revision while loading it, for exact descriptors",
    )
    parser.add_argument(
        "--time-execution",
        action="store_true",
        help="Print timing for each step to stderr",
    )
    parser.add_argument(
        "--format",
        choices=OUTPUT_FORMATS,
        default="lines",
        help="Output format (default: lines)",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Log every git query and intermediate count to stderr",
    )
    return parser


def _write_result(identities: list[str], output_format: str) -> None:
    if output_format == "json":
        sys.stdout.write(orjson.dumps(identities).decode("utf-8"))
        sys.stdout.write("\n")
        return
    for identity in identities:
        sys.stdout.write(f"{identity}\n")


def main(argv: list[str] | None = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)

    configure_logging(verbose=args.verbose, timing=args.time_execution)

    options = RunOptions(
        root_descriptor=args.parent_pom_file,
        baseline=args.compared_to_commit,
        target=args.current_commit,
        include_dependents=args.include_dependents,
        include_dependencies=args.include_dependencies,
        use_checkout=args.use_checkout,
        time_execution=args.time_execution,
    )

    try:
        identities = find_changed_modules(options)
    except ModChangesError as exc:
        sys.stderr.write(f"error: {exc}\n")
        return 1

    _write_result(identities, args.format)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
