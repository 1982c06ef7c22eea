"""Command-line entrypoint."""

from __future__ import annotations

import argparse
import logging
import sys
from contextlib import nullcontext
from pathlib import Path

from dirdrift.compare import compare_trees
from dirdrift.config import ERROR_POLICIES, SYMLINK_POLICIES, CliOverrides, load_effective_config
from dirdrift.index import HashError, IndexingCancelled, ScanError
from dirdrift.logging import configure_logging
from dirdrift.paths import display_path
from dirdrift.render import RichProgress, build_console, render_json, render_report

EXIT_OK = 0
EXIT_FAILURE = 1
EXIT_USAGE = 2

logger = logging.getLogger("dirdrift.cli")


def build_arg_parser() -> argparse.ArgumentParser:
    """Build argument parser for one comparison run."""
    parser = argparse.ArgumentParser(
        prog="dirdrift",
        description="Compare two directory trees for drift, mismatches and duplicates.",
    )
    parser.add_argument("-a", "--a", dest="root_a", required=True, help="first directory")
    parser.add_argument("-b", "--b", dest="root_b", required=True, help="second directory")
    parser.add_argument(
        "--diff", action="store_true", default=None, help="list files present on one side only"
    )
    parser.add_argument("--hash", action="store_true", default=None, help="check file hashes")
    parser.add_argument(
        "--dup", action="store_true", default=None, help="check for duplicated files"
    )
    parser.add_argument("--workers", type=int, default=None, help="concurrent hashing workers")
    parser.add_argument("--on-error", choices=ERROR_POLICIES, default=None)
    parser.add_argument("--symlinks", choices=SYMLINK_POLICIES, default=None)
    parser.add_argument(
        "--exclude", action="append", default=None, metavar="GLOB", help="exclude matching paths"
    )
    parser.add_argument("--config", default=None, help="path to a dirdrift.toml file")
    parser.add_argument("--json", action="store_true", help="print the report as JSON")
    parser.add_argument("--no-color", action="store_true", help="disable colored output")
    parser.add_argument("--no-progress", action="store_true", help="hide progress bars")
    parser.add_argument("--log-format", choices=("text", "jsonl"), default="text")
    parser.add_argument("-v", "--verbose", action="count", default=0)
    return parser


def main(argv: list[str] | None = None) -> int:
    """Entrypoint for the dirdrift command."""
    parser = build_arg_parser()
    args = parser.parse_args(argv)
    level = logging.WARNING
    if args.verbose == 1:
        level = logging.INFO
    if args.verbose >= 2:
        level = logging.DEBUG
    configure_logging(level=level, log_format=args.log_format)

    overrides = CliOverrides(
        diff_enabled=args.diff,
        hashing_enabled=args.hash,
        duplicates_enabled=args.dup,
        max_workers=args.workers,
        on_error=args.on_error,
        symlinks=args.symlinks,
        exclude_globs=tuple(args.exclude) if args.exclude is not None else None,
    )
    try:
        config = load_effective_config(
            config_path=Path(args.config) if args.config is not None else None,
            overrides=overrides,
        )
    except (ValueError, OSError) as error:
        print(f"dirdrift: {error}", file=sys.stderr)
        return EXIT_USAGE
    logger.debug("effective config: %s", config.to_public_dict())

    stdout = build_console(sys.stdout, color=not args.no_color)
    stderr = build_console(sys.stderr, color=not args.no_color)
    show_progress = not (args.no_progress or args.json) and stderr.is_terminal
    if not args.json:
        stdout.print(
            f"list files in {display_path(args.root_a)} and {display_path(args.root_b)}",
            markup=False,
        )

    root_a = Path(args.root_a)
    root_b = Path(args.root_b)
    try:
        progress = RichProgress(stderr) if show_progress else None
        with progress if progress is not None else nullcontext():
            report = compare_trees(root_a, root_b, config, progress=progress)
    except (ScanError, HashError, IndexingCancelled) as error:
        print(f"dirdrift: {error}", file=sys.stderr)
        return EXIT_FAILURE

    if args.json:
        render_json(report, sys.stdout)
        return EXIT_OK
    stdout.print("compare files", markup=False)
    render_report(report, stdout)
    return EXIT_OK


if __name__ == "__main__":
    raise SystemExit(main())
