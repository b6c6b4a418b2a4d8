"""Command-line interface for modvers."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from modvers.config import ConfigError, load_config, resolve_include_dirs
from modvers.driver import VersionRequest, run
from modvers.resolve.base import LoadInterrupted
from modvers.resolve.registry import STRATEGIES
from modvers.scan.paths import default_search_path

EXIT_INTERNAL_ERROR = 1
EXIT_CONFIG_ERROR = 2
EXIT_INTERRUPTED = 130


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="modvers",
        description="Report the installed version of Python modules.",
    )
    parser.add_argument(
        "modules",
        nargs="*",
        metavar="MODULE",
        help="Module names, dotted (pkg.mod) or as paths (pkg/mod.py)",
    )
    parser.add_argument(
        "-a",
        "--all",
        dest="all_modules",
        action="store_true",
        help="Report every module found on the search path",
    )
    parser.add_argument(
        "-m",
        "--method",
        choices=sorted(STRATEGIES),
        default=None,
        help="How to find versions (default: config method, else text)",
    )
    parser.add_argument(
        "-n",
        "--names",
        action="store_true",
        help="Always prefix results with the module name",
    )
    parser.add_argument(
        "-N",
        "--no-names",
        action="store_true",
        help="Never prefix results with the module name",
    )
    parser.add_argument(
        "-f",
        "--files",
        action="store_true",
        default=None,
        help="Append the module's source file to each result",
    )
    parser.add_argument(
        "-I",
        "--include",
        action="append",
        default=[],
        metavar="DIR",
        help="Search DIR before the interpreter path (repeatable)",
    )
    parser.add_argument(
        "--format",
        choices=["text", "jsonl"],
        default=None,
        help="Output format (default: config format, else text)",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Log diagnostics, including load errors, to stderr",
    )
    return parser


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="modvers: %(levelname)s: %(message)s",
        stream=sys.stderr,
    )


def _build_search_path(
    root: Path, include: list[str], config_include: list[str]
) -> list[str]:
    cli_dirs = resolve_include_dirs(Path.cwd(), include)
    config_dirs = resolve_include_dirs(root, config_include)
    return [*cli_dirs, *config_dirs, *default_search_path()]


def main(argv: list[str] | None = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)

    _configure_logging(args.verbose)

    root = Path.cwd()
    try:
        config = load_config(root)
    except ConfigError as exc:
        sys.stderr.write(f"modvers: error: {exc}\n")
        return EXIT_CONFIG_ERROR

    request = VersionRequest(
        modules=tuple(args.modules),
        all_modules=args.all_modules,
        method=args.method or config.method,
        names=args.names,
        no_names=args.no_names,
        show_files=config.show_files if args.files is None else args.files,
        attributes=tuple(config.version_attributes),
        output_format=args.format or config.format,
    )
    search_path = _build_search_path(root, args.include, config.include)

    try:
        summary = run(request, search_path=search_path, out=sys.stdout)
    except ConfigError as exc:
        sys.stderr.write(f"modvers: error: {exc}\n")
        return EXIT_CONFIG_ERROR
    except LoadInterrupted:
        return EXIT_INTERRUPTED

    if not summary.ok:
        for module in summary.internal_errors:
            sys.stderr.write(f"modvers: internal error while loading {module}\n")
        return EXIT_INTERNAL_ERROR
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
