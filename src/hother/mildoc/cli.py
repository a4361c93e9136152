"""
Command line entry point: ``mildoc INPUT_ROOT OUTPUT_ROOT``.
"""

import argparse
import sys
from pathlib import Path

from pydantic import ValidationError

from hother.mildoc.build import build_book_sync
from hother.mildoc.catalog import discover_sections, load_listing
from hother.mildoc.config import MildocSettings
from hother.mildoc.core.exceptions import ExtractionError, StructuralMarkerError
from hother.mildoc.utils.logging import configure_logging, get_logger

logger = get_logger(__name__)

EXIT_OK = 0
EXIT_STRUCTURE = 1
EXIT_ENVIRONMENT = 2


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="mildoc",
        description="Extract prose and code blocks from the manuscript and write the solved, exercise, solutions and documentation trees.",
    )
    parser.add_argument("input_root", type=Path, help="Manuscript root holding the chapter directories")
    parser.add_argument("output_root", type=Path, help="Directory receiving the rendered trees")
    parser.add_argument("--listing", type=Path, help="File of 'chapter section' lines to use instead of scanning input_root")
    parser.add_argument("--chapter", help="Only build this chapter")
    parser.add_argument("--section", help="Only build this section")
    parser.add_argument("--strict", action="store_true", default=None, help="Fail on regions left open at end of file")
    parser.add_argument("--placeholder", help="Text standing in for solutions in exercises")
    parser.add_argument(
        "--renderer",
        action="append",
        dest="renderers",
        metavar="NAME",
        help="Rendering to produce (repeatable; default: all)",
    )
    parser.add_argument("--workers", type=int, dest="max_workers", help="Concurrent worker threads")
    parser.add_argument("--timeout", type=float, help="Deadline for the whole build, in seconds")
    parser.add_argument("--log-level", help="DEBUG, INFO, WARNING or ERROR")
    parser.add_argument("--json-logs", action="store_true", default=None, help="Emit JSON log lines")
    return parser


def load_settings(args: argparse.Namespace) -> MildocSettings:
    """Environment settings with command-line overrides applied."""
    overrides = {
        key: value
        for key, value in {
            "strict": args.strict,
            "placeholder": args.placeholder,
            "renderers": args.renderers,
            "max_workers": args.max_workers,
            "timeout": args.timeout,
            "log_level": args.log_level,
            "json_logs": args.json_logs,
        }.items()
        if value is not None
    }
    return MildocSettings(**overrides)


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)

    try:
        settings = load_settings(args)
        configure_logging(settings.log_level, json_output=settings.json_logs)
        registry = settings.build_registry()
    except (ValidationError, ValueError) as e:
        print(f"mildoc: invalid configuration: {e}", file=sys.stderr)
        return EXIT_ENVIRONMENT

    try:
        if args.listing is not None:
            full_catalog = load_listing(args.listing)
        else:
            full_catalog = discover_sections(args.input_root, settings.source_suffix)
        catalog = full_catalog.select(args.chapter, args.section)
        report = build_book_sync(catalog, args.input_root, args.output_root, settings, registry, index_catalog=full_catalog)
    except StructuralMarkerError as e:
        print(f"mildoc: {e}", file=sys.stderr)
        return EXIT_STRUCTURE
    except ExtractionError as e:
        print(f"mildoc: {e}", file=sys.stderr)
        return EXIT_ENVIRONMENT

    logger.info("Done", output_root=str(args.output_root), **report.log_context())
    return EXIT_OK


if __name__ == "__main__":
    raise SystemExit(main())
