#!/usr/bin/env python3
"""
Build every chapter of a manuscript tree with a batch deadline.

Usage:
    python 02_build_book.py MIL/ build/
"""

# --8<-- [start:imports]
import sys

import anyio

from hother.mildoc import ExtractionError, discover_sections
from hother.mildoc.build import build_book
from hother.mildoc.config import MildocSettings
from hother.mildoc.utils.logging import configure_logging

# --8<-- [end:imports]


# --8<-- [start:main]
async def main(input_root: str, output_root: str) -> None:
    """Run the example."""
    # --8<-- [start:example]
    settings = MildocSettings(placeholder="sorry", timeout=60)
    catalog = discover_sections(input_root, settings.source_suffix)

    try:
        report = await build_book(catalog, input_root, output_root, settings)
    except ExtractionError as e:
        print(f"  Build failed: {e}")
        return

    for result in report.results:
        print(f"  {result.section.key}: {result.segments} segments, {len(result.written)} files")
    print(f"  Elapsed: {report.elapsed:.2f}s")
    # --8<-- [end:example]


# --8<-- [end:main]


if __name__ == "__main__":
    configure_logging(log_level="INFO")
    anyio.run(main, *sys.argv[1:3])
