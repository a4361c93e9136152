"""
Chapter and section listing of the manuscript.

Chapters are directories named like ``C02_Basics`` and sections are scripts
named like ``S01_Calculating.lean``; the numeric prefixes give book order.
"""

import re
from collections.abc import Iterator
from pathlib import Path

from pydantic import BaseModel, Field

from hother.mildoc.core.exceptions import CatalogError, SourceIOError
from hother.mildoc.core.models import SectionRef
from hother.mildoc.utils.logging import get_logger

logger = get_logger(__name__)

CHAPTER_PATTERN = re.compile(r"^C(\d+)_(.+)$")
SECTION_PATTERN = re.compile(r"^S(\d+)_(.+)$")


def display_title(identifier: str) -> str:
    """``C04_Sets_and_Functions`` -> ``Sets and Functions``."""
    return re.sub(r"^[CS]\d+_", "", identifier).replace("_", " ")


def _order_key(pattern: re.Pattern[str], name: str) -> tuple[int, str]:
    match = pattern.match(name)
    return (int(match.group(1)) if match else 0, name)


class Catalog(BaseModel):
    """Ordered mapping of chapter ids to their section ids."""

    chapters: dict[str, list[str]] = Field(default_factory=dict, description="Chapter id -> section ids, in book order")

    @property
    def section_count(self) -> int:
        return sum(len(sections) for sections in self.chapters.values())

    def sections(self) -> Iterator[SectionRef]:
        """Iterate over every section in book order."""
        for chapter_id, section_ids in self.chapters.items():
            for section_id in section_ids:
                yield SectionRef(chapter_id=chapter_id, section_id=section_id)

    def add(self, chapter_id: str, section_id: str) -> None:
        """Append a section, ignoring repeats."""
        sections = self.chapters.setdefault(chapter_id, [])
        if section_id not in sections:
            sections.append(section_id)

    def select(self, chapter: str | None = None, section: str | None = None) -> "Catalog":
        """
        Narrow the listing to one chapter and/or one section.

        Args:
            chapter: Chapter id to keep
            section: Section id to keep

        Returns:
            A new catalog with the matching entries

        Raises:
            CatalogError: If nothing matches or a bare section id is ambiguous
        """
        if chapter is not None and chapter not in self.chapters:
            raise CatalogError(f"Unknown chapter {chapter!r}")

        selected = Catalog()
        for ref in self.sections():
            if chapter is not None and ref.chapter_id != chapter:
                continue
            if section is not None and ref.section_id != section:
                continue
            selected.add(ref.chapter_id, ref.section_id)

        if section is not None:
            if selected.section_count == 0:
                where = f" in chapter {chapter!r}" if chapter else ""
                raise CatalogError(f"Unknown section {section!r}{where}")
            if selected.section_count > 1:
                raise CatalogError(f"Section {section!r} appears in several chapters; pass the chapter too")

        return selected


def discover_sections(root: Path | str, suffix: str = ".lean") -> Catalog:
    """
    Build the listing from the chapter directories under a manuscript root.

    Args:
        root: Manuscript root directory
        suffix: Suffix of section scripts

    Returns:
        The catalog in book order

    Raises:
        CatalogError: If root is not a directory
    """
    root = Path(root)
    if not root.is_dir():
        raise CatalogError(f"Manuscript root is not a directory: {root}")

    catalog = Catalog()
    chapter_dirs = [p for p in root.iterdir() if p.is_dir() and CHAPTER_PATTERN.match(p.name)]
    for chapter_dir in sorted(chapter_dirs, key=lambda p: _order_key(CHAPTER_PATTERN, p.name)):
        catalog.chapters.setdefault(chapter_dir.name, [])
        section_files = [
            p for p in chapter_dir.iterdir() if p.is_file() and p.name.endswith(suffix) and SECTION_PATTERN.match(p.name[: -len(suffix)])
        ]
        for section_file in sorted(section_files, key=lambda p: _order_key(SECTION_PATTERN, p.name)):
            catalog.add(chapter_dir.name, section_file.name[: -len(suffix)])

    logger.info("Discovered sections", root=str(root), chapters=len(catalog.chapters), sections=catalog.section_count)
    return catalog


def parse_listing(text: str) -> Catalog:
    """
    Parse ``chapter section`` lines.

    Any leading words (such as the build command of a shell listing) are
    ignored; blank lines and ``#`` comments are skipped.

    Raises:
        CatalogError: On a line with fewer than two words
    """
    catalog = Catalog()
    for line_number, raw in enumerate(text.splitlines(), 1):
        line = raw.split("#", 1)[0].strip()
        if not line:
            continue
        words = line.split()
        if len(words) < 2:
            raise CatalogError(f"Listing line {line_number}: expected 'chapter section', got {raw.strip()!r}")
        catalog.add(words[-2], words[-1])
    return catalog


def load_listing(path: Path | str) -> Catalog:
    """Read a listing file; see :func:`parse_listing`."""
    path = Path(path)
    try:
        text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise SourceIOError(path, "read", e) from e

    try:
        return parse_listing(text)
    except CatalogError as e:
        raise e.with_path(path)
