"""
Batch build of every section of the manuscript.

Sections are read, extracted and rendered concurrently in worker threads.
Nothing is written until every section has rendered, so a structural error in
any file leaves the output tree untouched. Outputs are then committed as a
whole: a failed write restores the tree to its previous state.
"""

import contextlib
import functools
import os
import shutil
import tempfile
import time
from pathlib import Path

import anyio
from pydantic import BaseModel, ConfigDict, Field

from hother.mildoc.catalog import Catalog
from hother.mildoc.config import MildocSettings
from hother.mildoc.core.exceptions import BuildTimeoutError, ExtractionError, SourceIOError
from hother.mildoc.core.models import Rendering, SectionRef
from hother.mildoc.extraction.extractor import extract_document
from hother.mildoc.extraction.registry import RendererRegistry
from hother.mildoc.extraction.renderers.rst import render_book_index, render_chapter_index
from hother.mildoc.utils.logging import get_logger

logger = get_logger(__name__)

INDEX_PAGE = "index"
STAGING_PREFIX = ".mildoc-staging-"


class SectionResult(BaseModel):
    """Outcome of building one section."""

    model_config = ConfigDict(arbitrary_types_allowed=True)

    section: SectionRef
    source: Path
    segments: int = Field(default=0, ge=0)
    renderings: dict[str, Rendering] = Field(default_factory=dict)
    written: list[Path] = Field(default_factory=list)


class BuildReport(BaseModel):
    """Outcome of a whole build."""

    model_config = ConfigDict(arbitrary_types_allowed=True)

    results: list[SectionResult] = Field(default_factory=list)
    index_pages: list[Path] = Field(default_factory=list)
    elapsed: float = Field(default=0.0, ge=0)

    @property
    def written_count(self) -> int:
        return sum(len(result.written) for result in self.results) + len(self.index_pages)

    def log_context(self) -> dict:
        """Get context dict for structured logging."""
        return {
            "sections": len(self.results),
            "files_written": self.written_count,
            "elapsed": round(self.elapsed, 3),
        }


def read_source(path: Path) -> str:
    """Read a source file as UTF-8."""
    try:
        return path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise SourceIOError(path, "read", e) from e


def write_file(path: Path, content: str) -> None:
    """Write a UTF-8 file with LF line ends, creating its parents."""
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content, encoding="utf-8", newline="\n")
    except OSError as e:
        raise SourceIOError(path, "write", e) from e


def missing_dirs(path: Path) -> list[Path]:
    """Directories from path upwards that do not exist yet, outermost first."""
    missing = []
    for directory in [path, *path.parents]:
        if directory.exists():
            break
        missing.append(directory)
    return missing[::-1]


def commit_outputs(outputs: dict[Path, str], output_root: Path) -> None:
    """
    Write every output file or none of them.

    Files are first written to a staging directory inside output_root, then
    moved into place. Files they replace are kept in the staging directory
    until every move has succeeded.

    Args:
        outputs: Content of each target path, in write order
        output_root: Root the targets live under

    Raises:
        SourceIOError: If a file cannot be written or moved; the output tree is restored
    """
    if not outputs:
        return

    created = missing_dirs(output_root)
    try:
        output_root.mkdir(parents=True, exist_ok=True)
        staging = Path(tempfile.mkdtemp(prefix=STAGING_PREFIX, dir=output_root))
    except OSError as e:
        rollback([], created, None)
        raise SourceIOError(output_root, "write", e) from e

    placed: list[tuple[Path, Path | None]] = []
    try:
        staged = []
        for index, (target, content) in enumerate(outputs.items()):
            path = staging / "new" / str(index)
            write_file(path, content)
            staged.append((target, path))

        for target, _ in staged:
            created.extend(missing_dirs(target.parent))
            try:
                target.parent.mkdir(parents=True, exist_ok=True)
            except OSError as e:
                raise SourceIOError(target, "write", e) from e

        for index, (target, path) in enumerate(staged):
            backup = None
            try:
                if target.is_file():
                    backup = staging / "old" / str(index)
                    backup.parent.mkdir(parents=True, exist_ok=True)
                    os.replace(target, backup)
                    placed.append((target, backup))
                os.replace(path, target)
            except OSError as e:
                raise SourceIOError(target, "write", e) from e
            if backup is None:
                placed.append((target, None))
    except SourceIOError as e:
        logger.error("Write failed, restoring output tree", path=str(e.path), restored=len(placed))
        rollback(placed, created, staging)
        raise
    finally:
        shutil.rmtree(staging, ignore_errors=True)


def rollback(placed: list[tuple[Path, Path | None]], created: list[Path], staging: Path | None) -> None:
    """Undo the moves of a failed commit and remove the directories it made."""
    for target, backup in reversed(placed):
        try:
            if backup is None:
                target.unlink()
            else:
                os.replace(backup, target)
        except OSError as e:
            logger.warning("Could not restore output file", path=str(target), error=str(e))

    if staging is not None:
        shutil.rmtree(staging, ignore_errors=True)
    for directory in reversed(created):
        with contextlib.suppress(OSError):
            directory.rmdir()


def process_section(ref: SectionRef, input_root: Path, config: MildocSettings, registry: RendererRegistry) -> SectionResult:
    """
    Read, extract and render one section.

    Raises:
        SourceIOError: If the script cannot be read
        StructuralMarkerError: If its markers are malformed
    """
    path = ref.source_path(input_root, config.source_suffix)
    text = read_source(path)

    try:
        document = extract_document(text, ref, config.markers, strict=config.strict)
    except ExtractionError as e:
        raise e.with_path(path)

    renderings = registry.render(document)
    logger.info("Section rendered", **document.log_context())
    return SectionResult(section=ref, source=path, segments=len(document.segments), renderings=renderings)


async def build_book(
    catalog: Catalog,
    input_root: Path | str,
    output_root: Path | str,
    config: MildocSettings | None = None,
    registry: RendererRegistry | None = None,
    index_catalog: Catalog | None = None,
) -> BuildReport:
    """
    Build every section of a catalog.

    Args:
        catalog: Sections to build
        input_root: Manuscript root
        output_root: Root of the rendered trees
        config: Build settings (environment defaults if None)
        registry: Renderers to run (from config if None)
        index_catalog: Listing used for chapter index pages (catalog if None)

    Returns:
        Report of what was rendered and written

    Raises:
        ExtractionError: The first failing section in book order; nothing is written
        BuildTimeoutError: If the batch exceeds config.timeout
        SourceIOError: If an output cannot be written; earlier outputs are rolled back
    """
    config = config or MildocSettings()
    registry = registry or config.build_registry()
    input_root = Path(input_root)
    output_root = Path(output_root)
    refs = list(catalog.sections())

    results: dict[int, SectionResult] = {}
    failures: dict[int, ExtractionError] = {}
    limiter = anyio.CapacityLimiter(config.max_workers)
    start = time.perf_counter()

    async def worker(index: int, ref: SectionRef, scope: anyio.CancelScope) -> None:
        try:
            results[index] = await anyio.to_thread.run_sync(
                process_section, ref, input_root, config, registry, abandon_on_cancel=True, limiter=limiter
            )
        except ExtractionError as e:
            failures[index] = e
            logger.error("Section failed", section=ref.key, error=str(e))
            scope.cancel()

    logger.info("Build started", sections=len(refs), renderers=registry.list_names(), workers=config.max_workers)

    try:
        with anyio.fail_after(config.timeout):
            async with anyio.create_task_group() as tg:
                for index, ref in enumerate(refs):
                    tg.start_soon(worker, index, ref, tg.cancel_scope)
    except TimeoutError:
        logger.error("Build timed out", timeout=config.timeout, completed=len(results))
        raise BuildTimeoutError(config.timeout) from None

    if failures:
        raise failures[min(failures)]

    outputs: dict[Path, str] = {}
    report = BuildReport()
    for index in range(len(refs)):
        result = results[index]
        for name, rendering in result.renderings.items():
            out = result.section.output_path(output_root / config.output_dir(name), rendering.suffix)
            outputs[out] = rendering.file_content()
            result.written.append(out)
        report.results.append(result)

    docs = registry.get_renderer("docs")
    if docs is not None and config.write_indexes and refs:
        pages = render_index_pages(index_catalog or catalog, output_root / config.output_dir("docs"), docs.suffix)
        outputs.update(pages)
        report.index_pages = list(pages)

    commit_outputs(outputs, output_root)

    report.elapsed = time.perf_counter() - start
    logger.info("Build finished", **report.log_context())
    return report


def render_index_pages(catalog: Catalog, docs_root: Path, suffix: str = ".rst") -> dict[Path, str]:
    """Render one index page per chapter plus the book index."""
    pages = {}
    for chapter_id, section_ids in catalog.chapters.items():
        pages[docs_root / chapter_id / f"{INDEX_PAGE}{suffix}"] = render_chapter_index(chapter_id, section_ids) + "\n"

    pages[docs_root / f"{INDEX_PAGE}{suffix}"] = render_book_index(list(catalog.chapters)) + "\n"
    return pages


def build_book_sync(
    catalog: Catalog,
    input_root: Path | str,
    output_root: Path | str,
    config: MildocSettings | None = None,
    registry: RendererRegistry | None = None,
    index_catalog: Catalog | None = None,
) -> BuildReport:
    """Run :func:`build_book` in a fresh event loop."""
    return anyio.run(functools.partial(build_book, catalog, input_root, output_root, config, registry, index_catalog))
