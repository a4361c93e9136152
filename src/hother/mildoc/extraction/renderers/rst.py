"""
reStructuredText rendering for the documentation pages.
"""

from pydantic import Field

from hother.mildoc.catalog import display_title
from hother.mildoc.core.models import Document, SegmentKind

from .base import Renderer
from .source import ExerciseRenderer


class DocumentationRenderer(Renderer):
    """
    Documentation page for one section.

    Prose is copied verbatim. The displayed segments of each code fence are
    merged into a single ``code-block`` directive showing the exercise view of
    the fence. Hidden code is left out.
    """

    name: str = "docs"
    suffix: str = ".rst"
    description: str = "Sphinx page with prose and displayed code"
    language: str = Field(default="lean", description="Highlighting language of code blocks")
    indent: int = Field(default=4, ge=1, description="Indentation of code under the directive")
    placeholder: str = Field(default="...", min_length=1)

    def render_lines(self, document: Document) -> list[str]:
        exercise = ExerciseRenderer(placeholder=self.placeholder)
        lines: list[str] = []
        fence_lines: list[str] = []
        current_fence: int | None = None

        def close_fence() -> None:
            if fence_lines:
                if lines and lines[-1].strip():
                    lines.append("")
                lines.extend(self.code_block(fence_lines))
                fence_lines.clear()

        for segment in document.segments:
            if segment.kind == SegmentKind.CODE and segment.displayed:
                if segment.fence != current_fence:
                    close_fence()
                    current_fence = segment.fence
                fence_lines.extend(exercise.segment_lines(segment))
                continue

            close_fence()
            current_fence = None
            if segment.is_prose:
                lines.extend(segment.lines)

        close_fence()

        while lines and not lines[-1].strip():
            lines.pop()
        return lines

    def code_block(self, code: list[str]) -> list[str]:
        """Wrap code lines in a directive followed by a blank line."""
        pad = " " * self.indent
        block = [f".. code-block:: {self.language}", ""]
        block.extend(f"{pad}{line}" if line.strip() else "" for line in code)
        block.append("")
        return block


def render_chapter_index(chapter_id: str, section_ids: list[str], maxdepth: int = 2) -> str:
    """
    Index page of one chapter with a toctree of its sections.

    Args:
        chapter_id: Chapter directory name, e.g. ``C02_Basics``
        section_ids: Section names in book order
        maxdepth: toctree depth

    Returns:
        Page text without a trailing newline
    """
    title = display_title(chapter_id)
    lines = [f".. _{chapter_id.lower()}:", "", title, "=" * len(title), "", ".. toctree::", f"   :maxdepth: {maxdepth}", ""]
    lines.extend(f"   {section_id}" for section_id in section_ids)
    return "\n".join(lines)


def render_book_index(chapter_ids: list[str], title: str = "Mathematics in Lean") -> str:
    """Top-level index page linking every chapter index."""
    lines = [title, "=" * len(title), "", ".. toctree::", "   :numbered:", "   :maxdepth: 2", ""]
    lines.extend(f"   {chapter_id}/index" for chapter_id in chapter_ids)
    return "\n".join(lines)
