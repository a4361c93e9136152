"""
Renderers that produce Lean source files for readers and learners.
"""

from pydantic import Field

from hother.mildoc.core.models import Document, Segment, Visibility

from .base import Renderer, placeholder_line


class SolvedRenderer(Renderer):
    """Everything except omitted code, solutions included."""

    name: str = "solved"
    description: str = "Full text with worked solutions"

    def render_lines(self, document: Document) -> list[str]:
        lines: list[str] = []
        for segment in document.segments:
            if segment.visibility != Visibility.OMIT:
                lines.extend(segment.lines)
        return lines


class ExerciseRenderer(Renderer):
    """Solution-only code replaced by one placeholder line per segment."""

    name: str = "exercise"
    description: str = "Exercises with solutions blanked out"
    placeholder: str = Field(default="...", min_length=1, description="Text standing in for a solution")

    def render_lines(self, document: Document) -> list[str]:
        lines: list[str] = []
        for segment in document.segments:
            lines.extend(self.segment_lines(segment))
        return lines

    def segment_lines(self, segment: Segment) -> list[str]:
        """Exercise view of a single segment."""
        if segment.visibility == Visibility.OMIT:
            return []
        if segment.visibility == Visibility.SOLUTIONS:
            return [placeholder_line(segment, self.placeholder)]
        return list(segment.lines)


class SolutionsRenderer(Renderer):
    """
    The solutions file handed to learners.

    Examples-only code is the exercise statement left for the learner and is
    dropped here; shared and solution-only code is kept.
    """

    name: str = "solutions"
    description: str = "Solutions without the exercise-only statements"

    def render_lines(self, document: Document) -> list[str]:
        lines: list[str] = []
        for segment in document.segments:
            if segment.visibility in (Visibility.BOTH, Visibility.SOLUTIONS):
                lines.extend(segment.lines)
        return lines
