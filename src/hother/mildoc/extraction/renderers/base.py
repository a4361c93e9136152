"""
Base interfaces for document renderers.
"""

from abc import ABC, abstractmethod

from pydantic import BaseModel, ConfigDict, Field

from hother.mildoc.core.models import Document, Rendering, Segment


class Renderer(BaseModel, ABC):
    """Base class for all renderers."""

    model_config = ConfigDict(arbitrary_types_allowed=True)

    name: str = Field(..., description="Identifier of this rendering")
    suffix: str = Field(default=".lean", description="File suffix of rendered artifacts")
    description: str = Field(default="", description="Human-readable description")

    @abstractmethod
    def render_lines(self, document: Document) -> list[str]:
        """
        Produce the output lines for a document.

        Args:
            document: The extracted document

        Returns:
            Output lines without newlines
        """

    def render(self, document: Document) -> Rendering:
        """Render a document to text."""
        return Rendering(name=self.name, suffix=self.suffix, text="\n".join(self.render_lines(document)))


def placeholder_line(segment: Segment, placeholder: str) -> str:
    """The placeholder standing in for a segment, indented like its first line."""
    first = segment.lines[0] if segment.lines else ""
    indent = first[: len(first) - len(first.lstrip())]
    return f"{indent}{placeholder}"
