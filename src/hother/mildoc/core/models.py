"""
Core models for manuscript segments and documents.
"""

from enum import Enum
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, model_validator


class Marker(str, Enum):
    """Sentinel lines that toggle the extractor state."""

    PROSE_OPEN = "prose_open"
    PROSE_CLOSE = "prose_close"
    CODE_OPEN = "code_open"
    CODE_CLOSE = "code_close"
    EXAMPLES = "examples"
    SOLUTIONS = "solutions"
    BOTH = "both"
    OMIT = "omit"

    @property
    def is_case_toggle(self) -> bool:
        """Whether the marker switches the visibility of following code."""
        return self in (Marker.EXAMPLES, Marker.SOLUTIONS, Marker.BOTH, Marker.OMIT)


class SegmentKind(str, Enum):
    """Kind of a contiguous run of lines."""

    PROSE = "prose"
    CODE = "code"


class Visibility(str, Enum):
    """Which renderings a code segment appears in."""

    BOTH = "both"
    EXAMPLES = "examples"
    SOLUTIONS = "solutions"
    OMIT = "omit"

    @classmethod
    def from_marker(cls, marker: Marker) -> "Visibility":
        """Map a case toggle marker to the visibility it selects."""
        return cls(marker.value)


class MarkerSyntax(BaseModel):
    """Verbatim marker tokens used by the manuscript sources."""

    model_config = ConfigDict(frozen=True)

    prose_open: str = Field(default="/- TEXT:", description="Opens a narrative prose region")
    prose_close: str = Field(default="TEXT. -/", description="Closes a narrative prose region")
    code_open: str = Field(default="-- QUOTE:", description="Opens a displayed code fence")
    code_close: str = Field(default="-- QUOTE.", description="Closes a displayed code fence")
    examples: str = Field(default="-- EXAMPLES:", description="Following code is examples-only")
    solutions: str = Field(default="-- SOLUTIONS:", description="Following code is solution-only")
    both: str = Field(default="-- BOTH:", description="Following code is shown in every rendering")
    omit: str = Field(default="-- OMIT:", description="Following code is dropped from every rendering")

    @model_validator(mode="after")
    def _check_tokens(self) -> "MarkerSyntax":
        tokens = [getattr(self, marker.value) for marker in Marker]
        for token in tokens:
            if not token or token != token.strip() or "\n" in token:
                raise ValueError(f"Marker token must be a non-empty single line without surrounding whitespace: {token!r}")
        if len(set(tokens)) != len(tokens):
            raise ValueError("Marker tokens must be distinct")
        return self

    def token_for(self, marker: Marker) -> str:
        """Get the token spelling of a marker."""
        return getattr(self, marker.value)

    def classify(self, line: str) -> Marker | None:
        """
        Recognize a marker line.

        Args:
            line: A source line

        Returns:
            The marker if the stripped line equals a token, None otherwise
        """
        stripped = line.strip()
        for marker in Marker:
            if stripped == getattr(self, marker.value):
                return marker
        return None


class Segment(BaseModel):
    """A contiguous run of source lines classified as prose or code."""

    model_config = ConfigDict(frozen=True)

    kind: SegmentKind
    lines: tuple[str, ...] = Field(default=(), description="Raw content lines, verbatim")
    displayed: bool = Field(default=True, description="Quoted/displayed code vs hidden code")
    visibility: Visibility = Field(default=Visibility.BOTH)
    start_line: int = Field(default=1, ge=1, description="1-based source line of the first content line")
    fence: int | None = Field(default=None, ge=0, description="Index of the enclosing code fence")

    @property
    def is_prose(self) -> bool:
        return self.kind == SegmentKind.PROSE

    @property
    def end_line(self) -> int:
        """1-based source line of the last content line."""
        return self.start_line + len(self.lines) - 1

    def __str__(self) -> str:
        return f"Segment[{self.kind.value}:{self.visibility.value}@{self.start_line}+{len(self.lines)}]"

    def log_context(self) -> dict[str, Any]:
        """Get context dict for structured logging."""
        return {
            "kind": self.kind.value,
            "visibility": self.visibility.value,
            "displayed": self.displayed,
            "start_line": self.start_line,
            "line_count": len(self.lines),
        }


class SectionRef(BaseModel):
    """Identifies one section script by chapter and section directory names."""

    model_config = ConfigDict(frozen=True)

    chapter_id: str = Field(..., min_length=1)
    section_id: str = Field(..., min_length=1)

    @property
    def key(self) -> str:
        return f"{self.chapter_id}/{self.section_id}"

    def source_path(self, root: Path, suffix: str = ".lean") -> Path:
        """Path of the section script under the manuscript root."""
        return Path(root) / self.chapter_id / f"{self.section_id}{suffix}"

    def output_path(self, root: Path, suffix: str) -> Path:
        """Path of a rendered artifact under an output root."""
        return Path(root) / self.chapter_id / f"{self.section_id}{suffix}"

    def __str__(self) -> str:
        return self.key


class Document(BaseModel):
    """The ordered segments of one source file. Immutable once built."""

    model_config = ConfigDict(frozen=True)

    section: SectionRef | None = None
    segments: tuple[Segment, ...] = ()

    def count(self, kind: SegmentKind | None = None, visibility: Visibility | None = None) -> int:
        """Count segments, optionally filtered by kind and visibility."""
        return sum(
            1
            for segment in self.segments
            if (kind is None or segment.kind == kind) and (visibility is None or segment.visibility == visibility)
        )

    def log_context(self) -> dict[str, Any]:
        """Get context dict for structured logging."""
        return {
            "section": self.section.key if self.section else None,
            "segments": len(self.segments),
            "prose_segments": self.count(SegmentKind.PROSE),
            "solution_segments": self.count(SegmentKind.CODE, Visibility.SOLUTIONS),
        }


class Rendering(BaseModel):
    """The text produced by one renderer for one document."""

    model_config = ConfigDict(frozen=True)

    name: str
    suffix: str
    text: str = ""

    @property
    def is_empty(self) -> bool:
        return not self.text

    def file_content(self) -> str:
        """Text as written to disk: non-empty output ends with a newline."""
        return self.text + "\n" if self.text else ""
