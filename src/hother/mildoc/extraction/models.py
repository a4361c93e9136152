"""
State models for the segment extractor.
"""

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field

from hother.mildoc.core.models import Segment, Visibility


class Region(str, Enum):
    """Region of the source file the extractor is currently inside."""

    TOP = "top"
    PROSE = "prose"
    CODE = "code"


class ExtractionStatus(str, Enum):
    """Status of the extraction process."""

    SCANNING = "scanning"
    IN_PROSE = "in_prose"
    IN_CODE = "in_code"
    COMPLETED = "completed"


class ExtractionState(BaseModel):
    """Mutable state of one extraction pass over one file."""

    model_config = ConfigDict(validate_assignment=True)

    region: Region = Field(default=Region.TOP, description="Region currently open")
    visibility: Visibility = Field(default=Visibility.BOTH, description="Visibility applied to new code lines")
    split_opened_at: int | None = Field(default=None, ge=1, description="Line of the case toggle that started the current split")
    region_opened_at: int | None = Field(default=None, ge=1, description="Line of the marker that opened the region")
    fence: int | None = Field(default=None, ge=0, description="Index of the open code fence")
    fence_count: int = Field(default=0, ge=0, description="Number of code fences opened so far")
    current_lines: list[str] = Field(default_factory=list, description="Lines of the segment being accumulated")
    current_start: int | None = Field(default=None, ge=1, description="Line of the first accumulated line")
    segments: list[Segment] = Field(default_factory=list, description="Segments flushed so far")
    processed_lines: int = Field(default=0, ge=0, description="Number of lines processed")
    marker_lines: int = Field(default=0, ge=0, description="Number of marker lines seen")
    finished: bool = Field(default=False, description="End of input reached")

    @property
    def status(self) -> ExtractionStatus:
        """Get current extraction status."""
        if self.finished:
            return ExtractionStatus.COMPLETED
        if self.region == Region.PROSE:
            return ExtractionStatus.IN_PROSE
        if self.region == Region.CODE:
            return ExtractionStatus.IN_CODE
        return ExtractionStatus.SCANNING

    @property
    def current_state_description(self) -> str:
        """Get human-readable state description."""
        if self.region == Region.TOP:
            return f"top_{self.visibility.value}_{len(self.current_lines)}_lines"
        return f"in_{self.region.value}_{self.visibility.value}_{len(self.current_lines)}_lines"

    def reset_current_segment(self) -> None:
        """Drop the accumulated lines after a flush."""
        self.current_lines = []
        self.current_start = None

    def toggle(self, visibility: Visibility, line_number: int) -> None:
        """Switch the visibility of following code; BOTH ends the split."""
        self.visibility = visibility
        self.split_opened_at = None if visibility == Visibility.BOTH else line_number

    def enter(self, region: Region, line_number: int | None) -> None:
        """Switch region; every region change resets visibility to shown-in-both."""
        self.region = region
        self.region_opened_at = line_number
        self.visibility = Visibility.BOTH
        self.split_opened_at = None
        if region == Region.CODE:
            self.fence = self.fence_count
            self.fence_count += 1
        else:
            self.fence = None
