"""
Core segment extraction logic for manuscript sources.
"""

from hother.mildoc.core.exceptions import StructuralMarkerError, UnclosedRegionError
from hother.mildoc.core.models import Document, Marker, MarkerSyntax, SectionRef, Segment, SegmentKind, Visibility
from hother.mildoc.utils.logging import get_logger

from .models import ExtractionState, Region

logger = get_logger(__name__)


class SegmentExtractor:
    """Partitions the lines of one source file into prose and code segments."""

    def __init__(self, syntax: MarkerSyntax | None = None, strict: bool = False, debug: bool = False):
        """
        Initialize segment extractor.

        Args:
            syntax: Marker tokens to recognize (manuscript defaults if None)
            strict: Fail on regions left open at end of input
            debug: Enable debug logging
        """
        self.syntax = syntax or MarkerSyntax()
        self.strict = strict
        self.debug = debug
        self.state = ExtractionState()

    def process_line(self, line: str) -> Segment | None:
        """
        Process a single line.

        Args:
            line: Line to process, without its newline

        Returns:
            The segment flushed by a marker line, None otherwise

        Raises:
            StructuralMarkerError: If the line is a marker that does not fit the open region
        """
        if self.state.finished:
            raise RuntimeError("Extractor already finished")

        line = line.rstrip("\r")
        self.state.processed_lines += 1
        line_number = self.state.processed_lines

        marker = self.syntax.classify(line)
        if marker is None:
            if not self.state.current_lines:
                self.state.current_start = line_number
            self.state.current_lines.append(line)
            return None

        self.state.marker_lines += 1
        if self.debug:
            logger.debug("Marker", marker=marker.value, line_number=line_number, state=self.state.current_state_description)

        self._check_nesting(marker, line_number)
        segment = self._flush()

        if marker == Marker.PROSE_OPEN:
            self.state.enter(Region.PROSE, line_number)
        elif marker == Marker.CODE_OPEN:
            self.state.enter(Region.CODE, line_number)
        elif marker in (Marker.PROSE_CLOSE, Marker.CODE_CLOSE):
            self.state.enter(Region.TOP, None)
        else:
            self.state.toggle(Visibility.from_marker(marker), line_number)

        return segment

    def finish(self, section: SectionRef | None = None) -> Document:
        """
        Handle end of input and build the document.

        A region still open is closed implicitly unless the extractor is strict.

        Args:
            section: Chapter/section the document belongs to

        Returns:
            The immutable document

        Raises:
            UnclosedRegionError: If strict and a region is still open
        """
        if not self.state.finished:
            if self.state.region != Region.TOP:
                opener = Marker.PROSE_OPEN if self.state.region == Region.PROSE else Marker.CODE_OPEN
                opened_at = self.state.region_opened_at or 1
                if self.strict:
                    raise UnclosedRegionError(opened_at, self.syntax.token_for(opener))
                logger.warning(
                    "Closing region left open at end of input",
                    section=section.key if section else None,
                    region=self.state.region.value,
                    line_number=opened_at,
                )

            self._flush()
            self.state.enter(Region.TOP, None)
            self.state.finished = True

        document = Document(section=section, segments=tuple(self.state.segments))
        if self.debug:
            logger.debug("Extraction complete", processed_lines=self.state.processed_lines, **document.log_context())
        return document

    def _check_nesting(self, marker: Marker, line_number: int) -> None:
        """Raise if the marker cannot appear in the current region."""
        region = self.state.region
        token = self.syntax.token_for(marker)
        opened_at = self.state.region_opened_at

        if region == Region.PROSE and marker != Marker.PROSE_CLOSE:
            raise StructuralMarkerError(line_number, token, f"{token!r} inside prose region opened at line {opened_at}")

        if marker == Marker.PROSE_CLOSE and region != Region.PROSE:
            raise StructuralMarkerError(line_number, token, f"{token!r} without a matching {self.syntax.prose_open!r}")

        if marker == Marker.CODE_CLOSE and region != Region.CODE:
            raise StructuralMarkerError(line_number, token, f"{token!r} without a matching {self.syntax.code_open!r}")

        if marker == Marker.CODE_CLOSE and self.state.visibility != Visibility.BOTH:
            split = self.syntax.token_for(Marker(self.state.visibility.value))
            raise StructuralMarkerError(
                line_number,
                token,
                f"{token!r} closes a fence while the {split!r} split opened at line {self.state.split_opened_at} is still open; end it with {self.syntax.both!r}",
            )

        if marker in (Marker.PROSE_OPEN, Marker.CODE_OPEN) and region == Region.CODE:
            raise StructuralMarkerError(
                line_number, token, f"{token!r} inside code fence opened at line {opened_at}; close it with {self.syntax.code_close!r}"
            )

    def _flush(self) -> Segment | None:
        """Turn the accumulated lines into a segment, if there are any."""
        if not self.state.current_lines:
            return None

        region = self.state.region
        if region == Region.PROSE:
            segment = Segment(
                kind=SegmentKind.PROSE,
                lines=tuple(self.state.current_lines),
                start_line=self.state.current_start or 1,
            )
        else:
            segment = Segment(
                kind=SegmentKind.CODE,
                lines=tuple(self.state.current_lines),
                displayed=region == Region.CODE,
                visibility=self.state.visibility,
                start_line=self.state.current_start or 1,
                fence=self.state.fence,
            )

        self.state.segments.append(segment)
        self.state.reset_current_segment()

        if self.debug:
            logger.debug("Segment flushed", **segment.log_context())

        return segment


def split_lines(text: str) -> list[str]:
    """Split text into lines; a final newline does not add an empty line."""
    lines = text.split("\n")
    if lines and lines[-1] == "":
        lines.pop()
    return lines


def extract_document(
    text: str,
    section: SectionRef | None = None,
    syntax: MarkerSyntax | None = None,
    strict: bool = False,
    debug: bool = False,
) -> Document:
    """
    Extract the segments of one source file.

    Args:
        text: Raw file contents
        section: Chapter/section the text belongs to
        syntax: Marker tokens (manuscript defaults if None)
        strict: Fail on regions left open at end of input
        debug: Enable debug logging

    Returns:
        The immutable document

    Raises:
        StructuralMarkerError: On the first mis-nested or unmatched marker
    """
    extractor = SegmentExtractor(syntax, strict=strict, debug=debug)
    for line in split_lines(text):
        extractor.process_line(line)
    return extractor.finish(section)
