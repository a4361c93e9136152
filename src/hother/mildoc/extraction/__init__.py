"""Segment extraction and rendering."""

from .extractor import SegmentExtractor, extract_document, split_lines
from .models import ExtractionState, ExtractionStatus, Region
from .registry import RendererRegistry, render_document
from .renderers import (
    DocumentationRenderer,
    ExerciseRenderer,
    Renderer,
    SolutionsRenderer,
    SolvedRenderer,
)

__all__ = [
    # State
    "ExtractionState",
    "ExtractionStatus",
    "Region",
    # Extraction
    "SegmentExtractor",
    "extract_document",
    "split_lines",
    # Rendering
    "Renderer",
    "RendererRegistry",
    "DocumentationRenderer",
    "ExerciseRenderer",
    "SolutionsRenderer",
    "SolvedRenderer",
    "render_document",
]
