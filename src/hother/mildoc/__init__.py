"""
mildoc - block extraction for the Mathematics in Lean manuscript

Splits the chapter/section proof scripts into prose and code segments and
renders the solved, exercise, solutions and documentation versions of each.
"""

import importlib.metadata

from .catalog import Catalog, discover_sections, load_listing, parse_listing
from .core.exceptions import (
    BuildTimeoutError,
    CatalogError,
    ExtractionError,
    SourceIOError,
    StructuralMarkerError,
    UnclosedRegionError,
)
from .core.models import Document, Marker, MarkerSyntax, Rendering, SectionRef, Segment, SegmentKind, Visibility
from .extraction import RendererRegistry, SegmentExtractor, extract_document, render_document

try:
    __version__ = importlib.metadata.version("hother-mildoc")
except importlib.metadata.PackageNotFoundError:
    __version__ = "0.0.0+dev"

__all__ = [
    # Models
    "Document",
    "Marker",
    "MarkerSyntax",
    "Rendering",
    "SectionRef",
    "Segment",
    "SegmentKind",
    "Visibility",
    # Extraction
    "SegmentExtractor",
    "RendererRegistry",
    "extract_document",
    "render_document",
    # Catalog
    "Catalog",
    "discover_sections",
    "load_listing",
    "parse_listing",
    # Exceptions
    "ExtractionError",
    "StructuralMarkerError",
    "UnclosedRegionError",
    "SourceIOError",
    "CatalogError",
    "BuildTimeoutError",
]
