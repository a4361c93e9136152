"""Core models and exceptions."""

from .exceptions import (
    BuildTimeoutError,
    CatalogError,
    ExtractionError,
    SourceIOError,
    StructuralMarkerError,
    UnclosedRegionError,
)
from .models import Document, Marker, MarkerSyntax, Rendering, SectionRef, Segment, SegmentKind, Visibility

__all__ = [
    "BuildTimeoutError",
    "CatalogError",
    "Document",
    "ExtractionError",
    "Marker",
    "MarkerSyntax",
    "Rendering",
    "SectionRef",
    "Segment",
    "SegmentKind",
    "SourceIOError",
    "StructuralMarkerError",
    "UnclosedRegionError",
    "Visibility",
]
