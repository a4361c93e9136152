"""
Custom exceptions for the manuscript extraction tools.
"""

from pathlib import Path


class ExtractionError(Exception):
    """
    Base exception for extraction and build errors.

    Attributes:
        message: Human-readable description
        path: Source file the error relates to, if known
    """

    def __init__(self, message: str, path: Path | str | None = None):
        self.message = message
        self.path = Path(path) if path is not None else None
        super().__init__(str(self))

    def with_path(self, path: Path | str) -> "ExtractionError":
        """Attach the source path once the caller knows it."""
        self.path = Path(path)
        self.args = (str(self),)
        return self

    def __str__(self) -> str:
        if self.path is not None:
            return f"{self.path}: {self.message}"
        return self.message


class StructuralMarkerError(ExtractionError):
    """
    A marker line that is unmatched or mis-nested.

    Attributes:
        line_number: 1-based line of the offending marker
        marker: Name of the offending marker
    """

    def __init__(
        self,
        line_number: int,
        marker: str,
        message: str | None = None,
        path: Path | str | None = None,
    ):
        self.line_number = line_number
        self.marker = marker
        super().__init__(message or f"unexpected {marker} marker", path)

    def __str__(self) -> str:
        location = f"line {self.line_number}"
        if self.path is not None:
            location = f"{self.path}:{self.line_number}"
        return f"{location}: {self.message}"


class UnclosedRegionError(StructuralMarkerError):
    """A region still open at end of input, raised only in strict mode."""

    def __init__(self, line_number: int, marker: str, path: Path | str | None = None):
        super().__init__(
            line_number,
            marker,
            f"{marker} region opened here is never closed",
            path,
        )


class SourceIOError(ExtractionError):
    """
    A source or output file could not be read or written.

    Attributes:
        operation: "read" or "write"
        cause: The underlying OS or decoding error
    """

    def __init__(self, path: Path | str, operation: str, cause: Exception):
        self.operation = operation
        self.cause = cause
        super().__init__(f"cannot {operation} file: {cause}", path)


class CatalogError(ExtractionError):
    """The chapter/section listing is malformed or a selection matches nothing."""


class BuildTimeoutError(ExtractionError):
    """The whole batch did not finish within its deadline."""

    def __init__(self, timeout: float):
        self.timeout = timeout
        super().__init__(f"build timed out after {timeout}s")
