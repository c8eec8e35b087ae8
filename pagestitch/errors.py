"""Exception types raised by the pagestitch pipeline."""

from __future__ import annotations


class PageStitchError(RuntimeError):
    """Base class for pipeline failures.

    ``page_id`` is filled in by the assembler when the failure can be pinned to
    a specific input page, so callers always learn which page aborted the run.
    """

    def __init__(self, message: str, *, page_id: str | None = None) -> None:
        super().__init__(message)
        self.page_id = page_id

    def __str__(self) -> str:
        message = super().__str__()
        if self.page_id is None:
            return message
        return f"[page {self.page_id}] {message}"


class LoadError(PageStitchError):
    """Raised when a source image cannot be read or decoded."""

    pass


class RenderSurfaceError(PageStitchError):
    """Raised when rich content cannot be painted onto the render surface.

    This covers a missing or busy surface as well as failures while the
    surface lays out or captures the content.
    """

    pass


class InvalidRasterError(PageStitchError):
    """Raised when a raster with zero width or height reaches layout."""

    pass


class ValidationError(PageStitchError, ValueError):
    """Raised when geometry, options or inputs are rejected before processing."""

    pass


__all__ = [
    "PageStitchError",
    "LoadError",
    "RenderSurfaceError",
    "InvalidRasterError",
    "ValidationError",
]
