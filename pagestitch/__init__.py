"""Assemble scanned images and rich-text blocks into paginated documents."""

from .document import (
    DocumentAssembler,
    DocumentWriter,
    EmissionRecord,
    PdfDocumentWriter,
    generate_document,
)
from .errors import (
    InvalidRasterError,
    LoadError,
    PageStitchError,
    RenderSurfaceError,
    ValidationError,
)
from .page import GenerateOptions, HtmlBlock, ImageRef, Page, PageGeometry, PageKind, PaperSize
from .raster import LongRasterSlicer, PageFitter, ThresholdProcessor, remove_background
from .render import RenderContext, RichContentRasterizer


__all__ = [
    "DocumentAssembler",
    "DocumentWriter",
    "EmissionRecord",
    "GenerateOptions",
    "HtmlBlock",
    "ImageRef",
    "InvalidRasterError",
    "LoadError",
    "LongRasterSlicer",
    "Page",
    "PageFitter",
    "PageGeometry",
    "PageKind",
    "PageStitchError",
    "PaperSize",
    "PdfDocumentWriter",
    "RenderContext",
    "RenderSurfaceError",
    "RichContentRasterizer",
    "ThresholdProcessor",
    "ValidationError",
    "generate_document",
    "remove_background",
]
