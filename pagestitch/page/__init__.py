from .geometry import (
    FOOTER_STYLES,
    GenerateOptions,
    PageGeometry,
    PaperSize,
    PlacementResult,
)
from .page import HtmlBlock, ImageRef, Page, PageKind


__all__ = [
    "FOOTER_STYLES",
    "GenerateOptions",
    "HtmlBlock",
    "ImageRef",
    "Page",
    "PageGeometry",
    "PageKind",
    "PaperSize",
    "PlacementResult",
]
