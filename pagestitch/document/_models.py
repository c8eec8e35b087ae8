"""Dataclasses describing what the assembler hands to a document writer."""

from __future__ import annotations

from dataclasses import dataclass

from PIL import Image

from pagestitch.page import PlacementResult


FOOTER_FONT_SIZE_PT = 10.0
FOOTER_GRAY = 100
FOOTER_BOTTOM_OFFSET_MM = 10.0


@dataclass(frozen=True)
class FooterOverlay:
    """Page-number label, anchored at its horizontal center and baseline."""

    label: str
    x_center_mm: float
    y_mm: float
    font_size_pt: float = FOOTER_FONT_SIZE_PT
    gray: int = FOOTER_GRAY


@dataclass(frozen=True, eq=False)
class EmissionRecord:
    """One physical output page.

    ``encoded`` carries the source file's bytes when ``raster`` is the untouched
    original image, so writers can embed it without re-encoding.
    """

    raster: Image.Image
    placement: PlacementResult
    page_number: int
    source_page_id: str
    chunk_index: int = 0
    footer: FooterOverlay | None = None
    encoded: bytes | None = None


__all__ = [
    "EmissionRecord",
    "FOOTER_BOTTOM_OFFSET_MM",
    "FOOTER_FONT_SIZE_PT",
    "FOOTER_GRAY",
    "FooterOverlay",
]
