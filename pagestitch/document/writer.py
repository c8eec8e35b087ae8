"""Document writers that turn emission records into a paginated file."""

from __future__ import annotations

from io import BytesIO
from pathlib import Path
from typing import Protocol

import fitz  # PyMuPDF
from PIL import Image

from pagestitch.page import PageGeometry
from pagestitch.utils.log_utils import logger


MM_TO_PT = 72.0 / 25.4
DEFAULT_JPEG_QUALITY = 85
FOOTER_FONT_NAME = "helv"


class DocumentWriter(Protocol):
    """Page-description encoder driven by the assembler.

    Coordinates are millimetres from the top-left corner of the current page.
    A writer starts with one open page; ``add_page`` opens the next one.
    """

    def add_page(self) -> None: ...

    def draw_raster(
        self,
        raster: Image.Image,
        x: float,
        y: float,
        width: float,
        height: float,
        *,
        encoded: bytes | None = None,
    ) -> None: ...

    def draw_text(
        self, label: str, x: float, y: float, font_size_pt: float, gray: int
    ) -> None: ...

    def finalize(self, filename: str | Path) -> Path: ...


def encode_raster(raster: Image.Image, jpeg_quality: int = DEFAULT_JPEG_QUALITY) -> bytes:
    """Encode as PNG when the raster carries transparency, JPEG otherwise."""
    buffer = BytesIO()
    has_alpha = raster.mode in ("RGBA", "LA") or (
        raster.mode == "P" and "transparency" in raster.info
    )
    if has_alpha:
        raster.convert("RGBA").save(buffer, format="PNG")
    else:
        rgb = raster if raster.mode in ("RGB", "L") else raster.convert("RGB")
        rgb.save(buffer, format="JPEG", quality=jpeg_quality)
    return buffer.getvalue()


class PdfDocumentWriter:
    """Writes pages into a PDF with PyMuPDF."""

    def __init__(
        self,
        geometry: PageGeometry,
        *,
        jpeg_quality: int = DEFAULT_JPEG_QUALITY,
    ) -> None:
        self._geometry = geometry
        self._jpeg_quality = jpeg_quality
        self._doc = fitz.open()
        self._page: fitz.Page | None = None
        self._finalized = False
        self._new_page()

    @property
    def page_count(self) -> int:
        return self._doc.page_count

    @property
    def closed(self) -> bool:
        return self._finalized

    def _new_page(self) -> None:
        self._page = self._doc.new_page(
            width=self._geometry.page_width_mm * MM_TO_PT,
            height=self._geometry.page_height_mm * MM_TO_PT,
        )

    def _current_page(self) -> fitz.Page:
        if self._finalized or self._page is None:
            raise RuntimeError("PDF writer has already been finalized.")
        return self._page

    def add_page(self) -> None:
        self._current_page()
        self._new_page()

    def draw_raster(
        self,
        raster: Image.Image,
        x: float,
        y: float,
        width: float,
        height: float,
        *,
        encoded: bytes | None = None,
    ) -> None:
        page = self._current_page()
        rect = fitz.Rect(
            x * MM_TO_PT,
            y * MM_TO_PT,
            (x + width) * MM_TO_PT,
            (y + height) * MM_TO_PT,
        )
        stream = encoded if encoded is not None else encode_raster(raster, self._jpeg_quality)
        page.insert_image(rect, stream=stream, keep_proportion=False)

    def draw_text(self, label: str, x: float, y: float, font_size_pt: float, gray: int) -> None:
        page = self._current_page()
        text_width = fitz.get_text_length(label, fontname=FOOTER_FONT_NAME, fontsize=font_size_pt)
        level = max(0, min(255, gray)) / 255
        page.insert_text(
            fitz.Point(x * MM_TO_PT - text_width / 2, y * MM_TO_PT),
            label,
            fontsize=font_size_pt,
            fontname=FOOTER_FONT_NAME,
            color=(level, level, level),
        )

    def finalize(self, filename: str | Path) -> Path:
        self._current_page()
        output_path = Path(filename)
        if output_path.suffix.lower() != ".pdf":
            output_path = output_path.with_name(f"{output_path.name}.pdf")
        output_path.parent.mkdir(parents=True, exist_ok=True)
        try:
            self._doc.save(str(output_path), garbage=3, deflate=True)
        finally:
            self._finalized = True
            self._page = None
            self._doc.close()
        logger.info(f"Saved {output_path}")
        return output_path

    def close(self) -> None:
        """Discard the document without saving; a no-op once finalized."""
        if self._finalized:
            return
        self._finalized = True
        self._page = None
        self._doc.close()


__all__ = ["DocumentWriter", "PdfDocumentWriter", "encode_raster", "MM_TO_PT"]
