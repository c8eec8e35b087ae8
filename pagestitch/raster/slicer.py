"""Split rasters that are taller than one physical page into page-sized chunks."""

from __future__ import annotations

from collections.abc import Iterator
import math

from PIL import Image

from pagestitch.errors import InvalidRasterError, ValidationError


SLICE_TOLERANCE_PX = 10

_WHITE = {
    "RGB": (255, 255, 255),
    "RGBA": (255, 255, 255, 255),
    "L": 255,
    "LA": (255, 255),
}


class LongRasterSlicer:
    """Cuts a virtual long page into top-aligned, fixed-size physical pages.

    Every chunk is exactly ``W x floor(W / target_aspect)`` pixels. The last
    chunk is copied onto a white canvas rather than stretched, so content keeps
    its true scale across page boundaries.
    """

    def __init__(self, tolerance_px: int = SLICE_TOLERANCE_PX) -> None:
        if tolerance_px < 0:
            raise ValidationError(f"tolerance_px must be >= 0, got {tolerance_px}.")
        self.tolerance_px = tolerance_px

    def chunk_height(self, image: Image.Image, target_aspect: float) -> int:
        width, height = image.size
        if width <= 0 or height <= 0:
            raise InvalidRasterError(f"Cannot slice a {width}x{height} raster.")
        if not target_aspect > 0 or math.isinf(target_aspect):
            raise InvalidRasterError(f"Target aspect ratio must be positive, got {target_aspect}.")
        chunk_h = math.floor(width / target_aspect)
        if chunk_h <= 0:
            raise InvalidRasterError(
                f"Raster width {width} yields an empty page height at aspect {target_aspect}."
            )
        return chunk_h

    def count(self, image: Image.Image, target_aspect: float) -> int:
        """Number of chunks ``slice`` will yield for ``image``."""
        chunk_h = self.chunk_height(image, target_aspect)
        if image.height <= chunk_h + self.tolerance_px:
            return 1
        return math.ceil(image.height / chunk_h)

    def slice(self, image: Image.Image, target_aspect: float) -> Iterator[Image.Image]:
        # Validate eagerly so bad input fails at the call site, not on first next().
        chunk_h = self.chunk_height(image, target_aspect)
        page_count = self.count(image, target_aspect)
        return self._iter_chunks(image, chunk_h, page_count)

    def _iter_chunks(
        self, image: Image.Image, chunk_h: int, page_count: int
    ) -> Iterator[Image.Image]:
        if page_count == 1:
            yield image
            return

        width, height = image.size
        mode = image.mode if image.mode in _WHITE else "RGB"
        source = image if image.mode == mode else image.convert(mode)
        for index in range(page_count):
            top = index * chunk_h
            bottom = min(height, top + chunk_h)
            canvas = Image.new(mode, (width, chunk_h), _WHITE[mode])
            canvas.paste(source.crop((0, top, width, bottom)), (0, 0))
            yield canvas


__all__ = ["LongRasterSlicer", "SLICE_TOLERANCE_PX"]
