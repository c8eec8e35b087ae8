"""Fit-to-page placement of rasters inside the writable area."""

from __future__ import annotations

from PIL import Image

from pagestitch.errors import InvalidRasterError
from pagestitch.page import PageGeometry, PlacementResult


class PageFitter:
    """Scales a raster to the largest box that fits the margins, then centers it."""

    def fit(
        self,
        raster: Image.Image | tuple[int, int],
        geometry: PageGeometry,
    ) -> PlacementResult:
        width_px, height_px = raster if isinstance(raster, tuple) else raster.size
        if width_px <= 0 or height_px <= 0:
            raise InvalidRasterError(f"Cannot place a {width_px}x{height_px} raster on a page.")

        max_w = geometry.writable_width
        max_h = geometry.writable_height
        ratio = width_px / height_px

        # Fill the dominant dimension first, then correct if the other overflows.
        if ratio > 1:
            width = max_w
            height = max_w / ratio
            if height > max_h:
                height = max_h
                width = max_h * ratio
        else:
            height = max_h
            width = max_h * ratio
            if width > max_w:
                width = max_w
                height = max_w / ratio

        return PlacementResult(
            x=geometry.margin_mm + (max_w - width) / 2,
            y=geometry.margin_mm + (max_h - height) / 2,
            width=width,
            height=height,
        )


__all__ = ["PageFitter"]
