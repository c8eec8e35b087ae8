"""Shared constants for rich-content rasterization."""

from __future__ import annotations

import math


# The editor lays text out in a 595 px wide column with 80 px padding (64 px
# at the bottom); rendered pages keep those proportions at A4 width.
EDITOR_WIDTH_PX = 595
EDITOR_PADDING_PX = 80
EDITOR_PADDING_BOTTOM_PX = 64

VIRTUAL_PAGE_WIDTH_PX = 794
DEFAULT_DPI_SCALE = 2.0

DEFAULT_FONT_FAMILY = "Inter, 'Helvetica Neue', Arial, sans-serif"
DEFAULT_FONT_SIZE_PX = 16
DEFAULT_LINE_HEIGHT = 1.6
DEFAULT_TEXT_COLOR = "#1e293b"
FORCED_TEXT_COLOR = "#000000"


def page_padding(width_px: int) -> tuple[int, int, int, int]:
    """Return (top, right, bottom, left) padding for a virtual page of ``width_px``."""
    scale = width_px / EDITOR_WIDTH_PX
    side = math.floor(EDITOR_PADDING_PX * scale)
    bottom = math.floor(EDITOR_PADDING_BOTTOM_PX * scale)
    return side, side, bottom, side


__all__ = [
    "DEFAULT_DPI_SCALE",
    "DEFAULT_FONT_FAMILY",
    "DEFAULT_FONT_SIZE_PX",
    "DEFAULT_LINE_HEIGHT",
    "DEFAULT_TEXT_COLOR",
    "EDITOR_PADDING_BOTTOM_PX",
    "EDITOR_PADDING_PX",
    "EDITOR_WIDTH_PX",
    "FORCED_TEXT_COLOR",
    "VIRTUAL_PAGE_WIDTH_PX",
    "page_padding",
]
