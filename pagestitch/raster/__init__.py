"""Pixel-level stages of the page pipeline: cleaning, slicing and fitting."""

from .fitter import PageFitter
from .slicer import SLICE_TOLERANCE_PX, LongRasterSlicer
from .threshold import ThresholdProcessor, make_transparent, remove_background


__all__ = [
    "LongRasterSlicer",
    "PageFitter",
    "SLICE_TOLERANCE_PX",
    "ThresholdProcessor",
    "make_transparent",
    "remove_background",
]
