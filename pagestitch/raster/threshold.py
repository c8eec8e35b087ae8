"""Luminance thresholding for scanned pages.

Two variants share the same background/ink classification:

* ``ThresholdProcessor.clean`` forces paper pixels to pure white and darkens
  ink. This is what document export uses in scan mode.
* ``remove_background`` makes paper pixels transparent instead, for pasting
  signatures or handwriting onto other content.
"""

from __future__ import annotations

import numpy as np
from PIL import Image

from pagestitch.errors import ValidationError
from pagestitch.utils.image.io import decode_image


SCAN_THRESHOLD = 180
CLEAN_CONTRAST = 0.75
TRANSPARENT_CONTRAST = 0.80
CLEANED_INFO_KEY = "pagestitch.scan_cleaned"

_LUMA_WEIGHTS = np.array([0.299, 0.587, 0.114], dtype=np.float64)


def luminance(rgb: np.ndarray) -> np.ndarray:
    """Perceived brightness of an ``(H, W, 3)`` array, in the 0-255 range."""
    return rgb[..., :3].astype(np.float64) @ _LUMA_WEIGHTS


def _darken(rgb: np.ndarray, factor: float) -> np.ndarray:
    return np.clip(np.rint(rgb * factor), 0, 255)


def _as_rgb_or_rgba(image: Image.Image) -> Image.Image:
    if image.mode in ("RGB", "RGBA"):
        return image
    if image.mode in ("LA", "PA") or "transparency" in image.info:
        return image.convert("RGBA")
    return image.convert("RGB")


def _validate(threshold: int, contrast: float) -> None:
    if not 0 <= threshold <= 255:
        raise ValidationError(f"Threshold must be within [0, 255], got {threshold}.")
    if not 0.0 <= contrast <= 1.0:
        raise ValidationError(f"Contrast factor must be within [0, 1], got {contrast}.")


class ThresholdProcessor:
    """Cleans photographed or scanned pages for print.

    Pixels brighter than ``threshold`` are treated as paper and forced to white
    (alpha is left alone); everything else is ink and is multiplied by
    ``contrast``. The map is purely per pixel.
    """

    def __init__(self, threshold: int = SCAN_THRESHOLD, contrast: float = CLEAN_CONTRAST) -> None:
        _validate(threshold, contrast)
        self.threshold = threshold
        self.contrast = contrast

    def clean(self, image: Image.Image) -> Image.Image:
        # Darkening compounds on every pass, so cleaned output is marked and
        # passed through unchanged the next time around.
        if image.info.get(CLEANED_INFO_KEY):
            return image.copy()

        source = _as_rgb_or_rgba(image)
        pixels = np.asarray(source, dtype=np.float32)
        background = luminance(pixels) > self.threshold

        cleaned = pixels.copy()
        cleaned[background, :3] = 255.0
        cleaned[~background, :3] = _darken(pixels[~background, :3], self.contrast)

        result = Image.fromarray(cleaned.astype(np.uint8))
        if not background.all():
            result.info[CLEANED_INFO_KEY] = True
        return result


def make_transparent(
    image: Image.Image,
    threshold: int = SCAN_THRESHOLD,
    contrast: float = TRANSPARENT_CONTRAST,
) -> Image.Image:
    """Return an RGBA copy where paper is transparent and ink is opaque."""
    _validate(threshold, contrast)
    pixels = np.asarray(image.convert("RGBA"), dtype=np.float32)
    background = luminance(pixels) > threshold

    result = pixels.copy()
    result[background, 3] = 0.0
    result[~background, :3] = _darken(pixels[~background, :3], contrast)
    result[~background, 3] = 255.0
    return Image.fromarray(result.astype(np.uint8))


def remove_background(
    image_bytes: bytes,
    threshold: int = SCAN_THRESHOLD,
    contrast: float = TRANSPARENT_CONTRAST,
) -> Image.Image:
    """Decode ``image_bytes`` and strip its paper background.

    Unlike scan cleaning there is no fallback: undecodable input raises
    ``LoadError``.
    """
    image = decode_image(image_bytes, name="background removal input")
    return make_transparent(image, threshold=threshold, contrast=contrast)


__all__ = [
    "CLEANED_INFO_KEY",
    "CLEAN_CONTRAST",
    "SCAN_THRESHOLD",
    "TRANSPARENT_CONTRAST",
    "ThresholdProcessor",
    "luminance",
    "make_transparent",
    "remove_background",
]
