"""Async image loading helpers."""

from __future__ import annotations

from io import BytesIO
from pathlib import Path

import aiofiles
from PIL import Image

from pagestitch.errors import LoadError
from pagestitch.page import ImageRef


_DECODE_ERRORS = (OSError, ValueError, Image.DecompressionBombError)


async def read_image_bytes(ref: ImageRef) -> bytes:
    """Return the encoded bytes behind ``ref`` without decoding them."""
    if ref.data is not None:
        return ref.data
    path = Path(ref.path)  # type: ignore[arg-type]
    try:
        async with aiofiles.open(path, "rb") as file_obj:
            return await file_obj.read()
    except OSError as exc:
        raise LoadError(f"Cannot read image {path}: {exc}") from exc


def decode_image(data: bytes, *, name: str = "image") -> Image.Image:
    """Fully decode encoded image bytes into a Pillow image."""
    try:
        image = Image.open(BytesIO(data))
        image.load()
    except _DECODE_ERRORS as exc:
        raise LoadError(f"Cannot decode {name}: {exc}") from exc
    return image


def open_image_lazily(data: bytes, *, name: str = "image") -> Image.Image:
    """Parse only the image header; pixels are decoded on first access."""
    try:
        return Image.open(BytesIO(data))
    except _DECODE_ERRORS as exc:
        raise LoadError(f"Cannot identify {name}: {exc}") from exc


async def load_image_ref(ref: ImageRef) -> Image.Image:
    """Default image loader used by the document assembler."""
    image_bytes = await read_image_bytes(ref)
    return decode_image(image_bytes, name=ref.describe())


__all__ = [
    "decode_image",
    "load_image_ref",
    "open_image_lazily",
    "read_image_bytes",
]
