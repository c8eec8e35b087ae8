from __future__ import annotations

from collections.abc import Iterator
import math

import numpy as np
from PIL import Image
import pytest

from pagestitch.errors import InvalidRasterError, ValidationError
from pagestitch.raster.slicer import LongRasterSlicer


def _row_coded(width: int, height: int) -> Image.Image:
    """Raster whose red/green channels encode the source row index."""
    rows = np.arange(height, dtype=np.int64)
    arr = np.zeros((height, width, 3), dtype=np.uint8)
    arr[:, :, 0] = (rows % 256)[:, None]
    arr[:, :, 1] = (rows // 256)[:, None]
    arr[:, :, 2] = 7
    return Image.fromarray(arr)


def _decode_rows(chunk: Image.Image) -> np.ndarray:
    arr = np.asarray(chunk.convert("RGB")).astype(np.int64)
    return arr[:, 0, 1] * 256 + arr[:, 0, 0]


def test_long_text_block_is_cut_into_three_pages() -> None:
    source = _row_coded(794, 2800)

    chunks = list(LongRasterSlicer().slice(source, 0.724))

    assert len(chunks) == 3
    assert all(chunk.size == (794, 1096) for chunk in chunks)
    last = np.asarray(chunks[-1])
    assert (last[608:] == 255).all()
    assert (last[:608, :, 2] == 7).all()
    assert _decode_rows(chunks[-1])[:608].tolist() == list(range(2192, 2800))


def test_chunks_cover_every_source_row_once_in_order() -> None:
    width, height = 120, 1000
    aspect = 0.5
    chunk_h = math.floor(width / aspect)
    slicer = LongRasterSlicer()

    chunks = list(slicer.slice(_row_coded(width, height), aspect))

    assert len(chunks) == math.ceil(height / chunk_h)
    covered: list[int] = []
    for chunk in chunks:
        arr = np.asarray(chunk)
        content_rows = int((arr[:, 0, 2] == 7).sum())
        covered.extend(_decode_rows(chunk)[:content_rows].tolist())
    assert covered == list(range(height))


def test_raster_within_tolerance_is_returned_unsliced() -> None:
    source = Image.new("RGB", (100, 210), "white")
    # floor(100 / 0.5) = 200, plus 10 px tolerance.
    result = list(LongRasterSlicer().slice(source, 0.5))

    assert len(result) == 1
    assert result[0] is source


def test_one_pixel_past_tolerance_produces_two_pages() -> None:
    source = Image.new("RGB", (100, 211), "white")

    result = list(LongRasterSlicer().slice(source, 0.5))

    assert len(result) == 2
    assert all(chunk.size == (100, 200) for chunk in result)


def test_short_raster_is_not_padded() -> None:
    source = Image.new("RGB", (300, 100), "white")

    assert list(LongRasterSlicer().slice(source, 0.7)) == [source]


def test_extremely_narrow_raster_still_slices() -> None:
    source = _row_coded(10, 5000)
    slicer = LongRasterSlicer()

    chunks = list(slicer.slice(source, 0.724))

    assert len(chunks) == math.ceil(5000 / 13) == slicer.count(source, 0.724)
    assert all(chunk.size == (10, 13) for chunk in chunks)


def test_slice_is_lazy() -> None:
    result = LongRasterSlicer().slice(Image.new("RGB", (50, 500), "white"), 1.0)

    assert isinstance(result, Iterator)
    assert next(result).size == (50, 50)


def test_rgba_padding_is_opaque_white() -> None:
    source = Image.new("RGBA", (10, 25), (0, 0, 0, 0))

    chunks = list(LongRasterSlicer(tolerance_px=0).slice(source, 1.0))

    assert len(chunks) == 3
    assert chunks[-1].getpixel((0, 9)) == (255, 255, 255, 255)
    assert chunks[-1].getpixel((0, 0)) == (0, 0, 0, 0)


def test_custom_tolerance() -> None:
    source = Image.new("RGB", (100, 230), "white")

    assert LongRasterSlicer(tolerance_px=30).count(source, 0.5) == 1
    assert LongRasterSlicer(tolerance_px=0).count(source, 0.5) == 2


@pytest.mark.parametrize("size", [(0, 10), (10, 0), (0, 0)])
def test_empty_raster_is_rejected(size: tuple[int, int]) -> None:
    with pytest.raises(InvalidRasterError):
        LongRasterSlicer().slice(Image.new("RGB", size), 0.7)


def test_non_positive_aspect_is_rejected() -> None:
    with pytest.raises(InvalidRasterError):
        LongRasterSlicer().slice(Image.new("RGB", (10, 10)), 0.0)


def test_width_too_small_for_aspect_is_rejected() -> None:
    with pytest.raises(InvalidRasterError):
        LongRasterSlicer().slice(Image.new("RGB", (1, 100)), 5.0)


def test_negative_tolerance_is_rejected() -> None:
    with pytest.raises(ValidationError):
        LongRasterSlicer(tolerance_px=-5)
