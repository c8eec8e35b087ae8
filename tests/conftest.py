"""Shared fakes for the render surface and document writer."""

from __future__ import annotations

from collections.abc import Callable
from io import BytesIO
from pathlib import Path
from typing import Any

from PIL import Image
import pytest


class FakeRenderSurface:
    """Render surface that paints a blank page of a fixed content height."""

    def __init__(self, content_height: int = 1000, *, fail_with: Exception | None = None) -> None:
        self.content_height = content_height
        self.fail_with = fail_with
        self.attach_calls = 0
        self.detach_calls = 0
        self.painted: list[tuple[str, int, float]] = []

    async def attach(self) -> None:
        self.attach_calls += 1

    async def paint(self, document_html: str, width_px: int, dpi_scale: float) -> Image.Image:
        self.painted.append((document_html, width_px, dpi_scale))
        if self.fail_with is not None:
            raise self.fail_with
        size = (int(width_px * dpi_scale), int(self.content_height * dpi_scale))
        return Image.new("RGB", size, "white")

    async def detach(self) -> None:
        self.detach_calls += 1


class RecordingWriter:
    """Document writer that records every call instead of encoding."""

    def __init__(self) -> None:
        self.calls: list[tuple[str, tuple[Any, ...]]] = []
        self.finalized_as: Path | None = None

    def add_page(self) -> None:
        self.calls.append(("add_page", ()))

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
        self.calls.append(("draw_raster", (raster, x, y, width, height, encoded)))

    def draw_text(self, label: str, x: float, y: float, font_size_pt: float, gray: int) -> None:
        self.calls.append(("draw_text", (label, x, y, font_size_pt, gray)))

    def finalize(self, filename: str | Path) -> Path:
        self.calls.append(("finalize", (filename,)))
        self.finalized_as = Path(filename)
        return self.finalized_as

    def names(self) -> list[str]:
        return [name for name, _ in self.calls]


def png_bytes(size: tuple[int, int], color: Any = "white", mode: str = "RGB") -> bytes:
    buffer = BytesIO()
    Image.new(mode, size, color).save(buffer, format="PNG")
    return buffer.getvalue()


@pytest.fixture
def make_surface() -> Callable[..., FakeRenderSurface]:
    return FakeRenderSurface


@pytest.fixture
def recording_writer() -> RecordingWriter:
    return RecordingWriter()


@pytest.fixture
def make_png() -> Callable[..., bytes]:
    return png_bytes
