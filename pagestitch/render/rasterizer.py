"""Rasterize rich-text HTML blocks at a fixed virtual page width."""

from __future__ import annotations

from dataclasses import dataclass
from string import Template

from PIL import Image

from pagestitch.errors import RenderSurfaceError, ValidationError
from pagestitch.utils.log_utils import logger

from ._constants import (
    DEFAULT_DPI_SCALE,
    DEFAULT_FONT_FAMILY,
    DEFAULT_FONT_SIZE_PX,
    DEFAULT_LINE_HEIGHT,
    DEFAULT_TEXT_COLOR,
    FORCED_TEXT_COLOR,
    VIRTUAL_PAGE_WIDTH_PX,
    page_padding,
)
from .context import RenderContext


_DOCUMENT_TEMPLATE = Template(
    """<!DOCTYPE html>
<html>
<head>
<meta charset="utf-8">
<style>
html, body { margin: 0; padding: 0; background: #ffffff; }
.pagestitch-page {
  box-sizing: border-box;
  width: ${width}px;
  padding: ${top}px ${right}px ${bottom}px ${left}px;
  font-family: ${font_family};
  font-size: ${font_size}px;
  line-height: ${line_height};
  color: ${color};
  overflow-wrap: break-word;
}
.pagestitch-page img, .pagestitch-page table { max-width: 100%; }
.pagestitch-page table { border-collapse: collapse; }
.pagestitch-page td, .pagestitch-page th { border: 1px solid #cbd5e1; padding: 4px 8px; }
${extra_rules}
</style>
</head>
<body><div class="pagestitch-page">${content}</div></body>
</html>
"""
)


@dataclass(frozen=True)
class RichContentStyle:
    """Typography applied to rendered blocks.

    ``force_black`` mirrors the editor's extraction option that renders every
    descendant in solid black regardless of inline colors.
    """

    font_family: str = DEFAULT_FONT_FAMILY
    font_size_px: int = DEFAULT_FONT_SIZE_PX
    line_height: float = DEFAULT_LINE_HEIGHT
    text_color: str = DEFAULT_TEXT_COLOR
    force_black: bool = True


def _flatten_onto_white(image: Image.Image) -> Image.Image:
    if image.mode == "RGB":
        return image
    if image.mode in ("RGBA", "LA") or "transparency" in image.info:
        rgba = image.convert("RGBA")
        flattened = Image.new("RGB", rgba.size, (255, 255, 255))
        flattened.paste(rgba, mask=rgba.getchannel("A"))
        return flattened
    return image.convert("RGB")


class RichContentRasterizer:
    """Renders HTML into a raster whose height grows with the content.

    Output width is ``virtual_width_px * dpi_scale`` pixels. Tall results are
    expected and are split into pages downstream.
    """

    def __init__(
        self,
        context: RenderContext,
        *,
        virtual_width_px: int = VIRTUAL_PAGE_WIDTH_PX,
        dpi_scale: float = DEFAULT_DPI_SCALE,
        style: RichContentStyle | None = None,
    ) -> None:
        if virtual_width_px <= 0:
            raise ValidationError(f"virtual_width_px must be > 0, got {virtual_width_px}.")
        if dpi_scale <= 0:
            raise ValidationError(f"dpi_scale must be > 0, got {dpi_scale}.")
        self._context = context
        self.virtual_width_px = virtual_width_px
        self.dpi_scale = dpi_scale
        self.style = style or RichContentStyle()

    def build_document(self, html: str) -> str:
        top, right, bottom, left = page_padding(self.virtual_width_px)
        color = FORCED_TEXT_COLOR if self.style.force_black else self.style.text_color
        extra_rules = (
            f".pagestitch-page * {{ color: {FORCED_TEXT_COLOR} !important; }}"
            if self.style.force_black
            else ""
        )
        return _DOCUMENT_TEMPLATE.substitute(
            width=self.virtual_width_px,
            top=top,
            right=right,
            bottom=bottom,
            left=left,
            font_family=self.style.font_family,
            font_size=self.style.font_size_px,
            line_height=self.style.line_height,
            color=color,
            extra_rules=extra_rules,
            content=html,
        )

    async def rasterize(self, html: str) -> Image.Image:
        document_html = self.build_document(html)
        try:
            async with self._context.acquire() as surface:
                captured = await surface.paint(document_html, self.virtual_width_px, self.dpi_scale)
        except RenderSurfaceError:
            raise
        except Exception as exc:
            raise RenderSurfaceError(f"Rendering rich content failed: {exc}") from exc

        if captured is None or captured.width == 0 or captured.height == 0:
            raise RenderSurfaceError("Render surface returned an empty capture.")

        logger.debug(
            f"Rasterized rich content to {captured.width}x{captured.height} px "
            f"(virtual width {self.virtual_width_px}, scale {self.dpi_scale})"
        )
        return _flatten_onto_white(captured)


__all__ = ["RichContentRasterizer", "RichContentStyle"]
