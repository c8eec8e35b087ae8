"""Public interfaces for rich-content rasterization."""

from ._constants import DEFAULT_DPI_SCALE, VIRTUAL_PAGE_WIDTH_PX, page_padding
from .context import RenderContext, RenderSurface
from .playwright_surface import PlaywrightRenderSurface
from .rasterizer import RichContentRasterizer, RichContentStyle


__all__ = [
    "DEFAULT_DPI_SCALE",
    "PlaywrightRenderSurface",
    "RenderContext",
    "RenderSurface",
    "RichContentRasterizer",
    "RichContentStyle",
    "VIRTUAL_PAGE_WIDTH_PX",
    "page_padding",
]
