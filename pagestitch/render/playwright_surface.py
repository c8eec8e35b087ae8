"""Headless Chromium render surface backed by Playwright.

Install with the ``render`` extra and run ``playwright install chromium`` once.
"""

from __future__ import annotations

from io import BytesIO
from typing import Any

from PIL import Image

from pagestitch.errors import RenderSurfaceError
from pagestitch.utils.log_utils import logger


class PlaywrightRenderSurface:
    """Paints HTML documents with a headless browser and captures full-page PNGs."""

    def __init__(self, *, browser: str = "chromium", wait_until: str = "networkidle") -> None:
        self._browser_name = browser
        self._wait_until = wait_until
        self._playwright: Any = None
        self._browser: Any = None

    async def attach(self) -> None:
        from playwright.async_api import async_playwright

        self._playwright = await async_playwright().start()
        browser_type = getattr(self._playwright, self._browser_name, None)
        if browser_type is None:
            raise RenderSurfaceError(f"Unknown Playwright browser '{self._browser_name}'.")
        self._browser = await browser_type.launch(headless=True)
        logger.debug(f"Attached Playwright {self._browser_name} render surface")

    async def paint(self, document_html: str, width_px: int, dpi_scale: float) -> Image.Image:
        if self._browser is None:
            raise RenderSurfaceError("Render surface is not attached.")
        # A one-pixel viewport lets the full-page capture follow the content height.
        context = await self._browser.new_context(
            viewport={"width": width_px, "height": 1},
            device_scale_factor=dpi_scale,
        )
        try:
            page = await context.new_page()
            await page.set_content(document_html, wait_until=self._wait_until)
            png_bytes = await page.screenshot(full_page=True, type="png")
        finally:
            await context.close()

        image = Image.open(BytesIO(png_bytes))
        image.load()
        return image

    async def detach(self) -> None:
        if self._browser is not None:
            await self._browser.close()
            self._browser = None
        if self._playwright is not None:
            await self._playwright.stop()
            self._playwright = None


__all__ = ["PlaywrightRenderSurface"]
