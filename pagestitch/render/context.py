"""Exclusive ownership of the off-screen render surface."""

from __future__ import annotations

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import Protocol

from PIL import Image

from pagestitch.errors import RenderSurfaceError
from pagestitch.utils.log_utils import logger


class RenderSurface(Protocol):
    """Off-screen layout engine able to paint an HTML document into pixels."""

    async def attach(self) -> None: ...

    async def paint(self, document_html: str, width_px: int, dpi_scale: float) -> Image.Image: ...

    async def detach(self) -> None: ...


class RenderContext:
    """Hands out a single render surface to one render at a time.

    The surface is attached when acquired and detached on every exit path,
    including failures inside the ``async with`` block.
    """

    def __init__(self, surface: RenderSurface) -> None:
        self._surface = surface
        self._in_use = False

    @property
    def in_use(self) -> bool:
        return self._in_use

    @asynccontextmanager
    async def acquire(self) -> AsyncIterator[RenderSurface]:
        if self._in_use:
            raise RenderSurfaceError("Render surface is already hosting another render.")
        self._in_use = True
        try:
            await self._surface.attach()
            yield self._surface
        finally:
            self._in_use = False
            await self._surface.detach()
            logger.debug("Render surface detached")


__all__ = ["RenderContext", "RenderSurface"]
