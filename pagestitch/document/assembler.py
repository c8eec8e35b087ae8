"""Sequential page assembly: load or render, clean, slice, fit, emit."""

from __future__ import annotations

from collections.abc import Awaitable, Callable, Sequence
from dataclasses import replace
from pathlib import Path

from PIL import Image

from pagestitch.config import PageStitchSettings, get_settings
from pagestitch.errors import LoadError, PageStitchError, RenderSurfaceError, ValidationError
from pagestitch.page import GenerateOptions, ImageRef, Page, PageGeometry, PageKind
from pagestitch.raster import LongRasterSlicer, PageFitter, ThresholdProcessor
from pagestitch.render import RenderContext, RenderSurface, RichContentRasterizer
from pagestitch.utils.image.io import load_image_ref, open_image_lazily, read_image_bytes
from pagestitch.utils.log_utils import logger
from pagestitch.utils.progress import ProgressReporter

from ._models import FOOTER_BOTTOM_OFFSET_MM, EmissionRecord, FooterOverlay
from .writer import DocumentWriter


ImageLoader = Callable[[ImageRef], Awaitable[Image.Image]]


def footer_label(page_number: int, total: int, style: str = "page") -> str:
    """Footer text for emitted page ``page_number``.

    ``total`` is the number of emitted pages, not input pages: a long text
    block sliced into three pages counts three times, so "Page 5 of 5" stays
    true on the last physical page.
    """
    if style == "page_of_total":
        return f"Page {page_number} of {total}"
    return f"Page {page_number}"


def emit_records(records: Sequence[EmissionRecord], writer: DocumentWriter) -> None:
    """Replay finished records onto ``writer``; the first record reuses the initial page."""
    for index, record in enumerate(records):
        if index > 0:
            writer.add_page()
        placement = record.placement
        writer.draw_raster(
            record.raster,
            placement.x,
            placement.y,
            placement.width,
            placement.height,
            encoded=record.encoded,
        )
        if record.footer is not None:
            footer = record.footer
            writer.draw_text(
                footer.label,
                footer.x_center_mm,
                footer.y_mm,
                footer.font_size_pt,
                footer.gray,
            )


class DocumentAssembler:
    """Turns an ordered list of pages into ordered emission records.

    Pages are processed one at a time, start to finish, so output order always
    equals input order refined by slice order. Any failure other than the scan
    cleaning fallback aborts the whole run and names the offending page.
    """

    def __init__(
        self,
        geometry: PageGeometry | None = None,
        options: GenerateOptions | None = None,
        *,
        image_loader: ImageLoader = load_image_ref,
        rasterizer: RichContentRasterizer | None = None,
        threshold: ThresholdProcessor | None = None,
        slicer: LongRasterSlicer | None = None,
        fitter: PageFitter | None = None,
        progress: ProgressReporter | None = None,
    ) -> None:
        self._geometry = geometry or PageGeometry()
        self._options = options or GenerateOptions()
        self._image_loader = image_loader
        self._rasterizer = rasterizer
        self._threshold = threshold or ThresholdProcessor()
        self._slicer = slicer or LongRasterSlicer()
        self._fitter = fitter or PageFitter()
        self._progress = progress
        self._pages_emitted = 0

    @property
    def pages_emitted(self) -> int:
        return self._pages_emitted

    @property
    def geometry(self) -> PageGeometry:
        return self._geometry

    async def assemble(self, pages: Sequence[Page]) -> list[EmissionRecord]:
        if not pages:
            raise ValidationError("No pages to assemble.")

        self._pages_emitted = 0
        records: list[EmissionRecord] = []
        if self._progress:
            self._progress.start(len(pages))
        try:
            for page in pages:
                try:
                    page_records = await self._process_page(page)
                except PageStitchError as exc:
                    if exc.page_id is None:
                        exc.page_id = page.id
                    logger.error(f"Aborting document: {type(exc).__name__} {exc}")
                    raise
                records.extend(page_records)
                logger.debug(f"Page {page.id} ({page.kind.value}) -> {len(page_records)} page(s)")
                if self._progress:
                    self._progress.increment()
        finally:
            if self._progress:
                self._progress.close()

        if self._options.include_page_numbers:
            records = self._attach_footers(records)
        logger.info(f"Assembled {len(records)} page(s) from {len(pages)} input page(s)")
        return records

    async def write(
        self,
        pages: Sequence[Page],
        writer: DocumentWriter,
        filename: str | Path,
    ) -> Path:
        # Nothing reaches the writer until every page has been processed.
        records = await self.assemble(pages)
        emit_records(records, writer)
        return writer.finalize(filename)

    async def _process_page(self, page: Page) -> list[EmissionRecord]:
        raster, encoded = await self._page_raster(page)
        chunks = self._slicer.slice(raster, self._geometry.writable_aspect)

        page_records: list[EmissionRecord] = []
        try:
            for chunk_index, chunk in enumerate(chunks):
                placement = self._fitter.fit(chunk, self._geometry)
                self._pages_emitted += 1
                page_records.append(
                    EmissionRecord(
                        raster=chunk,
                        placement=placement,
                        page_number=self._pages_emitted,
                        source_page_id=page.id,
                        chunk_index=chunk_index,
                        encoded=encoded if chunk is raster else None,
                    )
                )
        except OSError as exc:
            # Lazily opened fallback images only decode pixels when sliced.
            raise LoadError(f"Cannot decode image pixels: {exc}") from exc
        return page_records

    async def _page_raster(self, page: Page) -> tuple[Image.Image, bytes | None]:
        if page.kind is PageKind.TEXT:
            if self._rasterizer is None:
                raise RenderSurfaceError("No render surface is configured for rich-text pages.")
            return await self._rasterizer.rasterize(page.content.html), None  # type: ignore[union-attr]

        ref: ImageRef = page.content  # type: ignore[assignment]
        if not self._options.enable_scan_mode:
            return await self._load(ref), None

        try:
            loaded = await self._load(ref)
        except LoadError as exc:
            logger.warning(
                f"Scan cleaning skipped for page {page.id}, using the original image: {exc}"
            )
            data = await read_image_bytes(ref)
            return open_image_lazily(data, name=ref.describe()), data
        return self._threshold.clean(loaded), None

    async def _load(self, ref: ImageRef) -> Image.Image:
        try:
            return await self._image_loader(ref)
        except PageStitchError:
            raise
        except (OSError, ValueError) as exc:
            raise LoadError(f"Cannot load {ref.describe()}: {exc}") from exc

    def _attach_footers(self, records: list[EmissionRecord]) -> list[EmissionRecord]:
        total = len(records)
        x_center = self._geometry.page_width_mm / 2
        y = self._geometry.page_height_mm - FOOTER_BOTTOM_OFFSET_MM
        return [
            replace(
                record,
                footer=FooterOverlay(
                    label=footer_label(record.page_number, total, self._options.footer_style),
                    x_center_mm=x_center,
                    y_mm=y,
                ),
            )
            for record in records
        ]


def build_assembler(
    *,
    options: GenerateOptions | None = None,
    geometry: PageGeometry | None = None,
    render_surface: RenderSurface | None = None,
    image_loader: ImageLoader | None = None,
    settings: PageStitchSettings | None = None,
    progress: ProgressReporter | None = None,
) -> DocumentAssembler:
    """Wire an assembler from settings, filling in the default stages."""
    settings = settings or get_settings()
    geometry = geometry or PageGeometry.from_paper(
        settings.layout.paper_size, settings.layout.margin_mm
    )
    options = options or GenerateOptions(footer_style=settings.output.footer_style)  # type: ignore[arg-type]
    rasterizer = None
    if render_surface is not None:
        rasterizer = RichContentRasterizer(
            RenderContext(render_surface),
            virtual_width_px=settings.render.width_px,
            dpi_scale=settings.render.dpi_scale,
        )
    return DocumentAssembler(
        geometry,
        options,
        image_loader=image_loader or load_image_ref,
        rasterizer=rasterizer,
        threshold=ThresholdProcessor(settings.scan.threshold, settings.scan.contrast),
        slicer=LongRasterSlicer(settings.layout.slice_tolerance_px),
        progress=progress,
    )


async def generate_document(
    pages: Sequence[Page],
    writer: DocumentWriter,
    filename: str | Path,
    *,
    options: GenerateOptions | None = None,
    geometry: PageGeometry | None = None,
    render_surface: RenderSurface | None = None,
    image_loader: ImageLoader | None = None,
    settings: PageStitchSettings | None = None,
    progress: ProgressReporter | None = None,
) -> Path:
    """Assemble ``pages`` and write them through ``writer``, finalizing once."""
    assembler = build_assembler(
        options=options,
        geometry=geometry,
        render_surface=render_surface,
        image_loader=image_loader,
        settings=settings,
        progress=progress,
    )
    return await assembler.write(pages, writer, filename)


__all__ = [
    "DocumentAssembler",
    "ImageLoader",
    "build_assembler",
    "emit_records",
    "footer_label",
    "generate_document",
]
