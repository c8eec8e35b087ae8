from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, replace
from pathlib import Path

from pagestitch.config import PageStitchSettings, get_settings
from pagestitch.document import PdfDocumentWriter, build_assembler
from pagestitch.errors import PageStitchError
from pagestitch.page import GenerateOptions, ImageRef, Page, PageGeometry, PageKind
from pagestitch.render import PlaywrightRenderSurface
from pagestitch.utils.log_utils import logger
from pagestitch.utils.progress import TqdmProgressReporter


SUPPORTED_IMAGE_EXTENSIONS = {
    ".png",
    ".jpg",
    ".jpeg",
    ".tif",
    ".tiff",
    ".bmp",
    ".gif",
    ".webp",
}
HTML_EXTENSIONS = {".html", ".htm"}


@dataclass(slots=True)
class BuildOptions:
    inputs: Sequence[Path]
    output: Path
    page_numbers: bool
    scan_mode: bool
    paper: str | None
    margin_mm: float | None
    footer_style: str | None
    render_scale: float | None
    dry_run: bool


def _expand_inputs(inputs: Sequence[Path]) -> list[Path]:
    expanded: list[Path] = []
    for path in inputs:
        if path.is_dir():
            expanded.extend(sorted(child for child in path.iterdir() if child.is_file()))
        elif path.is_file():
            expanded.append(path)
        else:
            logger.warning(f"Input {path} does not exist; ignoring.")
    return expanded


def collect_pages(inputs: Sequence[Path]) -> list[Page]:
    """Turn files into pages in the order given; directories expand alphabetically."""
    pages: list[Page] = []
    for path in _expand_inputs(inputs):
        ext = path.suffix.lower()
        page_id = f"page-{len(pages) + 1:03d}"
        if ext in SUPPORTED_IMAGE_EXTENSIONS:
            pages.append(Page.image(page_id, ImageRef.from_path(path)))
        elif ext in HTML_EXTENSIONS:
            html = path.read_text(encoding="utf-8")
            pages.append(Page.text(page_id, html, name=path.name))
        else:
            logger.warning(f"Skipping unsupported extension '{ext}' for file {path}")
    return pages


def _apply_overrides(settings: PageStitchSettings, options: BuildOptions) -> PageStitchSettings:
    if options.render_scale is None:
        return settings
    return replace(settings, render=replace(settings.render, dpi_scale=options.render_scale))


async def run(options: BuildOptions, settings: PageStitchSettings | None = None) -> int:
    pages = collect_pages(options.inputs)
    if not pages:
        logger.warning("No supported image or HTML inputs were provided.")
        return 1

    if options.dry_run:
        for page in pages:
            logger.info(f"DRY RUN: {page.id} {page.kind.value} {page.name or ''}")
        return 0

    settings = _apply_overrides(settings or get_settings(), options)
    needs_renderer = any(page.kind is PageKind.TEXT for page in pages)
    progress = TqdmProgressReporter("build")
    try:
        geometry = PageGeometry.from_paper(
            options.paper or settings.layout.paper_size,
            settings.layout.margin_mm if options.margin_mm is None else options.margin_mm,
        )
        generate_options = GenerateOptions(
            include_page_numbers=options.page_numbers,
            enable_scan_mode=options.scan_mode,
            footer_style=options.footer_style or settings.output.footer_style,  # type: ignore[arg-type]
        )
        # Stage constructors reject bad render, scan and slicing settings.
        assembler = build_assembler(
            options=generate_options,
            geometry=geometry,
            render_surface=PlaywrightRenderSurface() if needs_renderer else None,
            settings=settings,
            progress=progress,
        )
    except PageStitchError as exc:
        logger.error(str(exc))
        return 2

    writer = PdfDocumentWriter(geometry, jpeg_quality=settings.output.jpeg_quality)
    try:
        output_path = await assembler.write(pages, writer, options.output)
    except PageStitchError as exc:
        logger.error(f"Document generation failed: {exc}")
        return 1
    finally:
        writer.close()
        progress.close()

    logger.info(f"Wrote {len(pages)} input page(s) to {output_path}")
    return 0
