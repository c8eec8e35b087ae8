from __future__ import annotations

from dataclasses import replace
from pathlib import Path

import fitz
from PIL import Image
import pytest
from typer.testing import CliRunner

from pagestitch.cli import build
from pagestitch.cli.main import app
from pagestitch.cli.remove_background import default_output_path
from pagestitch.config.settings import (
    LayoutSettings,
    OutputSettings,
    PageStitchSettings,
    RenderSettings,
    ScanSettings,
)
from pagestitch.document import PdfDocumentWriter
from pagestitch.page import PageKind


runner = CliRunner()


def _settings(tmp_path: Path) -> PageStitchSettings:
    return PageStitchSettings(
        env_file=tmp_path / ".env",
        layout=LayoutSettings(paper_size="a4", margin_mm=10.0, slice_tolerance_px=10),
        scan=ScanSettings(threshold=180, contrast=0.75),
        render=RenderSettings(width_px=794, dpi_scale=1.0),
        output=OutputSettings(jpeg_quality=85, footer_style="page"),
    )


def _options(inputs: list[Path], output: Path, **overrides) -> build.BuildOptions:
    values = dict(
        inputs=inputs,
        output=output,
        page_numbers=False,
        scan_mode=False,
        paper=None,
        margin_mm=None,
        footer_style=None,
        render_scale=None,
        dry_run=False,
    )
    values.update(overrides)
    return build.BuildOptions(**values)


def _write_image(path: Path, size: tuple[int, int] = (60, 80), color=(40, 40, 40)) -> Path:
    Image.new("RGB", size, color).save(path)
    return path


def test_collect_pages_keeps_argument_order_and_expands_directories(tmp_path: Path) -> None:
    folder = tmp_path / "scans"
    folder.mkdir()
    _write_image(folder / "b.png")
    _write_image(folder / "a.jpg")
    (folder / "notes.txt").write_text("ignored", encoding="utf-8")
    html = tmp_path / "summary.html"
    html.write_text("<p>Summary</p>", encoding="utf-8")

    pages = build.collect_pages([html, folder])

    assert [page.id for page in pages] == ["page-001", "page-002", "page-003"]
    assert [page.kind for page in pages] == [PageKind.TEXT, PageKind.IMAGE, PageKind.IMAGE]
    assert pages[0].content.html == "<p>Summary</p>"
    assert [page.name for page in pages[1:]] == ["a.jpg", "b.png"]


@pytest.mark.asyncio
async def test_run_reports_missing_inputs(tmp_path: Path) -> None:
    (tmp_path / "readme.md").write_text("x", encoding="utf-8")

    result = await build.run(_options([tmp_path / "readme.md"], tmp_path / "out.pdf"))

    assert result == 1


@pytest.mark.asyncio
async def test_dry_run_writes_nothing(tmp_path: Path) -> None:
    image = _write_image(tmp_path / "scan.png")

    result = await build.run(_options([image], tmp_path / "out.pdf", dry_run=True))

    assert result == 0
    assert not (tmp_path / "out.pdf").exists()


@pytest.mark.asyncio
async def test_image_only_build_skips_browser(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    def _no_browser() -> None:
        raise AssertionError("image-only builds must not start a browser")

    monkeypatch.setattr(build, "PlaywrightRenderSurface", _no_browser)
    images = [_write_image(tmp_path / f"{i}.png") for i in range(2)]

    result = await build.run(
        _options(images, tmp_path / "book", page_numbers=True, scan_mode=True),
        settings=_settings(tmp_path),
    )

    assert result == 0
    with fitz.open(str(tmp_path / "book.pdf")) as doc:
        assert doc.page_count == 2
        assert "Page 2" in doc[1].get_text()


@pytest.mark.asyncio
async def test_html_inputs_use_the_render_surface(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch, make_surface
) -> None:
    surface = make_surface(content_height=400)
    monkeypatch.setattr(build, "PlaywrightRenderSurface", lambda: surface)
    html = tmp_path / "page.html"
    html.write_text("<h1>Title</h1>", encoding="utf-8")

    result = await build.run(
        _options([html], tmp_path / "text.pdf", render_scale=1.5),
        settings=_settings(tmp_path),
    )

    assert result == 0
    assert surface.painted[0][1:] == (794, 1.5)
    assert (tmp_path / "text.pdf").exists()


@pytest.mark.asyncio
async def test_invalid_margin_is_rejected_before_processing(tmp_path: Path) -> None:
    image = _write_image(tmp_path / "scan.png")

    result = await build.run(
        _options([image], tmp_path / "out.pdf", margin_mm=150.0),
        settings=_settings(tmp_path),
    )

    assert result == 2
    assert not (tmp_path / "out.pdf").exists()


@pytest.mark.asyncio
async def test_corrupt_image_fails_the_build_and_closes_the_writer(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    writers: list[PdfDocumentWriter] = []

    def _tracked_writer(*args, **kwargs) -> PdfDocumentWriter:
        writer = PdfDocumentWriter(*args, **kwargs)
        writers.append(writer)
        return writer

    monkeypatch.setattr(build, "PdfDocumentWriter", _tracked_writer)
    broken = tmp_path / "broken.png"
    broken.write_bytes(b"\x89PNG but not really")

    result = await build.run(_options([broken], tmp_path / "out.pdf"), settings=_settings(tmp_path))

    assert result == 1
    assert not (tmp_path / "out.pdf").exists()
    assert len(writers) == 1
    assert writers[0].closed


@pytest.mark.asyncio
async def test_negative_slice_tolerance_is_rejected_before_processing(tmp_path: Path) -> None:
    image = _write_image(tmp_path / "scan.png")
    settings = _settings(tmp_path)
    settings = replace(settings, layout=replace(settings.layout, slice_tolerance_px=-5))

    result = await build.run(_options([image], tmp_path / "out.pdf"), settings=settings)

    assert result == 2
    assert not (tmp_path / "out.pdf").exists()


def test_build_command_rejects_zero_render_scale(tmp_path: Path) -> None:
    html = tmp_path / "a.html"
    html.write_text("<p>x</p>", encoding="utf-8")

    result = runner.invoke(
        app, ["build", str(html), "-o", str(tmp_path / "o.pdf"), "--render-scale", "0"]
    )

    assert result.exit_code == 2
    assert result.exception is None or isinstance(result.exception, SystemExit)
    assert not (tmp_path / "o.pdf").exists()


def test_build_command_dry_run(tmp_path: Path) -> None:
    image = _write_image(tmp_path / "scan.png")

    result = runner.invoke(app, ["build", str(image), "--output", str(tmp_path / "x.pdf"), "--dry-run"])

    assert result.exit_code == 0


def test_remove_background_command_writes_transparent_png(tmp_path: Path) -> None:
    image = _write_image(tmp_path / "photo.jpg", size=(8, 8), color=(240, 240, 240))

    result = runner.invoke(app, ["remove-background", str(image)])

    assert result.exit_code == 0
    output = default_output_path(image)
    assert output == tmp_path / "photo_transparent.png"
    with Image.open(output) as produced:
        assert produced.mode == "RGBA"
        assert produced.getpixel((0, 0))[3] == 0


def test_remove_background_command_rejects_garbage(tmp_path: Path) -> None:
    junk = tmp_path / "junk.png"
    junk.write_bytes(b"nope")

    result = runner.invoke(app, ["remove-background", str(junk), "-o", str(tmp_path / "out.png")])

    assert result.exit_code == 1
    assert not (tmp_path / "out.png").exists()
