from __future__ import annotations

import asyncio
from collections.abc import Callable, Coroutine
from functools import wraps
from pathlib import Path
from typing import Any, ParamSpec, TypeVar

import typer  # type: ignore[import]

from pagestitch.raster.threshold import SCAN_THRESHOLD, TRANSPARENT_CONTRAST
from pagestitch.utils.log_utils import logger

from . import build, remove_background


app = typer.Typer(
    help="pagestitch command-line interface",
)


_P = ParamSpec("_P")
_T = TypeVar("_T")


def _synchronous(handler: Callable[_P, Coroutine[Any, Any, _T]]) -> Callable[_P, _T]:
    @wraps(handler)
    def wrapper(*args: _P.args, **kwargs: _P.kwargs) -> _T:
        try:
            return asyncio.run(handler(*args, **kwargs))
        except KeyboardInterrupt as err:
            logger.info("Interrupted by user")
            raise typer.Exit(code=130) from err

    return wrapper


@app.command("build")
@_synchronous
async def build_command(
    inputs: list[Path] = typer.Argument(
        ...,
        help="Images and .html files in page order. Directories expand alphabetically.",
        exists=True,
        readable=True,
    ),
    output: Path = typer.Option(
        ...,
        "--output",
        "-o",
        help="Destination PDF path ('.pdf' is appended when missing).",
        dir_okay=False,
        writable=True,
    ),
    page_numbers: bool = typer.Option(
        False,
        "--page-numbers",
        help="Print 'Page N' footers on every output page.",
    ),
    scan_mode: bool = typer.Option(
        False,
        "--scan-mode",
        help="Whiten paper backgrounds and darken ink on image pages.",
    ),
    paper: str | None = typer.Option(
        None,
        "--paper",
        help="Paper size (a4 or letter). Defaults to PAGESTITCH_PAPER_SIZE.",
    ),
    margin_mm: float | None = typer.Option(
        None,
        "--margin-mm",
        help="Page margin in millimetres. Defaults to PAGESTITCH_MARGIN_MM.",
    ),
    footer_style: str | None = typer.Option(
        None,
        "--footer-style",
        help="Footer label style: 'page' or 'page_of_total'.",
    ),
    render_scale: float | None = typer.Option(
        None,
        "--render-scale",
        help="Magnification used when rasterizing HTML pages.",
    ),
    dry_run: bool = typer.Option(
        False,
        "--dry-run",
        help="List the pages that would be assembled then exit.",
    ),
) -> int:
    options = build.BuildOptions(
        inputs=inputs,
        output=output,
        page_numbers=page_numbers,
        scan_mode=scan_mode,
        paper=paper,
        margin_mm=margin_mm,
        footer_style=footer_style,
        render_scale=render_scale,
        dry_run=dry_run,
    )
    result = await build.run(options)
    if result != 0:
        raise typer.Exit(code=result)
    return result


@app.command("remove-background")
def remove_background_command(
    image: Path = typer.Argument(
        ...,
        help="Image whose paper background should become transparent.",
        exists=True,
        file_okay=True,
        dir_okay=False,
        readable=True,
    ),
    output: Path | None = typer.Option(
        None,
        "--output",
        "-o",
        help="Output PNG path. Defaults to <input>_transparent.png.",
    ),
    threshold: int = typer.Option(
        SCAN_THRESHOLD,
        "--threshold",
        help="Luminance above which a pixel counts as paper.",
        show_default=True,
    ),
    contrast: float = typer.Option(
        TRANSPARENT_CONTRAST,
        "--contrast",
        help="Factor applied to ink pixels.",
        show_default=True,
    ),
) -> None:
    options = remove_background.RemoveBackgroundOptions(
        image=image,
        output=output,
        threshold=threshold,
        contrast=contrast,
    )
    result = remove_background.run(options)
    if result != 0:
        raise typer.Exit(code=result)


def main() -> None:
    app()


__all__ = ["app", "main"]


if __name__ == "__main__":
    main()
