"""Centralised environment configuration for pagestitch.

This module ensures `.env` loading happens in one place and exposes a
typed snapshot of the paper layout, scan cleaning and rendering knobs.
Downstream modules call `get_settings()` instead of touching `os.environ`
directly, making it easier to validate values and override behaviour in
tests.
"""

from __future__ import annotations

from dataclasses import dataclass
from functools import lru_cache
import os
from pathlib import Path

from dotenv import load_dotenv


_DEFAULT_ENV_PATH = Path(__file__).resolve().parents[2] / ".env"

DEFAULT_PAPER_SIZE = "a4"
DEFAULT_MARGIN_MM = 10.0
DEFAULT_SCAN_THRESHOLD = 180
DEFAULT_SCAN_CONTRAST = 0.75
DEFAULT_RENDER_WIDTH_PX = 794
DEFAULT_RENDER_DPI_SCALE = 2.0
DEFAULT_SLICE_TOLERANCE_PX = 10
DEFAULT_JPEG_QUALITY = 85
DEFAULT_FOOTER_STYLE = "page"


def _coerce_int(value: str | None, default: int) -> int:
    if value is None or value == "":
        return default
    try:
        return int(value)
    except ValueError:
        return default


def _coerce_float(value: str | None, default: float) -> float:
    if value is None or value == "":
        return default
    try:
        return float(value)
    except ValueError:
        return default


@dataclass(frozen=True)
class LayoutSettings:
    paper_size: str
    margin_mm: float
    slice_tolerance_px: int


@dataclass(frozen=True)
class ScanSettings:
    threshold: int
    contrast: float


@dataclass(frozen=True)
class RenderSettings:
    width_px: int
    dpi_scale: float


@dataclass(frozen=True)
class OutputSettings:
    jpeg_quality: int
    footer_style: str


@dataclass(frozen=True)
class PageStitchSettings:
    """Top-level snapshot of configuration values."""

    env_file: Path
    layout: LayoutSettings
    scan: ScanSettings
    render: RenderSettings
    output: OutputSettings


def _resolve_env_path(env_file: os.PathLike[str] | str | None) -> Path:
    if env_file is None:
        return _DEFAULT_ENV_PATH
    return Path(env_file).resolve()


@lru_cache(maxsize=4)
def _load_settings(env_path: Path) -> PageStitchSettings:
    # Existing environment variables take precedence over `.env` defaults.
    load_dotenv(dotenv_path=env_path, override=False)

    layout = LayoutSettings(
        paper_size=(os.getenv("PAGESTITCH_PAPER_SIZE") or DEFAULT_PAPER_SIZE).lower(),
        margin_mm=_coerce_float(os.getenv("PAGESTITCH_MARGIN_MM"), DEFAULT_MARGIN_MM),
        slice_tolerance_px=_coerce_int(
            os.getenv("PAGESTITCH_SLICE_TOLERANCE_PX"), DEFAULT_SLICE_TOLERANCE_PX
        ),
    )
    scan = ScanSettings(
        threshold=_coerce_int(os.getenv("PAGESTITCH_SCAN_THRESHOLD"), DEFAULT_SCAN_THRESHOLD),
        contrast=_coerce_float(os.getenv("PAGESTITCH_SCAN_CONTRAST"), DEFAULT_SCAN_CONTRAST),
    )
    render = RenderSettings(
        width_px=_coerce_int(os.getenv("PAGESTITCH_RENDER_WIDTH_PX"), DEFAULT_RENDER_WIDTH_PX),
        dpi_scale=_coerce_float(
            os.getenv("PAGESTITCH_RENDER_DPI_SCALE"), DEFAULT_RENDER_DPI_SCALE
        ),
    )
    output = OutputSettings(
        jpeg_quality=_coerce_int(os.getenv("PAGESTITCH_JPEG_QUALITY"), DEFAULT_JPEG_QUALITY),
        footer_style=os.getenv("PAGESTITCH_FOOTER_STYLE") or DEFAULT_FOOTER_STYLE,
    )

    return PageStitchSettings(
        env_file=env_path,
        layout=layout,
        scan=scan,
        render=render,
        output=output,
    )


def get_settings(
    env_file: os.PathLike[str] | str | None = None,
    *,
    reload: bool = False,
) -> PageStitchSettings:
    """Return the cached settings snapshot.

    Args:
        env_file: Optional explicit path to a `.env` file. When omitted the repo
            root `.env` file is used.
        reload: When True the cached snapshot is cleared before loading.
    """
    env_path = _resolve_env_path(env_file)
    if reload:
        _load_settings.cache_clear()
    return _load_settings(env_path)
