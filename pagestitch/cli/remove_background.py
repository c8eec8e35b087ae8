from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from pagestitch.errors import PageStitchError
from pagestitch.raster.threshold import remove_background
from pagestitch.utils.log_utils import logger


@dataclass(slots=True)
class RemoveBackgroundOptions:
    image: Path
    output: Path | None
    threshold: int
    contrast: float


def default_output_path(image: Path) -> Path:
    return image.with_name(f"{image.stem}_transparent.png")


def run(options: RemoveBackgroundOptions) -> int:
    output_path = options.output or default_output_path(options.image)
    try:
        result = remove_background(
            options.image.read_bytes(),
            threshold=options.threshold,
            contrast=options.contrast,
        )
    except PageStitchError as exc:
        logger.error(f"Background removal failed for {options.image}: {exc}")
        return 1

    # Transparency only survives in PNG.
    if output_path.suffix.lower() != ".png":
        output_path = output_path.with_suffix(".png")
    output_path.parent.mkdir(parents=True, exist_ok=True)
    result.save(output_path, format="PNG")
    logger.info(f"Saved transparent image to {output_path}")
    return 0
