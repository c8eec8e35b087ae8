"""Physical page geometry, placement results and generation options."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Literal

from pagestitch.errors import ValidationError


DEFAULT_MARGIN_MM = 10.0

FooterStyle = Literal["page", "page_of_total"]
FOOTER_STYLES: tuple[str, ...] = ("page", "page_of_total")


class PaperSize(Enum):
    """Supported paper presets as (width_mm, height_mm)."""

    A4 = (210.0, 297.0)
    LETTER = (215.9, 279.4)

    @classmethod
    def from_name(cls, name: str) -> PaperSize:
        try:
            return cls[name.strip().upper()]
        except KeyError as exc:
            choices = ", ".join(member.name.lower() for member in cls)
            raise ValidationError(f"Unknown paper size '{name}'. Choices: {choices}.") from exc


@dataclass(frozen=True)
class PageGeometry:
    """Paper size and margin policy, all in millimetres."""

    margin_mm: float = DEFAULT_MARGIN_MM
    page_width_mm: float = PaperSize.A4.value[0]
    page_height_mm: float = PaperSize.A4.value[1]

    def __post_init__(self) -> None:
        if self.page_width_mm <= 0 or self.page_height_mm <= 0:
            raise ValidationError(
                f"Page dimensions must be positive, got {self.page_width_mm}x{self.page_height_mm} mm."
            )
        if self.margin_mm < 0:
            raise ValidationError(f"Margin must not be negative, got {self.margin_mm} mm.")
        if 2 * self.margin_mm >= min(self.page_width_mm, self.page_height_mm):
            raise ValidationError(
                f"Margin {self.margin_mm} mm leaves no writable area on a "
                f"{self.page_width_mm}x{self.page_height_mm} mm page."
            )

    @classmethod
    def from_paper(
        cls, paper: PaperSize | str, margin_mm: float = DEFAULT_MARGIN_MM
    ) -> PageGeometry:
        if isinstance(paper, str):
            paper = PaperSize.from_name(paper)
        width, height = paper.value
        return cls(margin_mm=margin_mm, page_width_mm=width, page_height_mm=height)

    @property
    def writable_width(self) -> float:
        return self.page_width_mm - 2 * self.margin_mm

    @property
    def writable_height(self) -> float:
        return self.page_height_mm - 2 * self.margin_mm

    @property
    def writable_aspect(self) -> float:
        return self.writable_width / self.writable_height


@dataclass(frozen=True)
class PlacementResult:
    """Where a raster lands on the page, in millimetres from the top-left corner."""

    x: float
    y: float
    width: float
    height: float


@dataclass(frozen=True)
class GenerateOptions:
    include_page_numbers: bool = False
    enable_scan_mode: bool = False
    footer_style: FooterStyle = "page"

    def __post_init__(self) -> None:
        if self.footer_style not in FOOTER_STYLES:
            raise ValidationError(
                f"Unknown footer style '{self.footer_style}'. Choices: {', '.join(FOOTER_STYLES)}."
            )


__all__ = [
    "DEFAULT_MARGIN_MM",
    "FOOTER_STYLES",
    "FooterStyle",
    "GenerateOptions",
    "PageGeometry",
    "PaperSize",
    "PlacementResult",
]
