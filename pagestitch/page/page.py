"""Input page abstractions: scanned images and rich-text blocks."""

from __future__ import annotations

import base64
import binascii
from enum import Enum
from pathlib import Path
from typing import Annotated, Literal

from pydantic import BaseModel, ConfigDict, Field, model_validator

from pagestitch.errors import LoadError


class PageKind(str, Enum):
    IMAGE = "IMAGE"
    TEXT = "TEXT"


class ImageRef(BaseModel):
    """Reference to an encoded source image, held either in memory or on disk."""

    kind: Literal["image"] = "image"
    data: bytes | None = None
    path: Path | None = None
    name: str | None = None

    model_config = ConfigDict(frozen=True, extra="forbid")

    @model_validator(mode="after")
    def _require_single_source(self) -> ImageRef:
        if (self.data is None) == (self.path is None):
            raise ValueError("ImageRef needs exactly one of 'data' or 'path'.")
        return self

    @classmethod
    def from_path(cls, path: str | Path) -> ImageRef:
        resolved = Path(path)
        return cls(path=resolved, name=resolved.name)

    @classmethod
    def from_bytes(cls, data: bytes, name: str | None = None) -> ImageRef:
        return cls(data=data, name=name)

    @classmethod
    def from_data_url(cls, url: str, name: str | None = None) -> ImageRef:
        """Decode a base64 ``data:`` URL such as those produced by browsers."""
        header, sep, payload = url.partition(",")
        if not sep or not header.startswith("data:") or ";base64" not in header:
            raise LoadError(f"Not a base64 data URL: {url[:40]!r}")
        try:
            data = base64.b64decode(payload, validate=True)
        except (binascii.Error, ValueError) as exc:
            raise LoadError(f"Invalid base64 payload in data URL: {exc}") from exc
        return cls(data=data, name=name)

    def describe(self) -> str:
        if self.name:
            return self.name
        if self.path is not None:
            return str(self.path)
        return f"<{len(self.data or b'')} bytes>"


class HtmlBlock(BaseModel):
    """Rich-text content, usually produced by AI layout extraction."""

    kind: Literal["html"] = "html"
    html: str

    model_config = ConfigDict(frozen=True, extra="forbid")


PageContent = Annotated[ImageRef | HtmlBlock, Field(discriminator="kind")]


class Page(BaseModel):
    """A single input page of the document being assembled.

    ``parent_id`` records lineage (for example a TEXT page extracted from an
    IMAGE page) and carries no ownership semantics.
    """

    id: str
    content: PageContent
    parent_id: str | None = None
    name: str | None = None

    model_config = ConfigDict(frozen=True, extra="forbid")

    @property
    def kind(self) -> PageKind:
        if isinstance(self.content, HtmlBlock):
            return PageKind.TEXT
        return PageKind.IMAGE

    @classmethod
    def image(
        cls,
        page_id: str,
        ref: ImageRef,
        *,
        parent_id: str | None = None,
    ) -> Page:
        return cls(id=page_id, content=ref, parent_id=parent_id, name=ref.name)

    @classmethod
    def text(
        cls,
        page_id: str,
        html: str,
        *,
        parent_id: str | None = None,
        name: str | None = None,
    ) -> Page:
        return cls(id=page_id, content=HtmlBlock(html=html), parent_id=parent_id, name=name)


__all__ = ["PageKind", "ImageRef", "HtmlBlock", "PageContent", "Page"]
