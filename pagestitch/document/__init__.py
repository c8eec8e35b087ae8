"""Document assembly and writer interfaces."""

from ._models import EmissionRecord, FooterOverlay
from .assembler import (
    DocumentAssembler,
    ImageLoader,
    build_assembler,
    emit_records,
    footer_label,
    generate_document,
)
from .writer import DocumentWriter, PdfDocumentWriter, encode_raster


__all__ = [
    "DocumentAssembler",
    "DocumentWriter",
    "EmissionRecord",
    "FooterOverlay",
    "ImageLoader",
    "PdfDocumentWriter",
    "build_assembler",
    "emit_records",
    "encode_raster",
    "footer_label",
    "generate_document",
]
