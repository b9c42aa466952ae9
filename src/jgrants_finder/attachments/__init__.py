"""Attachment conversion: per-format extraction, archive expansion, and fallback."""

from .archive import ZipConverter, expand_archive
from .converter import ConversionEngine, convert_file_to_markdown
from .extractor import (
    DocxConverter,
    FormatConverter,
    PdfConverter,
    TextConverter,
    XlsxConverter,
)
from .result import ConversionResult
from .tables import normalize_cell, rows_to_markdown

__all__ = [
    "ConversionEngine",
    "ConversionResult",
    "DocxConverter",
    "FormatConverter",
    "PdfConverter",
    "TextConverter",
    "XlsxConverter",
    "ZipConverter",
    "convert_file_to_markdown",
    "expand_archive",
    "normalize_cell",
    "rows_to_markdown",
]
