"""Per-format text extraction for stored attachments."""

import logging
from abc import ABC, abstractmethod
from datetime import date, datetime, time, timedelta
from decimal import Decimal
from io import BytesIO
from typing import Any, Optional

import openpyxl
from docx import Document
from docx.table import Table
from openpyxl.cell.rich_text import CellRichText
from pypdf import PdfReader

from .result import ConversionResult, normalize_text
from .tables import (
    Cell,
    HyperlinkCell,
    OpaqueCell,
    RichTextCell,
    ScalarCell,
    cell_to_string,
    normalize_cell,
    rows_to_markdown,
)

logger = logging.getLogger(__name__)

_SCALAR_TYPES = (str, int, float, bool, Decimal, datetime, date, time, timedelta)


class FormatConverter(ABC):
    """
    Converts the bytes of one file format to normalized text.
    convert() never raises: extraction errors and empty output become a base64 fallback.
    """

    label: str = ""
    extensions: frozenset[str] = frozenset()
    media_types: frozenset[str] = frozenset()

    def convert(self, data: bytes, *, heading_level: int = 2) -> ConversionResult:
        try:
            text = self.extract(data, heading_level=heading_level)
        except Exception as e:
            logger.warning("%s extraction failed: %s", self.label, e)
            return ConversionResult.fallback(data, f"Conversion failed: {e}")
        if not text:
            return ConversionResult.fallback(data, f"No extractable text found in {self.label} file")
        return ConversionResult.from_text(text)

    @abstractmethod
    def extract(self, data: bytes, *, heading_level: int = 2) -> str:
        """Return normalized text; may raise on malformed input."""


class TextConverter(FormatConverter):
    label = "text"
    extensions = frozenset({".txt"})
    media_types = frozenset({"text/plain"})

    def extract(self, data: bytes, *, heading_level: int = 2) -> str:
        return normalize_text(data.decode("utf-8", errors="replace"))


class PdfConverter(FormatConverter):
    label = "PDF"
    extensions = frozenset({".pdf"})
    media_types = frozenset({"application/pdf"})

    def extract(self, data: bytes, *, heading_level: int = 2) -> str:
        reader = PdfReader(BytesIO(data))
        chunks: list[str] = []
        for page in reader.pages:
            text = page.extract_text()
            if text:
                chunks.append(text)
        return normalize_text("\n\n".join(chunks))


class DocxConverter(FormatConverter):
    label = "DOCX"
    extensions = frozenset({".docx"})
    media_types = frozenset(
        {"application/vnd.openxmlformats-officedocument.wordprocessingml.document"}
    )

    def extract(self, data: bytes, *, heading_level: int = 2) -> str:
        document = Document(BytesIO(data))
        blocks: list[str] = []
        for item in document.iter_inner_content():
            if isinstance(item, Table):
                blocks.extend(_table_texts(item))
            elif item.text.strip():
                blocks.append(item.text)
        return normalize_text("\n\n".join(blocks))


class XlsxConverter(FormatConverter):
    """Each worksheet becomes a heading plus a pipe table."""

    label = "XLSX"
    extensions = frozenset({".xlsx"})
    media_types = frozenset(
        {"application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"}
    )

    def extract(self, data: bytes, *, heading_level: int = 2) -> str:
        marker = "#" * heading_level
        sections: list[str] = []
        for sheet_name, rows in read_workbook(data):
            grid = _trim_grid([[normalize_cell(c) for c in row] for row in rows])
            table = rows_to_markdown(grid)
            if table:
                sections.append(f"{marker} {sheet_name}\n\n{table}")
        return "\n\n".join(sections).strip()


def read_workbook(data: bytes) -> list[tuple[str, list[list[Cell]]]]:
    """Load a workbook and tag every cell; worksheets in workbook order."""
    workbook = openpyxl.load_workbook(BytesIO(data), data_only=True, rich_text=True)
    try:
        return [
            (sheet.title, [[_tag_cell(c) for c in row] for row in sheet.iter_rows()])
            for sheet in workbook.worksheets
        ]
    finally:
        workbook.close()


def _tag_cell(cell: Any) -> Cell:
    value = cell.value
    link = getattr(cell, "hyperlink", None)
    url: Optional[str] = None
    if link is not None:
        url = link.target or (f"#{link.location}" if link.location else None)
    if isinstance(value, CellRichText):
        runs = tuple(run if isinstance(run, str) else (run.text or "") for run in value)
        if url:
            return HyperlinkCell(label="".join(runs), url=url)
        return RichTextCell(runs=runs)
    if url:
        return HyperlinkCell(label=value, url=url)
    if value is None or isinstance(value, _SCALAR_TYPES):
        return ScalarCell(value)
    return OpaqueCell(value)


def _trim_grid(grid: list[list[Any]]) -> list[list[Any]]:
    """Drop fully empty rows and trailing fully empty columns."""
    rows = [row for row in grid if any(cell_to_string(v) for v in row)]
    if not rows:
        return []
    width = max(
        (i + 1 for row in rows for i, v in enumerate(row) if cell_to_string(v)),
        default=0,
    )
    return [row[:width] for row in rows]


def _table_texts(table: Table) -> list[str]:
    texts: list[str] = []
    for row in table.rows:
        previous = None
        for cell in row.cells:
            text = cell.text.strip()
            # merged cells repeat across the row
            if text and text != previous:
                texts.append(text)
            previous = text
    return texts


LEAF_CONVERTERS: tuple[FormatConverter, ...] = (
    TextConverter(),
    PdfConverter(),
    DocxConverter(),
    XlsxConverter(),
)


def converter_for_extension(ext: str) -> Optional[FormatConverter]:
    ext = ext.lower()
    for converter in LEAF_CONVERTERS:
        if ext in converter.extensions:
            return converter
    return None
