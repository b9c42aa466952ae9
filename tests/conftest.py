"""Pytest fixtures for jgrants-finder tests."""

import base64
import zipfile
from io import BytesIO
from pathlib import Path

import pytest
from docx import Document
from openpyxl import Workbook

from jgrants_finder.store import AttachmentStore


def b64(data: bytes) -> str:
    """Base64-encode bytes as the listing service does."""
    return base64.b64encode(data).decode("ascii")


def build_docx(paragraphs: list[str], table: list[list[str]] | None = None) -> bytes:
    """DOCX bytes with the given paragraphs and an optional table after them."""
    document = Document()
    for text in paragraphs:
        document.add_paragraph(text)
    if table:
        t = document.add_table(rows=len(table), cols=len(table[0]))
        for r, row in enumerate(table):
            for c, value in enumerate(row):
                t.cell(r, c).text = value
    out = BytesIO()
    document.save(out)
    return out.getvalue()


def build_xlsx(sheets: dict[str, list[list[object]]]) -> bytes:
    """XLSX bytes with one worksheet per entry, in insertion order."""
    workbook = Workbook()
    workbook.remove(workbook.active)
    for title, rows in sheets.items():
        sheet = workbook.create_sheet(title)
        for row in rows:
            sheet.append(row)
    out = BytesIO()
    workbook.save(out)
    return out.getvalue()


def build_zip(entries: dict[str, bytes]) -> bytes:
    """Zip bytes; names ending in '/' become directory entries."""
    out = BytesIO()
    with zipfile.ZipFile(out, "w") as archive:
        for name, data in entries.items():
            archive.writestr(name, data)
    return out.getvalue()


@pytest.fixture
def files_dir(tmp_path: Path) -> Path:
    """Base directory for an isolated attachment store."""
    return tmp_path / "files"


@pytest.fixture
def store(files_dir: Path) -> AttachmentStore:
    """Loaded AttachmentStore with a 1 MiB ceiling."""
    s = AttachmentStore(files_dir, 1024 * 1024)
    s.load_from_disk()
    return s
