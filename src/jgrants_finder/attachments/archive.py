"""Zip archive expansion into one combined document."""

import logging
import zipfile
from io import BytesIO
from pathlib import PurePosixPath

from .extractor import FormatConverter, XlsxConverter, converter_for_extension
from .result import ConversionResult

logger = logging.getLogger(__name__)

UNSUPPORTED_WARNING = "Unsupported file type for markdown conversion"


class ZipConverter(FormatConverter):
    """
    Converts first-level archive entries with the leaf converters only.
    Nested archives and unsupported extensions are skipped.
    """

    label = "ZIP"
    extensions = frozenset({".zip"})
    media_types = frozenset({"application/zip", "application/x-zip-compressed"})

    def convert(self, data: bytes, *, heading_level: int = 2) -> ConversionResult:
        try:
            sections, skipped = expand_archive(data, heading_level=heading_level)
        except (zipfile.BadZipFile, zipfile.LargeZipFile, OSError, ValueError) as e:
            logger.warning("Archive could not be read: %s", e)
            return ConversionResult.fallback(data, f"Conversion failed: {e}")

        if not sections:
            return ConversionResult.fallback(data, UNSUPPORTED_WARNING)
        warning = f"Skipped archive entries: {'; '.join(skipped)}" if skipped else None
        return ConversionResult.from_text("\n\n".join(sections), warning=warning)

    def extract(self, data: bytes, *, heading_level: int = 2) -> str:
        sections, _ = expand_archive(data, heading_level=heading_level)
        return "\n\n".join(sections)


def expand_archive(data: bytes, *, heading_level: int = 2) -> tuple[list[str], list[str]]:
    """
    Return (sections, skipped). Each supported entry becomes a section headed by
    its in-archive name; spreadsheet sheets nest one level deeper.
    skipped describes supported entries that failed or had no text.
    """
    marker = "#" * heading_level
    sections: list[str] = []
    skipped: list[str] = []
    with zipfile.ZipFile(BytesIO(data)) as archive:
        for entry in archive.infolist():
            if entry.is_dir():
                continue
            converter = converter_for_extension(PurePosixPath(entry.filename).suffix)
            if converter is None:
                continue

            nested_level = heading_level + 1 if isinstance(converter, XlsxConverter) else heading_level
            try:
                text = converter.extract(archive.read(entry), heading_level=nested_level)
            except Exception as e:
                logger.warning("Archive entry %s failed: %s", entry.filename, e)
                skipped.append(f"{entry.filename} ({e})")
                continue
            if not text:
                skipped.append(f"{entry.filename} (no extractable text)")
                continue
            sections.append(f"{marker} {entry.filename}\n\n{text}")
    return sections, skipped
