"""Top-level file conversion: format detection, dispatch, and fallback."""

import logging
import mimetypes
from pathlib import Path
from typing import Optional, Sequence

from .archive import UNSUPPORTED_WARNING, ZipConverter
from .extractor import LEAF_CONVERTERS, FormatConverter
from .result import ConversionResult

logger = logging.getLogger(__name__)


class ConversionEngine:
    """
    Converts a file on disk to normalized text. convert() always returns a
    ConversionResult and never raises.
    """

    def __init__(self, converters: Optional[Sequence[FormatConverter]] = None):
        if converters is None:
            converters = (*LEAF_CONVERTERS, ZipConverter())
        self._converters = tuple(converters)

    def detect(self, path: str | Path, mime_type: Optional[str] = None) -> Optional[FormatConverter]:
        """Pick a converter by extension, else by declared or guessed media type."""
        ext = Path(path).suffix.lower()
        for converter in self._converters:
            if ext in converter.extensions:
                return converter
        media_type = (mime_type or mimetypes.guess_type(str(path))[0] or "").split(";")[0].strip().lower()
        for converter in self._converters:
            if media_type in converter.media_types:
                return converter
        return None

    def convert(self, path: str | Path, mime_type: Optional[str] = None) -> ConversionResult:
        path = Path(path)
        try:
            data = path.read_bytes()
        except OSError as e:
            logger.warning("Could not read %s: %s", path, e)
            return ConversionResult.failed(f"Conversion failed: {e}")

        try:
            converter = self.detect(path, mime_type)
            if converter is None:
                return ConversionResult.fallback(data, UNSUPPORTED_WARNING)
            return converter.convert(data)
        except Exception as e:
            logger.exception("Unexpected conversion error for %s", path)
            return _fallback_from_disk(path, f"Conversion failed: {e}")


def _fallback_from_disk(path: Path, warning: str) -> ConversionResult:
    """Re-read the raw bytes for the fallback; warning only if that fails too."""
    try:
        return ConversionResult.fallback(path.read_bytes(), warning)
    except OSError:
        return ConversionResult.failed(warning)


_default_engine = ConversionEngine()


def convert_file_to_markdown(path: str | Path, mime_type: Optional[str] = None) -> ConversionResult:
    """Convert with the default set of converters."""
    return _default_engine.convert(path, mime_type)
