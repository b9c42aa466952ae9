"""Outcome of converting one file to normalized text."""

import base64
from typing import Literal, Optional

from pydantic import BaseModel


class ConversionResult(BaseModel):
    """
    Normalized text, a base64 fallback of the raw bytes, or neither (read failed).
    When text extraction succeeds the fallback is omitted.
    """

    markdown: Optional[str] = None
    base64: Optional[str] = None
    warning: Optional[str] = None

    @classmethod
    def from_text(cls, text: str, warning: Optional[str] = None) -> "ConversionResult":
        return cls(markdown=text, warning=warning)

    @classmethod
    def fallback(cls, data: bytes, warning: str) -> "ConversionResult":
        return cls(base64=base64.b64encode(data).decode("ascii"), warning=warning)

    @classmethod
    def failed(cls, warning: str) -> "ConversionResult":
        return cls(warning=warning)

    @property
    def status(self) -> Literal["text", "fallback", "failed"]:
        if self.markdown is not None:
            return "text"
        if self.base64 is not None:
            return "fallback"
        return "failed"


def normalize_text(text: str) -> str:
    """Drop a leading BOM, CRLF to LF, then trim."""
    return text.removeprefix("\ufeff").replace("\r\n", "\n").strip()
