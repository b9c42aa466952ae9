"""Filesystem-safe names for untrusted subsidy ids and attachment names."""

import re

PLACEHOLDER_NAME = "file"
MAX_NAME_BYTES = 180

_RESERVED_CHARS = re.compile(r'[\\/:*?"<>|]')
_CONTROL_CHARS = re.compile(r"[\x00-\x1f\x7f]")
_WHITESPACE = re.compile(r"\s+")


def sanitize_file_name(name: str) -> str:
    """
    Normalize an untrusted identifier into a single path segment.
    Separators, reserved and control characters become '_'; whitespace runs
    collapse to one space. Empty or dot-only results become the placeholder.
    """
    cleaned = _RESERVED_CHARS.sub("_", name or "")
    cleaned = _CONTROL_CHARS.sub("_", cleaned)
    cleaned = _WHITESPACE.sub(" ", cleaned).strip()
    if not cleaned or set(cleaned) == {"."}:
        return PLACEHOLDER_NAME
    return _truncate(cleaned, MAX_NAME_BYTES)


def _truncate(name: str, max_bytes: int) -> str:
    """Shorten to max_bytes of UTF-8, keeping a short extension intact."""
    if len(name.encode("utf-8")) <= max_bytes:
        return name
    stem, dot, ext = name.rpartition(".")
    suffix = f".{ext}" if dot and stem and len(ext) <= 10 else ""
    base = name[: -len(suffix)] if suffix else name
    budget = max_bytes - len(suffix.encode("utf-8"))
    encoded = base.encode("utf-8")[:budget]
    shortened = encoded.decode("utf-8", errors="ignore").rstrip()
    return (shortened or PLACEHOLDER_NAME) + suffix
