"""Runtime settings: storage location, attachment ceiling, and API endpoint."""

import os
from pathlib import Path
from typing import Mapping, Optional

import yaml
from pydantic import BaseModel, Field

DEFAULT_API_BASE_URL = "https://api.jgrants-portal.go.jp/exp/v1/public"
DEFAULT_FILES_DIR = "jgrants_files"
DEFAULT_MAX_ATTACHMENT_BYTES = 25 * 1024 * 1024
FALLBACK_FILES_DIR = Path.home() / ".jgrants-mcp" / "files"


class Settings(BaseModel):
    """Configuration consumed by the store, client, and CLI."""

    api_base_url: str = DEFAULT_API_BASE_URL
    files_dir: Path = Field(default_factory=lambda: Path(DEFAULT_FILES_DIR).resolve())
    max_attachment_bytes: int = Field(default=DEFAULT_MAX_ATTACHMENT_BYTES, gt=0)
    log_level: str = "WARNING"

    @classmethod
    def load(
        cls,
        path: Optional[str | Path] = None,
        environ: Optional[Mapping[str, str]] = None,
    ) -> "Settings":
        """
        Load settings from an optional YAML file, then apply environment overrides.
        Environment: API_BASE_URL, JGRANTS_FILES_DIR, MAX_ATTACHMENT_BYTES, JGRANTS_LOG_LEVEL.
        """
        env = os.environ if environ is None else environ
        data: dict = {}
        if path is not None:
            data = yaml.safe_load(Path(path).read_text(encoding="utf-8")) or {}
            if not isinstance(data, dict):
                raise ValueError(f"Settings file must contain a mapping: {path}")

        if env.get("API_BASE_URL"):
            data["api_base_url"] = env["API_BASE_URL"]
        if env.get("JGRANTS_FILES_DIR"):
            data["files_dir"] = env["JGRANTS_FILES_DIR"]
        if env.get("JGRANTS_LOG_LEVEL"):
            data["log_level"] = env["JGRANTS_LOG_LEVEL"]

        max_bytes = _parse_positive_int(env.get("MAX_ATTACHMENT_BYTES"))
        if max_bytes is not None:
            data["max_attachment_bytes"] = max_bytes

        settings = cls.model_validate(data)
        return settings.model_copy(update={"files_dir": settings.files_dir.expanduser().resolve()})


def _parse_positive_int(value: Optional[str]) -> Optional[int]:
    """Parse an env integer; blank or malformed values are ignored."""
    if not value or not value.strip():
        return None
    try:
        parsed = int(value.strip())
    except ValueError:
        return None
    return parsed if parsed > 0 else None
