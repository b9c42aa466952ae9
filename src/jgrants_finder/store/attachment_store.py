"""Attachment store: downloaded files on disk plus a JSON index of their metadata."""

import base64
import binascii
import json
import logging
import mimetypes
import os
import threading
import uuid
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional

from pydantic import BaseModel, Field, ValidationError

from .naming import sanitize_file_name

logger = logging.getLogger(__name__)

INDEX_FILE_NAME = "index.json"
INDEX_VERSION = 1

# Not present in every platform's mimetypes table.
_OFFICE_MIME_TYPES = {
    ".docx": "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
    ".xlsx": "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
    ".pptx": "application/vnd.openxmlformats-officedocument.presentationml.presentation",
    ".doc": "application/msword",
    ".xls": "application/vnd.ms-excel",
}


class AttachmentError(Exception):
    """Base class for attachment storage errors."""


class SizeLimitExceeded(AttachmentError):
    """Decoded attachment is larger than the store's ceiling."""

    def __init__(self, size: int, limit: int):
        super().__init__(f"Attachment exceeds limit: {size} bytes (max {limit})")
        self.size = size
        self.limit = limit


class StorageIOFailure(AttachmentError):
    """Directory creation, file write, or index write failed."""


class InvalidAttachmentData(AttachmentError, ValueError):
    """Attachment payload is not valid base64."""


class FileRecord(BaseModel):
    """One stored attachment."""

    file_id: str
    subsidy_id: str
    category: Optional[str] = None
    name: str
    path: str
    size: int
    mime: Optional[str] = None
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))


class RegistryIndex(BaseModel):
    """Durable snapshot of every record known to the store."""

    version: int = INDEX_VERSION
    records: list[FileRecord] = Field(default_factory=list)


class AttachmentStore:
    """
    Registry of attachments stored under base_dir/<subsidy>/<file_id>-<name>.
    The in-memory index is rewritten in full to base_dir/index.json after every insert.
    """

    def __init__(self, base_dir: str | Path, max_bytes: int):
        self._base_dir = Path(base_dir).expanduser().resolve()
        self._max_bytes = max_bytes
        self._index_path = self._base_dir / INDEX_FILE_NAME
        self._records: dict[str, FileRecord] = {}
        self._lock = threading.Lock()

    @property
    def base_dir(self) -> Path:
        return self._base_dir

    @property
    def index_path(self) -> Path:
        return self._index_path

    @property
    def max_bytes(self) -> int:
        return self._max_bytes

    def __len__(self) -> int:
        with self._lock:
            return len(self._records)

    def records(self) -> list[FileRecord]:
        """Return all records in insertion order."""
        with self._lock:
            return list(self._records.values())

    def load_from_disk(self) -> None:
        """
        Read the index. A missing index starts empty; an unparseable one is
        moved aside to index.invalid-<timestamp>.json and the store starts empty.
        Other OSErrors propagate.
        """
        self._base_dir.mkdir(parents=True, exist_ok=True)
        try:
            raw = self._index_path.read_bytes()
        except FileNotFoundError:
            logger.debug("No index at %s; starting empty", self._index_path)
            self._records = {}
            return

        try:
            index = self._parse_index(raw)
        except (UnicodeDecodeError, json.JSONDecodeError, ValidationError) as e:
            quarantined = self._quarantine_index()
            logger.warning(
                "Index %s is corrupt (%s); moved to %s and starting empty",
                self._index_path,
                e.__class__.__name__,
                quarantined,
            )
            self._records = {}
            return

        self._records = {record.file_id: record for record in index.records}
        logger.debug("Loaded %d records from %s", len(self._records), self._index_path)

    def save_to_disk(self) -> None:
        """Overwrite the index with the complete current set of records."""
        self._base_dir.mkdir(parents=True, exist_ok=True)
        index = RegistryIndex(records=list(self._records.values()))
        payload = json.dumps(index.model_dump(mode="json"), indent=2, ensure_ascii=False)
        tmp_path = self._index_path.with_name(f".{INDEX_FILE_NAME}.{uuid.uuid4().hex}.tmp")
        try:
            tmp_path.write_text(payload, encoding="utf-8")
            os.replace(tmp_path, self._index_path)
        finally:
            tmp_path.unlink(missing_ok=True)

    def get(self, file_id: str) -> Optional[FileRecord]:
        """Get record by file_id, or None if unknown."""
        return self._records.get(file_id)

    def add_attachment(
        self,
        subsidy_id: str,
        category: Optional[str],
        name: str,
        data_base64: str,
    ) -> FileRecord:
        """
        Decode and store one attachment, then persist the index.
        Raises SizeLimitExceeded before touching disk, StorageIOFailure on write errors.
        """
        content = _decode_base64(data_base64)
        size = len(content)
        if size > self._max_bytes:
            raise SizeLimitExceeded(size, self._max_bytes)

        safe_subsidy = sanitize_file_name(subsidy_id or "unknown")
        safe_name = sanitize_file_name(name or "attachment")
        subsidy_dir = self._base_dir / safe_subsidy
        file_id = str(uuid.uuid4())
        file_path = subsidy_dir / f"{file_id}-{safe_name}"

        try:
            subsidy_dir.mkdir(parents=True, exist_ok=True)
            file_path.write_bytes(content)
        except OSError as e:
            raise StorageIOFailure(f"Failed to write attachment {file_path}: {e}") from e

        record = FileRecord(
            file_id=file_id,
            subsidy_id=subsidy_id,
            category=category,
            name=safe_name,
            path=str(file_path),
            size=size,
            mime=guess_mime_type(safe_name),
        )

        with self._lock:
            self._records[file_id] = record
            try:
                self.save_to_disk()
            except OSError as e:
                del self._records[file_id]
                raise StorageIOFailure(f"Failed to write index {self._index_path}: {e}") from e

        logger.info("Stored attachment %s (%d bytes) at %s", file_id, size, file_path)
        return record

    def _parse_index(self, raw: bytes) -> RegistryIndex:
        data = json.loads(raw.decode("utf-8"))
        if isinstance(data, list):
            data = {"version": INDEX_VERSION, "records": data}
        return RegistryIndex.model_validate(data)

    def _quarantine_index(self) -> Path:
        """Rename the bad index aside; never delete it."""
        stamp = datetime.now(timezone.utc).strftime("%Y%m%dT%H%M%S%fZ")
        target = self._index_path.with_name(f"index.invalid-{stamp}.json")
        self._index_path.rename(target)
        return target


def guess_mime_type(name: str) -> Optional[str]:
    """Best-effort media type from a file name's extension."""
    suffix = Path(name).suffix.lower()
    if suffix in _OFFICE_MIME_TYPES:
        return _OFFICE_MIME_TYPES[suffix]
    mime_type, _ = mimetypes.guess_type(name)
    return mime_type


def _decode_base64(data: str) -> bytes:
    """Decode base64, tolerating whitespace and missing padding."""
    compact = "".join((data or "").split())
    compact += "=" * (-len(compact) % 4)
    try:
        return base64.b64decode(compact)
    except (binascii.Error, ValueError) as e:
        raise InvalidAttachmentData(f"Attachment data is not valid base64: {e}") from e
