"""Local storage for downloaded subsidy attachments."""

from jgrants_finder.store.attachment_store import (
    AttachmentError,
    AttachmentStore,
    FileRecord,
    InvalidAttachmentData,
    RegistryIndex,
    SizeLimitExceeded,
    StorageIOFailure,
)
from jgrants_finder.store.naming import sanitize_file_name

__all__ = [
    "AttachmentError",
    "AttachmentStore",
    "FileRecord",
    "InvalidAttachmentData",
    "RegistryIndex",
    "SizeLimitExceeded",
    "StorageIOFailure",
    "sanitize_file_name",
]
