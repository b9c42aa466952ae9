"""Tool operations exposed to a calling agent: search, detail with attachment storage, file content."""

import base64
import errno
import logging
from pathlib import Path
from typing import Any, Literal, Optional

from jgrants_finder import __version__
from jgrants_finder.attachments import ConversionEngine, convert_file_to_markdown
from jgrants_finder.config import FALLBACK_FILES_DIR, Settings
from jgrants_finder.connectors.jgrants import JGrantsClient
from jgrants_finder.models.subsidy import SearchParams
from jgrants_finder.store import AttachmentError, AttachmentStore

logger = logging.getLogger(__name__)

_PERMISSION_ERRNOS = {errno.EACCES, errno.EPERM, errno.EROFS, errno.ENOTDIR}


class FileNotFound(LookupError):
    """No stored attachment has the requested file_id."""


def ping() -> dict[str, str]:
    """Health check."""
    return {"status": "ok", "version": __version__}


def open_store(settings: Settings, fallback_dir: Path = FALLBACK_FILES_DIR) -> AttachmentStore:
    """
    Build and load the attachment store. If the configured directory is not
    writable, fall back to a directory under the user's home.
    """
    store = AttachmentStore(settings.files_dir, settings.max_attachment_bytes)
    try:
        store.load_from_disk()
        return store
    except OSError as e:
        if e.errno not in _PERMISSION_ERRNOS:
            raise
        logger.warning(
            "Files directory is not writable: %s (%s). Falling back to %s.",
            settings.files_dir,
            e,
            fallback_dir,
        )
    fallback = AttachmentStore(fallback_dir, settings.max_attachment_bytes)
    fallback.load_from_disk()
    return fallback


def search_subsidies(client: JGrantsClient, params: Optional[SearchParams] = None) -> dict[str, Any]:
    return client.search(params)


def get_subsidy_detail(
    client: JGrantsClient,
    store: AttachmentStore,
    subsidy_id: str,
    *,
    include_file_data: bool = False,
) -> dict[str, Any]:
    """
    Fetch a subsidy and store each attachment. Attachments in the result are
    replaced by stored-file summaries; failures become file_warnings.
    """
    response = client.fetch_detail(subsidy_id)
    payload = response.model_dump(mode="json", exclude_unset=True)
    detail = response.result
    if detail is None or detail.attachments is None:
        return payload

    saved: list[dict[str, Any]] = []
    warnings: list[str] = []
    for attachment in detail.attachments:
        try:
            record = store.add_attachment(
                subsidy_id,
                attachment.category,
                attachment.name,
                attachment.data,
            )
        except AttachmentError as e:
            logger.warning("Attachment %s skipped: %s", attachment.name, e)
            warnings.append(f"Attachment {attachment.name} skipped: {e}")
            continue

        summary: dict[str, Any] = {
            "file_id": record.file_id,
            "name": record.name,
            "category": record.category,
            "size": record.size,
            "mime": record.mime,
        }
        if include_file_data:
            summary["data"] = attachment.data
        saved.append(summary)

    payload["result"]["attachments"] = saved
    if warnings:
        payload["file_warnings"] = warnings
    return payload


def get_file_content(
    store: AttachmentStore,
    file_id: str,
    format: Literal["markdown", "base64"] = "markdown",
    *,
    engine: Optional[ConversionEngine] = None,
) -> dict[str, Any]:
    """Stored attachment as normalized text (with fallback) or raw base64."""
    record = store.get(file_id)
    if record is None:
        raise FileNotFound(f"file_id not found: {file_id}")

    output: dict[str, Any] = {"file_id": file_id, "name": record.name, "mime": record.mime}
    if format == "base64":
        output["base64"] = base64.b64encode(Path(record.path).read_bytes()).decode("ascii")
        return output

    if engine is not None:
        result = engine.convert(record.path, record.mime)
    else:
        result = convert_file_to_markdown(record.path, record.mime)
    output.update(result.model_dump())
    return output
