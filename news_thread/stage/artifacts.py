"""
Staging of the fetched document as a remote artifact.

The document is written to a uniquely named temp file, uploaded with an
explicit content type, and the local copy removed. The remote artifact is
owned by one run and released through `staged_artifact` on every exit path.
"""

from __future__ import annotations

from contextlib import contextmanager
from datetime import datetime, timezone
import logging
import os
from pathlib import Path
import tempfile
from typing import Iterator
import warnings

from ..config import StageConfig
from ..errors import CleanupWarning, StagingError
from ..llm.providers.base import GenerativeClient
from ..logging_utils import log_event
from ..types import RemoteArtifact

logger = logging.getLogger(__name__)


class ArtifactStager:
    """Uploads documents to the extraction service and deletes them afterwards."""

    def __init__(self, client: GenerativeClient, cfg: StageConfig):
        self.client = client
        self.cfg = cfg

    def stage(self, document_text: str, display_name: str) -> RemoteArtifact:
        """Write, upload and locally clean up one document.

        Raises:
            StagingError: If the local write or the upload fails
        """
        try:
            fd, raw_path = tempfile.mkstemp(prefix="news-thread-", suffix=".html", dir=self.cfg.temp_dir)
        except OSError as exc:
            raise StagingError(f"Failed to create temporary file: {exc}") from exc
        temp_path = Path(raw_path)
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(document_text)
        except OSError as exc:
            _remove_quietly(temp_path)
            raise StagingError(f"Failed to write temporary file {temp_path}: {exc}") from exc
        log_event(logger, f"HTML saved temporarily to {temp_path}", event="stage_written", path=str(temp_path))

        try:
            artifact = self.client.upload_file(temp_path, self.cfg.mime_type, display_name)
        except Exception as exc:  # noqa: BLE001
            log_event(
                logger,
                f"Error during upload of {display_name}",
                level=logging.ERROR,
                event="stage_upload_failed",
                error=f"{type(exc).__name__}: {exc}",
            )
            _remove_quietly(temp_path)
            raise StagingError(f"Failed to upload {display_name}: {exc}") from exc

        log_event(
            logger,
            f"File uploaded successfully. Name: {artifact.name}, URI: {artifact.uri}",
            event="stage_uploaded",
            artifact=artifact.name,
            uri=artifact.uri,
        )
        _remove_quietly(temp_path)
        return artifact

    def release(self, artifact: RemoteArtifact) -> bool:
        """Delete the remote artifact. Failures are logged, never raised."""
        log_event(logger, f"Deleting file {artifact.name}", event="release_start", artifact=artifact.name)
        try:
            self.client.delete_file(artifact.name)
        except Exception as exc:  # noqa: BLE001
            _log_cleanup_failure(f"Could not delete remote file {artifact.name}", exc, artifact=artifact.name)
            return False
        log_event(logger, f"File {artifact.name} deleted successfully", event="release_ok", artifact=artifact.name)
        return True


@contextmanager
def staged_artifact(stager: ArtifactStager, document_text: str, display_name: str) -> Iterator[RemoteArtifact]:
    """Stage a document for the duration of a block and always release it."""
    artifact = stager.stage(document_text, display_name)
    try:
        yield artifact
    finally:
        stager.release(artifact)


def purge_remote_files(client: GenerativeClient, page_size: int = 10) -> tuple[int, int]:
    """Delete every file stored under the current API key.

    Returns:
        (deleted, failed) counts
    """
    # Materialize first so deletions do not shift the pages being walked.
    names = [meta["name"] for meta in client.list_files(page_size=page_size) if meta.get("name")]
    deleted = failed = 0
    for name in names:
        log_event(logger, f"Deleting - {name}", event="purge_delete", artifact=name)
        try:
            client.delete_file(name)
        except Exception as exc:  # noqa: BLE001
            _log_cleanup_failure(f"Could not delete remote file {name}", exc, artifact=name)
            failed += 1
            continue
        deleted += 1
    log_event(logger, f"Deleted files: {deleted}", event="purge_done", deleted=deleted, failed=failed)
    return deleted, failed


def build_display_name(prefix: str, now: datetime | None = None) -> str:
    now = now or datetime.now(timezone.utc)
    return f"{prefix}_{now.strftime('%Y%m%dT%H%M%SZ')}.html"


def _remove_quietly(path: Path) -> None:
    try:
        path.unlink(missing_ok=True)
    except OSError as exc:
        _log_cleanup_failure(f"Could not clean up temporary file {path}", exc, path=str(path))
        return
    log_event(logger, f"Temporary file {path} deleted", event="stage_temp_removed", path=str(path))


def _log_cleanup_failure(message: str, exc: Exception, **fields: str) -> None:
    log_event(
        logger,
        message,
        level=logging.WARNING,
        event="cleanup_failed",
        category=CleanupWarning.__name__,
        error=f"{type(exc).__name__}: {exc}",
        **fields,
    )
    warnings.warn(f"{message}: {exc}", CleanupWarning, stacklevel=3)
