"""Error taxonomy for the news thread pipeline.

Stage-level errors derive from PipelineError and abort a run. PublishError
is raised by posters for a single post and handled inside the thread
publisher. CleanupWarning is logged and issued through `warnings`; it never
aborts a run.
"""

from __future__ import annotations

from typing import Any


class PipelineError(Exception):
    """Base class for errors that abort a pipeline run."""


class ConfigError(PipelineError):
    """Missing credentials or unsupported configuration."""


class RetrievalError(PipelineError):
    """The source page was unreachable or returned a non-success status."""

    def __init__(self, message: str, url: str, status_code: int | None = None):
        super().__init__(message)
        self.url = url
        self.status_code = status_code


class StagingError(PipelineError):
    """Writing the local copy or uploading the artifact failed."""


class ExtractionError(PipelineError):
    """The structured response was malformed or violated the expected shape."""

    def __init__(self, message: str, raw_text: str | None = None):
        super().__init__(message)
        self.raw_text = raw_text


class PublishError(Exception):
    """Publishing a single post failed."""

    def __init__(self, message: str, details: Any | None = None):
        super().__init__(message)
        self.details = details


class CleanupWarning(UserWarning):
    """A local temp file or remote artifact could not be deleted."""
