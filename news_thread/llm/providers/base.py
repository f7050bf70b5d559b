"""Abstract interface for the generative-language extraction service."""

from __future__ import annotations

from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Iterator

from ...types import RemoteArtifact


class GenerativeClient(ABC):
    """Provider interface for file staging and schema-constrained generation."""

    @abstractmethod
    def upload_file(self, path: Path, mime_type: str, display_name: str) -> RemoteArtifact:
        """Upload a local file and return its remote handle."""
        raise NotImplementedError

    @abstractmethod
    def delete_file(self, name: str) -> None:
        """Delete a previously uploaded file."""
        raise NotImplementedError

    @abstractmethod
    def list_files(self, page_size: int = 10) -> Iterator[dict[str, Any]]:
        """Yield metadata for every stored file."""
        raise NotImplementedError

    @abstractmethod
    def generate_json(self, parts: list[dict[str, Any]], schema: dict[str, Any]) -> str:
        """Return the raw text of a JSON-constrained generation."""
        raise NotImplementedError
