"""Google Gemini REST client for the File API and structured generation."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Iterator

import httpx

from ...config import ProviderConfig
from ...logging_utils import log_event
from ...types import RemoteArtifact
from .base import GenerativeClient

logger = logging.getLogger(__name__)


class GeminiClient(GenerativeClient):
    """Gemini-backed client talking to the v1beta REST endpoints."""

    def __init__(
        self,
        cfg: ProviderConfig,
        api_key: str | None,
        transport: httpx.BaseTransport | None = None,
    ):
        if not api_key:
            raise ValueError("Missing Gemini API key")
        self.cfg = cfg
        self.api_key = api_key
        self.transport = transport

    def upload_file(self, path: Path, mime_type: str, display_name: str) -> RemoteArtifact:
        data = Path(path).read_bytes()
        start_headers = {
            "X-Goog-Upload-Protocol": "resumable",
            "X-Goog-Upload-Command": "start",
            "X-Goog-Upload-Header-Content-Length": str(len(data)),
            "X-Goog-Upload-Header-Content-Type": mime_type,
        }
        with self._client() as client:
            resp = client.post(
                f"{self.cfg.base_url}/upload/v1beta/files",
                params={"key": self.api_key},
                headers=start_headers,
                json={"file": {"display_name": display_name}},
            )
            resp.raise_for_status()
            upload_url = resp.headers.get("x-goog-upload-url")
            if not upload_url:
                raise httpx.HTTPError("Upload session did not return an upload URL")

            resp = client.post(
                upload_url,
                headers={
                    "X-Goog-Upload-Offset": "0",
                    "X-Goog-Upload-Command": "upload, finalize",
                },
                content=data,
            )
            resp.raise_for_status()
            meta = resp.json().get("file", {})

        return RemoteArtifact(
            name=meta["name"],
            uri=meta["uri"],
            mime_type=meta.get("mimeType") or mime_type,
            display_name=meta.get("displayName") or display_name,
        )

    def delete_file(self, name: str) -> None:
        with self._client() as client:
            resp = client.delete(f"{self.cfg.base_url}/v1beta/{name}", params={"key": self.api_key})
            resp.raise_for_status()

    def list_files(self, page_size: int = 10) -> Iterator[dict[str, Any]]:
        params: dict[str, Any] = {"key": self.api_key, "pageSize": page_size}
        with self._client() as client:
            while True:
                resp = client.get(f"{self.cfg.base_url}/v1beta/files", params=params)
                resp.raise_for_status()
                data = resp.json()
                yield from data.get("files", [])
                token = data.get("nextPageToken")
                if not token:
                    return
                params["pageToken"] = token

    def generate_json(self, parts: list[dict[str, Any]], schema: dict[str, Any]) -> str:
        payload = {
            "contents": [{"role": "user", "parts": parts}],
            "generationConfig": {
                "temperature": self.cfg.temperature,
                "responseMimeType": "application/json",
                "responseSchema": schema,
            },
        }
        url = f"{self.cfg.base_url}/v1beta/models/{self.cfg.model}:generateContent"
        log_event(logger, "Sending generate request", event="llm_request", model=self.cfg.model)
        with self._client() as client:
            resp = client.post(url, params={"key": self.api_key}, json=payload)
            resp.raise_for_status()
            return _extract_text(resp.json())

    def _client(self) -> httpx.Client:
        return httpx.Client(
            timeout=self.cfg.timeout_seconds,
            trust_env=self.cfg.trust_env,
            transport=self.transport,
        )


def file_part(artifact: RemoteArtifact) -> dict[str, Any]:
    """Build a generateContent part referencing an uploaded file."""
    return {"fileData": {"mimeType": artifact.mime_type, "fileUri": artifact.uri}}


def _extract_text(data: dict[str, Any]) -> str:
    try:
        parts = data["candidates"][0]["content"]["parts"]
    except (KeyError, IndexError, TypeError):
        return ""

    if not isinstance(parts, list):
        return ""

    non_thought_chunks: list[str] = []
    all_chunks: list[str] = []
    for part in parts:
        if not isinstance(part, dict):
            continue
        text = part.get("text")
        if not text:
            continue
        chunk = str(text)
        all_chunks.append(chunk)
        if not bool(part.get("thought")):
            non_thought_chunks.append(chunk)

    if non_thought_chunks:
        return "".join(non_thought_chunks)
    return "".join(all_chunks)
