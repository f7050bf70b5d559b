"""Wire-format tests for the Gemini REST client."""

from __future__ import annotations

import json

import httpx
import pytest

from news_thread.config import ProviderConfig
from news_thread.llm.providers.factory import available_providers, create_client
from news_thread.llm.providers.gemini import GeminiClient, _extract_text

BASE = "https://generativelanguage.googleapis.com"


def _client(handler) -> GeminiClient:
    return GeminiClient(ProviderConfig(model="gemini-test"), "test-key", transport=httpx.MockTransport(handler))


def test_upload_file_runs_resumable_protocol(tmp_path):
    path = tmp_path / "page.html"
    path.write_text("<html>hello</html>", encoding="utf-8")
    seen = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        if request.url.path == "/upload/v1beta/files":
            return httpx.Response(200, headers={"x-goog-upload-url": "https://upload.example/session-1"})
        return httpx.Response(
            200,
            json={
                "file": {
                    "name": "files/abc",
                    "uri": f"{BASE}/v1beta/files/abc",
                    "mimeType": "text/html",
                    "displayName": "page.html",
                }
            },
        )

    artifact = _client(handler).upload_file(path, "text/html", "page.html")

    start, finalize = seen
    assert start.url.params["key"] == "test-key"
    assert start.headers["X-Goog-Upload-Command"] == "start"
    assert start.headers["X-Goog-Upload-Header-Content-Type"] == "text/html"
    assert start.headers["X-Goog-Upload-Header-Content-Length"] == str(len(b"<html>hello</html>"))
    assert json.loads(start.content) == {"file": {"display_name": "page.html"}}
    assert str(finalize.url) == "https://upload.example/session-1"
    assert finalize.headers["X-Goog-Upload-Command"] == "upload, finalize"
    assert finalize.content == b"<html>hello</html>"
    assert artifact.name == "files/abc"
    assert artifact.uri.endswith("/files/abc")
    assert artifact.display_name == "page.html"


def test_upload_file_raises_on_http_error(tmp_path):
    path = tmp_path / "page.html"
    path.write_text("x", encoding="utf-8")

    with pytest.raises(httpx.HTTPStatusError):
        _client(lambda request: httpx.Response(403)).upload_file(path, "text/html", "page.html")


def test_delete_file_targets_resource_name():
    seen = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json={})

    _client(handler).delete_file("files/abc")

    assert seen[0].method == "DELETE"
    assert seen[0].url.path == "/v1beta/files/abc"


def test_list_files_follows_page_tokens():
    pages = {
        None: {"files": [{"name": "files/a"}], "nextPageToken": "t2"},
        "t2": {"files": [{"name": "files/b"}]},
    }

    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json=pages[request.url.params.get("pageToken")])

    names = [meta["name"] for meta in _client(handler).list_files(page_size=1)]

    assert names == ["files/a", "files/b"]


def test_generate_json_requests_schema_constrained_output():
    seen = []
    schema = {"type": "OBJECT", "properties": {"intro": {"type": "STRING"}}}

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(
            200,
            json={"candidates": [{"content": {"parts": [{"text": '{"intro": "Hi"}'}]}}]},
        )

    parts = [{"text": "prompt"}, {"fileData": {"mimeType": "text/html", "fileUri": "uri"}}]
    text = _client(handler).generate_json(parts, schema)

    assert text == '{"intro": "Hi"}'
    assert seen[0].url.path == "/v1beta/models/gemini-test:generateContent"
    body = json.loads(seen[0].content)
    assert body["contents"][0]["parts"] == parts
    assert body["generationConfig"]["responseMimeType"] == "application/json"
    assert body["generationConfig"]["responseSchema"] == schema


def test_extract_text_skips_thought_parts():
    data = {
        "candidates": [
            {"content": {"parts": [{"thought": True, "text": "thinking"}, {"text": "{}"}]}}
        ]
    }

    assert _extract_text(data) == "{}"
    assert _extract_text({}) == ""


def test_missing_api_key_is_rejected():
    with pytest.raises(ValueError, match="Missing Gemini API key"):
        GeminiClient(ProviderConfig(), None)


def test_factory_rejects_unknown_provider():
    assert "gemini" in available_providers()
    with pytest.raises(ValueError, match="Unsupported provider"):
        create_client(ProviderConfig(name="unknown", api_key="k"))
