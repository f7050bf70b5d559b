"""Tests for structured response parsing, validation and normalization."""

from __future__ import annotations

import json

import httpx
import pytest

from news_thread.config import ExtractConfig, ProviderConfig
from news_thread.errors import ExtractionError
from news_thread.extract.extractor import (
    NewsExtractor,
    normalize_hashtag,
    normalize_link,
    parse_response,
    site_origin,
    strip_code_fence,
)
from news_thread.llm.providers.gemini import GeminiClient
from news_thread.types import ParseError, RemoteArtifact, SchemaError, ValidBundle

ORIGIN = "https://example.com"

SAMPLE = {
    "intro": "Hi",
    "outro": "Bye",
    "news_items": [{"title": "T", "link": "/a", "hashtags": ["x"]}],
}


class _FakeClient:
    """Generative client stub returning a canned response."""

    def __init__(self, text=None, exc=None):
        self.text = text
        self.exc = exc
        self.calls = []

    def generate_json(self, parts, schema):  # noqa: ANN001
        self.calls.append((parts, schema))
        if self.exc is not None:
            raise self.exc
        return self.text


def _artifact() -> RemoteArtifact:
    return RemoteArtifact(
        name="files/abc123",
        uri="https://generativelanguage.googleapis.com/v1beta/files/abc123",
        mime_type="text/html",
        display_name="techmeme-latest_20261016T090000Z.html",
    )


def test_parse_response_normalizes_link_and_hashtags():
    result = parse_response(json.dumps(SAMPLE), ORIGIN, limit=3)

    assert isinstance(result, ValidBundle)
    bundle = result.bundle
    assert bundle.intro == "Hi"
    assert bundle.outro == "Bye"
    assert len(bundle.items) == 1
    assert bundle.items[0].link == "https://example.com/a"
    assert bundle.items[0].hashtags == ["#x"]
    assert bundle.items[0].short_description == ""


def test_fenced_response_parses_like_plain_response():
    plain = json.dumps(SAMPLE)
    fenced = f"```json\n{plain}\n```"
    bare_fence = f"  ```\n{plain}\n```  "

    assert parse_response(fenced, ORIGIN, 3) == parse_response(plain, ORIGIN, 3)
    assert parse_response(bare_fence, ORIGIN, 3) == parse_response(plain, ORIGIN, 3)


def test_strip_code_fence_leaves_plain_text_alone():
    assert strip_code_fence('  {"a": 1}\n') == '{"a": 1}'


@pytest.mark.parametrize("missing", ["intro", "outro", "news_items"])
def test_missing_top_level_key_is_schema_error(missing):
    data = dict(SAMPLE)
    del data[missing]

    result = parse_response(json.dumps(data), ORIGIN, 3)

    assert isinstance(result, SchemaError)
    assert missing in result.reason


def test_empty_intro_and_non_list_items_are_rejected():
    empty_intro = dict(SAMPLE, intro="   ")
    items_object = dict(SAMPLE, news_items={"title": "T"})

    assert isinstance(parse_response(json.dumps(empty_intro), ORIGIN, 3), SchemaError)
    assert isinstance(parse_response(json.dumps(items_object), ORIGIN, 3), SchemaError)


def test_non_object_item_rejects_whole_bundle():
    data = dict(SAMPLE, news_items=[SAMPLE["news_items"][0], "just a string"])

    result = parse_response(json.dumps(data), ORIGIN, 3)

    assert isinstance(result, SchemaError)


def test_invalid_json_is_parse_error():
    result = parse_response('{"intro": "Hi", ', ORIGIN, 3)

    assert isinstance(result, ParseError)
    assert result.raw_text == '{"intro": "Hi", '


def test_empty_response_is_parse_error():
    assert isinstance(parse_response("", ORIGIN, 3), ParseError)
    assert isinstance(parse_response("```json\n```", ORIGIN, 3), ParseError)


def test_items_are_truncated_to_limit_in_order():
    items = [{"title": f"T{i}", "link": f"/{i}", "hashtags": ["x"]} for i in range(5)]
    data = dict(SAMPLE, news_items=items)

    result = parse_response(json.dumps(data), ORIGIN, limit=3)

    assert isinstance(result, ValidBundle)
    assert [item.title for item in result.bundle.items] == ["T0", "T1", "T2"]


def test_malformed_item_is_kept():
    data = dict(SAMPLE, news_items=[{"short_description": "no title or link"}])

    result = parse_response(json.dumps(data), ORIGIN, 3)

    assert isinstance(result, ValidBundle)
    item = result.bundle.items[0]
    assert item.title == ""
    assert item.link == ""
    assert item.hashtags == []
    assert item.short_description == "no title or link"


def test_normalize_link_rules():
    assert normalize_link("/a", ORIGIN) == "https://example.com/a"
    assert normalize_link("https://other.org/x", ORIGIN) == "https://other.org/x"
    assert normalize_link("//cdn.example.net/x", ORIGIN) == "https://cdn.example.net/x"


@pytest.mark.parametrize("link", ["/a/b?c=1", "https://other.org/x", "//cdn.example.net/x", "page.html"])
def test_normalize_link_is_idempotent(link):
    once = normalize_link(link, ORIGIN)
    assert normalize_link(once, ORIGIN) == once


def test_normalize_hashtag():
    assert normalize_hashtag("Foo") == "#Foo"
    assert normalize_hashtag("#Foo") == "#Foo"
    assert normalize_hashtag(" OpenAI ") == "#OpenAI"


def test_site_origin_drops_path():
    assert site_origin("https://techmeme.com/river?x=1") == "https://techmeme.com"


def test_extractor_sends_prompt_file_reference_and_schema():
    client = _FakeClient(text=json.dumps(SAMPLE))
    extractor = NewsExtractor(client, ExtractConfig(limit=3), "https://example.com/")

    bundle = extractor.extract(_artifact())

    assert bundle.items[0].link == "https://example.com/a"
    parts, schema = client.calls[0]
    assert "techmeme-latest_20261016T090000Z.html" in parts[0]["text"]
    assert "top 3" in parts[0]["text"]
    assert parts[1] == {
        "fileData": {
            "mimeType": "text/html",
            "fileUri": "https://generativelanguage.googleapis.com/v1beta/files/abc123",
        }
    }
    assert schema["required"] == ["intro", "news_items", "outro"]
    item_schema = schema["properties"]["news_items"]["items"]
    assert item_schema["required"] == ["title", "link", "hashtags"]
    assert item_schema["properties"]["hashtags"]["maxItems"] == 3


def test_extractor_raises_on_malformed_response():
    extractor = NewsExtractor(_FakeClient(text="not json"), ExtractConfig(), ORIGIN)

    with pytest.raises(ExtractionError, match="Malformed") as excinfo:
        extractor.extract(_artifact())

    assert excinfo.value.raw_text == "not json"


def test_extractor_raises_on_unexpected_shape():
    extractor = NewsExtractor(_FakeClient(text='{"intro": "Hi"}'), ExtractConfig(), ORIGIN)

    with pytest.raises(ExtractionError, match="Unexpected response shape"):
        extractor.extract(_artifact())


def test_extractor_wraps_provider_errors():
    request = httpx.Request("POST", "https://generativelanguage.googleapis.com")
    response = httpx.Response(429, request=request, text="quota exceeded")
    exc = httpx.HTTPStatusError("Too Many Requests", request=request, response=response)
    extractor = NewsExtractor(_FakeClient(exc=exc), ExtractConfig(), ORIGIN)

    with pytest.raises(ExtractionError) as excinfo:
        extractor.extract(_artifact())

    assert excinfo.value.__cause__ is exc


def test_extractor_rejects_non_json_envelope():
    transport = httpx.MockTransport(lambda request: httpx.Response(200, text="<html>gateway</html>"))
    client = GeminiClient(ProviderConfig(model="gemini-test"), "test-key", transport=transport)
    extractor = NewsExtractor(client, ExtractConfig(), ORIGIN)

    with pytest.raises(ExtractionError) as excinfo:
        extractor.extract(_artifact())

    assert isinstance(excinfo.value.__cause__, ValueError)
