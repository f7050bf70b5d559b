"""
Structured news extraction from an uploaded page.

One schema-constrained generate call is made per run. The raw response is
turned into an ExtractionResult at this boundary: parse failures and shape
violations are rejected whole, while per-item problems are normalized where
possible and otherwise logged without dropping the item.
"""

from __future__ import annotations

import json
import logging
from typing import Any
from urllib.parse import urlparse

import httpx

from ..config import ExtractConfig
from ..errors import ExtractionError
from ..llm.prompts import build_extraction_prompt
from ..llm.providers.base import GenerativeClient
from ..llm.providers.gemini import file_part
from ..logging_utils import log_event, truncate_text
from ..types import (
    ExtractionResult,
    NewsBundle,
    NewsItem,
    ParseError,
    RemoteArtifact,
    SchemaError,
    ValidBundle,
)
from .schema import build_response_schema

logger = logging.getLogger(__name__)

_FENCE_OPENERS = ("```json", "```")
_FENCE = "```"


class NewsExtractor:
    """Asks the generative service for a NewsBundle about an uploaded page."""

    def __init__(self, client: GenerativeClient, cfg: ExtractConfig, source_url: str):
        self.client = client
        self.cfg = cfg
        self.origin = site_origin(source_url)

    def extract(self, artifact: RemoteArtifact) -> NewsBundle:
        """Run the extraction call and return the normalized bundle.

        Raises:
            ExtractionError: On provider failure, malformed JSON or unexpected shape
        """
        prompt = build_extraction_prompt(artifact.display_name, self.cfg)
        parts = [{"text": prompt}, file_part(artifact)]
        log_event(
            logger,
            "Sending document for news extraction",
            event="extract_start",
            artifact=artifact.name,
            limit=self.cfg.limit,
        )
        try:
            text = self.client.generate_json(parts, build_response_schema(self.cfg))
        except (httpx.HTTPError, ValueError) as exc:
            details = _response_details(exc)
            log_event(
                logger,
                "Error interacting with the generative service",
                level=logging.ERROR,
                event="extract_provider_error",
                error=f"{type(exc).__name__}: {exc}",
                details=details,
            )
            raise ExtractionError(f"Generative service call failed: {exc}") from exc

        log_event(logger, "Structured response received", event="extract_response", chars=len(text))
        result = parse_response(text, self.origin, self.cfg.limit)

        if isinstance(result, ParseError):
            log_event(
                logger,
                "Error parsing structured response",
                level=logging.ERROR,
                event="extract_parse_error",
                reason=result.reason,
                raw_response=truncate_text(result.raw_text),
            )
            raise ExtractionError("Malformed structured response", raw_text=result.raw_text)
        if isinstance(result, SchemaError):
            log_event(
                logger,
                "Structured response has an unexpected shape",
                level=logging.ERROR,
                event="extract_schema_error",
                reason=result.reason,
                raw_response=truncate_text(result.raw_text),
            )
            raise ExtractionError(
                f"Unexpected response shape: {result.reason}", raw_text=result.raw_text
            )

        bundle = result.bundle
        log_event(logger, f"Extracted {len(bundle.items)} news items", event="extract_ok", items=len(bundle.items))
        return bundle


def parse_response(text: str, origin: str, limit: int) -> ExtractionResult:
    """Parse, validate and normalize a raw structured response."""
    cleaned = strip_code_fence(text or "")
    if not cleaned:
        return ParseError("empty response", text or "")
    try:
        data = json.loads(cleaned)
    except json.JSONDecodeError as exc:
        return ParseError(str(exc), text)

    if not isinstance(data, dict):
        return SchemaError("root is not an object", text)
    for key in ("intro", "outro"):
        value = data.get(key)
        if not isinstance(value, str) or not value.strip():
            return SchemaError(f"missing or empty '{key}'", text)
    raw_items = data.get("news_items")
    if not isinstance(raw_items, list):
        return SchemaError("'news_items' is not a list", text)
    for index, raw in enumerate(raw_items):
        if not isinstance(raw, dict):
            return SchemaError(f"news item {index} is not an object", text)

    items = [_normalize_item(index, raw, origin) for index, raw in enumerate(raw_items)]
    bundle = NewsBundle(
        intro=data["intro"].strip(),
        outro=data["outro"].strip(),
        items=items[:limit],
    )
    return ValidBundle(bundle)


def strip_code_fence(text: str) -> str:
    """Remove a leading ```json / ``` marker and a trailing ``` marker."""
    cleaned = text.strip()
    for opener in _FENCE_OPENERS:
        if cleaned.startswith(opener):
            cleaned = cleaned[len(opener):]
            break
    if cleaned.endswith(_FENCE):
        cleaned = cleaned[: -len(_FENCE)]
    return cleaned.strip()


def site_origin(url: str) -> str:
    parsed = urlparse(url)
    return f"{parsed.scheme}://{parsed.netloc}"


def normalize_link(link: str, origin: str) -> str:
    """Make a site-relative link absolute. Absolute links pass through.

    Examples:
        >>> normalize_link("/a", "https://example.com")
        'https://example.com/a'
        >>> normalize_link("//cdn.example.com/a", "https://example.com")
        'https://cdn.example.com/a'
    """
    link = link.strip()
    if link.startswith("//"):
        return f"{urlparse(origin).scheme}:{link}"
    if link.startswith("/"):
        return f"{origin.rstrip('/')}{link}"
    return link


def normalize_hashtag(tag: str) -> str:
    tag = tag.strip()
    if tag.startswith("#"):
        return tag
    return f"#{tag}"


def _normalize_item(index: int, raw: dict[str, Any], origin: str) -> NewsItem:
    title = raw.get("title")
    link = raw.get("link")
    hashtags = raw.get("hashtags")

    if not title or not link or not isinstance(hashtags, list) or not hashtags:
        # Kept in the sequence; it is published as-is.
        log_event(
            logger,
            f"News item at index {index} has missing or invalid fields",
            level=logging.WARNING,
            event="extract_item_invalid",
            index=index,
            item=raw,
        )

    if not isinstance(hashtags, list):
        hashtags = []
    return NewsItem(
        title=str(title or "").strip(),
        short_description=str(raw.get("short_description") or "").strip(),
        link=normalize_link(str(link), origin) if link else "",
        hashtags=[normalize_hashtag(str(tag)) for tag in hashtags if tag is not None and str(tag).strip()],
    )


def _response_details(exc: Exception) -> str | None:
    if isinstance(exc, httpx.HTTPStatusError):
        return truncate_text(exc.response.text, 2000)
    return None
