"""Structured news extraction and normalization."""

from .extractor import (
    NewsExtractor,
    normalize_hashtag,
    normalize_link,
    parse_response,
    site_origin,
    strip_code_fence,
)
from .schema import NEWS_RESPONSE_SCHEMA, build_response_schema

__all__ = [
    "NEWS_RESPONSE_SCHEMA",
    "NewsExtractor",
    "build_response_schema",
    "normalize_hashtag",
    "normalize_link",
    "parse_response",
    "site_origin",
    "strip_code_fence",
]
