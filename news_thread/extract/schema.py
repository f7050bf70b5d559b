"""Response schema declared on the structured extraction request."""

from __future__ import annotations

from typing import Any

from ..config import ExtractConfig


def build_response_schema(cfg: ExtractConfig) -> dict[str, Any]:
    return {
        "type": "OBJECT",
        "properties": {
            "intro": {
                "type": "STRING",
                "description": "Introduction to the thread",
                "nullable": False,
            },
            "news_items": {
                "type": "ARRAY",
                "items": {
                    "type": "OBJECT",
                    "properties": {
                        "title": {
                            "type": "STRING",
                            "description": f"Title of the news not exceeding {cfg.title_max_chars} characters",
                            "nullable": False,
                        },
                        "short_description": {
                            "type": "STRING",
                            "description": (
                                "Short description of the news not exceeding "
                                f"{cfg.description_max_chars} characters"
                            ),
                            "nullable": False,
                        },
                        "link": {
                            "type": "STRING",
                            "description": "Link to the news article",
                            "nullable": False,
                        },
                        "hashtags": {
                            "type": "ARRAY",
                            "items": {
                                "type": "STRING",
                                "description": (
                                    "Hashtags related to the news. Don't include "
                                    f"{' or '.join(cfg.excluded_hashtags)} hashtags"
                                ),
                                "nullable": False,
                            },
                            "minItems": 1,
                            "maxItems": cfg.max_hashtags,
                        },
                    },
                    "required": ["title", "link", "hashtags"],
                },
            },
            "outro": {
                "type": "STRING",
                "description": "Conclusion of the thread",
                "nullable": False,
            },
        },
        "required": ["intro", "news_items", "outro"],
    }


NEWS_RESPONSE_SCHEMA = build_response_schema(ExtractConfig())
