"""Prompt loading and rendering helpers for the extraction call."""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path

from ..config import ExtractConfig


_PROMPT_DIR = Path(__file__).resolve().parent.parent / "prompts"


@lru_cache(maxsize=None)
def _load_template(name: str) -> str:
    path = _PROMPT_DIR / f"{name}.md"
    return path.read_text(encoding="utf-8").strip()


def _render_template(name: str, **values: object) -> str:
    template = _load_template(name)
    return template.format(**values)


def build_extraction_prompt(display_name: str, cfg: ExtractConfig) -> str:
    excluded = " or ".join(cfg.excluded_hashtags) or "overly generic"
    return _render_template(
        "extract_news",
        display_name=display_name,
        limit=cfg.limit,
        category=cfg.category,
        title_max_chars=cfg.title_max_chars,
        description_max_chars=cfg.description_max_chars,
        max_hashtags=cfg.max_hashtags,
        excluded_hashtags=excluded,
    )
