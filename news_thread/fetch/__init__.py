"""Source page retrieval."""

from .fetcher import fetch_document

__all__ = ["fetch_document"]
