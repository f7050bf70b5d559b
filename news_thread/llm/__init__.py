"""Generative-language service clients and prompts."""

from .prompts import build_extraction_prompt
from .providers.base import GenerativeClient
from .providers.factory import available_providers, create_client
from .providers.gemini import GeminiClient, file_part

__all__ = [
    "GenerativeClient",
    "GeminiClient",
    "available_providers",
    "build_extraction_prompt",
    "create_client",
    "file_part",
]
