from .base import GenerativeClient
from .factory import available_providers, create_client
from .gemini import GeminiClient, file_part

__all__ = ["GenerativeClient", "GeminiClient", "available_providers", "create_client", "file_part"]
