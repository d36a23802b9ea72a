"""Generation clients."""

from .client import GeminiClient, GenerationClient, StaticGenerationClient
from .factory import GenerationClientFactory

__all__ = [
    "GenerationClient",
    "GeminiClient",
    "StaticGenerationClient",
    "GenerationClientFactory",
]
