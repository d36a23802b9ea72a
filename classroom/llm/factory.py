"""Generation Client Factory - builds the configured client."""

from ..core.config import ClassroomConfig, get_config
from .client import GeminiClient, GenerationClient, StaticGenerationClient


class GenerationClientFactory:
    """Factory for generation clients.

    Centralizes client construction so routers and services never read
    environment variables themselves.

    Example:
        >>> client = GenerationClientFactory.create()
        >>> text = await client.generate("...")
    """

    @staticmethod
    def create_gemini(config: ClassroomConfig) -> GeminiClient:
        return GeminiClient(
            api_key=config.gemini_api_key,
            model=config.gemini_model,
            api_url=config.gemini_api_url,
            timeout=config.generation_timeout,
        )

    @classmethod
    def create(cls, config: ClassroomConfig | None = None) -> GenerationClient:
        """Gemini when an API key is configured, otherwise an offline client
        that fails every request with ``GenerationError``."""
        config = config or get_config()
        if config.generation_enabled:
            return cls.create_gemini(config)
        return StaticGenerationClient()
