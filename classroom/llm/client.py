"""Generation Clients - prompt in, text out."""

from abc import ABC, abstractmethod
from collections.abc import Iterable

import httpx

from ..core.errors import GenerationError, GenerationValidationError
from ..core.logger import get_logger

logger = get_logger("llm")


class GenerationClient(ABC):
    """Interface to a hosted text-generation endpoint."""

    @abstractmethod
    async def generate(self, prompt: str) -> str:
        """Send ``prompt`` and return the generated text.

        Raises:
            GenerationValidationError: Empty prompt
            GenerationError: Endpoint failed or returned no text
        """

    @staticmethod
    def _require_prompt(prompt: str) -> str:
        if not prompt or not prompt.strip():
            raise GenerationValidationError("Prompt must not be empty")
        return prompt


class GeminiClient(GenerationClient):
    """Client for the ``generateContent`` REST endpoint.

    Request body::

        {"contents": [{"parts": [{"text": prompt}]}]}

    The reply text is read from ``candidates[0].content.parts[0].text``.

    Example:
        >>> client = GeminiClient(api_key="...", model="gemini-2.0-flash")
        >>> text = await client.generate("Explain photosynthesis")
    """

    def __init__(
        self,
        api_key: str,
        model: str = "gemini-2.0-flash",
        api_url: str = "https://generativelanguage.googleapis.com/v1beta/models",
        timeout: float = 30.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.api_key = api_key
        self.model = model
        self.api_url = api_url.rstrip("/")
        self.timeout = timeout
        self.transport = transport

    @property
    def endpoint(self) -> str:
        return f"{self.api_url}/{self.model}:generateContent"

    @staticmethod
    def extract_text(data: dict) -> str:
        try:
            text = data["candidates"][0]["content"]["parts"][0]["text"]
        except (KeyError, IndexError, TypeError) as e:
            raise GenerationError("Invalid response format from API") from e
        if not isinstance(text, str) or not text.strip():
            raise GenerationError("Empty response from API")
        return text

    async def generate(self, prompt: str) -> str:
        self._require_prompt(prompt)
        if not self.api_key:
            raise GenerationError("Missing Gemini API key")

        payload = {"contents": [{"parts": [{"text": prompt}]}]}
        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
                response = await client.post(
                    self.endpoint,
                    params={"key": self.api_key},
                    json=payload,
                    headers={"Content-Type": "application/json"},
                )
        except httpx.HTTPError as e:
            logger.error("Generation request failed", model=self.model, error=str(e))
            raise GenerationError(f"Generation request failed: {e}") from e

        if response.status_code != 200:
            logger.error(
                "Generation endpoint error",
                model=self.model,
                status_code=response.status_code,
            )
            raise GenerationError(f"Generation endpoint returned {response.status_code}")

        try:
            data = response.json()
        except ValueError as e:
            raise GenerationError("Generation endpoint returned invalid JSON") from e

        text = self.extract_text(data)
        logger.debug("Generation completed", model=self.model, chars=len(text))
        return text


class StaticGenerationClient(GenerationClient):
    """Returns canned replies in order; the last one repeats.

    Used offline (no API key configured) and in tests.
    """

    def __init__(self, replies: Iterable[str] | str = ()):
        if isinstance(replies, str):
            replies = [replies]
        self.replies = list(replies)
        self.prompts: list[str] = []

    async def generate(self, prompt: str) -> str:
        self._require_prompt(prompt)
        self.prompts.append(prompt)
        if not self.replies:
            raise GenerationError("Content generation is not configured")
        if len(self.replies) > 1:
            return self.replies.pop(0)
        return self.replies[0]
