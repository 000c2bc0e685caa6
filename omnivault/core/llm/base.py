"""
Abstract base class for generative-AI providers.
Handles text generation, streaming chat and optional media capabilities.
"""

from abc import ABC, abstractmethod
from collections.abc import AsyncIterator

from pydantic import BaseModel

from omnivault.models.ai import GroundedResult
from omnivault.utils.exceptions import LLMError


class LLMProvider(ABC):
    """
    Abstract base for generative-AI providers.

    Responsibilities:
    - Text completion/generation
    - Structured output (JSON/Pydantic models)
    - Streaming chat with history
    - Optional: web-grounded search, image generation, speech synthesis
    """

    @abstractmethod
    async def complete(
        self,
        prompt: str,
        response_format: type[BaseModel] | None = None,
        max_tokens: int = 2000,
        temperature: float = 0.0,
        system: str | None = None,
        **kwargs,
    ) -> BaseModel | str:
        """
        Generate completion from prompt.

        Args:
            prompt: The input prompt
            response_format: Optional Pydantic model for structured output
            max_tokens: Maximum tokens to generate
            temperature: Sampling temperature (0.0 = deterministic, 1.0 = creative)
            system: Optional system instruction
            **kwargs: Provider-specific parameters

        Returns:
            Pydantic model instance if response_format provided, else string

        Raises:
            LLMError: If the provider call fails
            ValidationError: If structured output parsing fails
        """
        pass

    @abstractmethod
    def stream(
        self,
        prompt: str,
        system: str | None = None,
        history: list[dict[str, str]] | None = None,
        max_tokens: int = 2000,
        temperature: float = 0.0,
        **kwargs,
    ) -> AsyncIterator[str]:
        """
        Stream a chat reply as text chunks.

        Args:
            prompt: Latest user message
            system: Optional system instruction
            history: Prior turns as {"role", "content"} dicts, oldest first
            max_tokens: Maximum tokens to generate
            temperature: Sampling temperature

        Yields:
            Text chunks in order

        Raises:
            LLMError: If the provider call fails
        """
        pass

    async def grounded_search(self, prompt: str, system: str | None = None) -> GroundedResult:
        """
        Answer a prompt using live web search.

        Raises:
            LLMError: If unsupported by the provider or the call fails
        """
        raise LLMError(f"{type(self).__name__} does not support grounded search")

    async def generate_image(self, prompt: str) -> str | None:
        """
        Generate an illustration.

        Returns:
            Image URL or data URI, None if the provider returned no image

        Raises:
            LLMError: If unsupported by the provider or the call fails
        """
        raise LLMError(f"{type(self).__name__} does not support image generation")

    async def synthesize_speech(self, text: str, voice: str | None = None) -> bytes:
        """
        Synthesize speech.

        Returns:
            Raw 16-bit mono PCM at 24 kHz

        Raises:
            LLMError: If unsupported by the provider or the call fails
        """
        raise LLMError(f"{type(self).__name__} does not support speech synthesis")

    @abstractmethod
    async def close(self):
        """
        Close any open connections.
        Providers should override if cleanup is needed.
        """
