"""
Ollama provider using native ollama-python SDK.

Text only: grounded search, image generation and speech fall back to the
base class and raise LLMError.
"""

from collections.abc import AsyncIterator

import ollama
from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from omnivault.core.llm.base import LLMProvider
from omnivault.utils.exceptions import LLMError, ValidationError
from omnivault.utils.logger import get_logger

logger = get_logger(__name__)


class OllamaLLM(LLMProvider):
    """
    Ollama provider for text generation.

    Uses native ollama-python SDK for chat completions
    with schema-constrained structured outputs.
    """

    def __init__(
        self,
        host: str = "http://localhost:11434",
        model: str = "llama3.1:8b",
        timeout: float = 120.0,
    ):
        """
        Initialize Ollama provider.

        Args:
            host: Ollama server URL
            model: Model name for text generation (e.g., "llama3.1", "mistral")
            timeout: Request timeout in seconds
        """
        self.host = host
        self.model = model
        self.timeout = timeout

        self.client = ollama.AsyncClient(host=host, timeout=timeout)

    @staticmethod
    def _messages(
        prompt: str, system: str | None = None, history: list[dict[str, str]] | None = None
    ) -> list[dict[str, str]]:
        messages = []
        if system:
            messages.append({"role": "system", "content": system})
        messages.extend(history or [])
        messages.append({"role": "user", "content": prompt})
        return messages

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
        Generate completion using Ollama.

        Structured output passes the schema as the request format, so the
        server constrains decoding to it.

        Raises:
            LLMError: If the Ollama request fails
            ValidationError: If structured output parsing fails
        """
        options = {
            "temperature": temperature,
            "num_predict": max_tokens,
            **kwargs.pop("options", {}),
        }
        if response_format:
            prompt = f"{prompt}\n\nRespond with JSON only."

        try:
            response = await self.client.chat(
                model=self.model,
                messages=self._messages(prompt, system),
                format=response_format.model_json_schema() if response_format else None,
                options=options,
                **kwargs,
            )
        except Exception as e:
            logger.error(
                f"Ollama API error: {e}",
                extra={"model": self.model, "error": str(e), "error_type": type(e).__name__},
            )
            raise LLMError(f"Ollama API error: {e}") from e

        content = response["message"]["content"]
        if not response_format:
            return content

        try:
            return response_format.model_validate_json(self._extract_json(content))
        except PydanticValidationError as e:
            raise ValidationError(
                f"Failed to parse {response_format.__name__} from model output: {e}",
                {"model": self.model, "raw": content[:500]},
            ) from e

    async def stream(
        self,
        prompt: str,
        system: str | None = None,
        history: list[dict[str, str]] | None = None,
        max_tokens: int = 2000,
        temperature: float = 0.0,
        **kwargs,
    ) -> AsyncIterator[str]:
        """Stream chat reply chunks."""
        try:
            response = await self.client.chat(
                model=self.model,
                messages=self._messages(prompt, system, history),
                options={"temperature": temperature, "num_predict": max_tokens},
                stream=True,
            )
            async for part in response:
                delta = part["message"]["content"]
                if delta:
                    yield delta
        except Exception as e:
            logger.error(
                f"Ollama streaming error: {e}",
                extra={"model": self.model, "error": str(e)},
            )
            raise LLMError(f"Ollama streaming error: {e}") from e

    def _extract_json(self, content: str) -> str:
        """
        Extract JSON from content that might have markdown formatting.

        Args:
            content: Raw content that may contain JSON

        Returns:
            Cleaned JSON string
        """
        content = content.strip()

        if "```json" in content:
            content = content.split("```json")[1].split("```")[0].strip()
        elif "```" in content:
            content = content.split("```")[1].split("```")[0].strip()

        return content

    async def close(self):
        """Close client (Ollama SDK handles cleanup internally)."""
        pass
