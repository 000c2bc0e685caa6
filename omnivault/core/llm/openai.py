"""
OpenAI provider using official SDK.
"""

from collections.abc import AsyncIterator

from openai import AsyncOpenAI
from pydantic import BaseModel

from omnivault.core.llm.base import LLMProvider
from omnivault.models.ai import GroundedResult, GroundedSource
from omnivault.utils.exceptions import LLMError, ValidationError
from omnivault.utils.logger import get_logger

logger = get_logger(__name__)


class OpenAILLM(LLMProvider):
    """
    OpenAI provider for text, research, images and speech.

    Uses official OpenAI SDK with native structured output support.
    """

    def __init__(
        self,
        api_key: str,
        model: str = "gpt-4o-mini",
        organization: str | None = None,
        base_url: str | None = None,
        timeout: float = 120.0,
        research_model: str = "gpt-4o",
        image_model: str = "dall-e-3",
        speech_model: str = "gpt-4o-mini-tts",
        voice: str = "alloy",
    ):
        """
        Initialize OpenAI provider.

        Args:
            api_key: OpenAI API key
            model: Chat model name (e.g., "gpt-4o", "gpt-4o-mini")
            organization: Optional organization ID
            base_url: Optional custom base URL
            timeout: Request timeout in seconds
            research_model: Model used with the web search tool
            image_model: Image generation model
            speech_model: Text-to-speech model
            voice: Default speech voice
        """
        self.model = model
        self.research_model = research_model
        self.image_model = image_model
        self.speech_model = speech_model
        self.voice = voice

        self.client = AsyncOpenAI(
            api_key=api_key, organization=organization, base_url=base_url, timeout=timeout
        )

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
        Generate completion using OpenAI.

        Uses native structured outputs (Parse API) when response_format is provided.

        Raises:
            LLMError: If OpenAI API call fails
            ValidationError: If structured output parsing fails
        """
        if not prompt or not prompt.strip():
            raise ValidationError("Prompt cannot be empty")

        params = {
            "model": self.model,
            "messages": self._messages(prompt, system),
            "temperature": temperature,
            "max_tokens": max_tokens,
            **kwargs,
        }

        try:
            if response_format:
                response = await self.client.chat.completions.parse(
                    **params, response_format=response_format
                )

                parsed = response.choices[0].message.parsed
                if not parsed:
                    raise ValidationError("OpenAI returned empty parsed response")

                return parsed

            response = await self.client.chat.completions.create(**params)
            content = response.choices[0].message.content

            if not content:
                raise LLMError("OpenAI returned empty content")

            return content
        except (ValidationError, LLMError):
            raise
        except Exception as e:
            logger.error(
                f"OpenAI API error: {e}",
                extra={"model": self.model, "error": str(e), "error_type": type(e).__name__},
            )
            raise LLMError(f"OpenAI API error: {e}") from e

    async def stream(
        self,
        prompt: str,
        system: str | None = None,
        history: list[dict[str, str]] | None = None,
        max_tokens: int = 2000,
        temperature: float = 0.0,
        **kwargs,
    ) -> AsyncIterator[str]:
        """Stream chat completion deltas."""
        try:
            response = await self.client.chat.completions.create(
                model=self.model,
                messages=self._messages(prompt, system, history),
                temperature=temperature,
                max_tokens=max_tokens,
                stream=True,
                **kwargs,
            )
            async for chunk in response:
                if not chunk.choices:
                    continue
                delta = chunk.choices[0].delta.content
                if delta:
                    yield delta
        except Exception as e:
            logger.error(
                f"OpenAI streaming error: {e}",
                extra={"model": self.model, "error": str(e), "error_type": type(e).__name__},
            )
            raise LLMError(f"OpenAI streaming error: {e}") from e

    async def grounded_search(self, prompt: str, system: str | None = None) -> GroundedResult:
        """
        Answer with the Responses API web search tool.

        Sources are collected from url_citation annotations, de-duplicated by URI.
        """
        try:
            response = await self.client.responses.create(
                model=self.research_model,
                tools=[{"type": "web_search_preview"}],
                instructions=system,
                input=prompt,
            )
        except Exception as e:
            logger.error(
                f"OpenAI research error: {e}",
                extra={"model": self.research_model, "error": str(e)},
            )
            raise LLMError(f"OpenAI research error: {e}") from e

        sources: list[GroundedSource] = []
        seen: set[str] = set()
        for item in response.output or []:
            if getattr(item, "type", None) != "message":
                continue
            for part in getattr(item, "content", None) or []:
                for annotation in getattr(part, "annotations", None) or []:
                    if getattr(annotation, "type", None) != "url_citation":
                        continue
                    uri = getattr(annotation, "url", "") or ""
                    if uri in seen:
                        continue
                    seen.add(uri)
                    sources.append(
                        GroundedSource(title=getattr(annotation, "title", None) or "Source", uri=uri)
                    )

        return GroundedResult(text=response.output_text or "", sources=sources)

    async def generate_image(self, prompt: str) -> str | None:
        """Generate an illustration and return it as a data URI (or hosted URL)."""
        try:
            response = await self.client.images.generate(
                model=self.image_model,
                prompt=prompt,
                size="1024x1024",
                response_format="b64_json",
                n=1,
            )
        except Exception as e:
            raise LLMError(f"OpenAI image error: {e}") from e

        if not response.data:
            return None
        image = response.data[0]
        if image.b64_json:
            return f"data:image/png;base64,{image.b64_json}"
        return image.url

    async def synthesize_speech(self, text: str, voice: str | None = None) -> bytes:
        """Synthesize raw 24 kHz 16-bit mono PCM."""
        try:
            response = await self.client.audio.speech.create(
                model=self.speech_model,
                voice=voice or self.voice,
                input=text,
                response_format="pcm",
            )
        except Exception as e:
            raise LLMError(f"OpenAI speech error: {e}") from e

        return response.content

    async def close(self):
        """Close OpenAI client."""
        await self.client.close()
