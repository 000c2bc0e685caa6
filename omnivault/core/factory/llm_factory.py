"""
Factory for creating generative-AI providers.

OpenAI covers every vault capability. Ollama is text only, so research,
illustrations and audio briefings are unavailable with it.
"""

from omnivault.config import LLMConfig
from omnivault.core.llm.base import LLMProvider
from omnivault.core.llm.ollama import OllamaLLM
from omnivault.core.llm.openai import OpenAILLM
from omnivault.utils.logger import get_logger

logger = get_logger(__name__)

DEFAULT_OLLAMA_HOST = "http://localhost:11434"


class LLMFactory:
    """Factory for creating LLM providers from configuration."""

    @staticmethod
    def create(config: LLMConfig) -> LLMProvider:
        """
        Create LLM provider from configuration.

        Args:
            config: LLM configuration

        Returns:
            LLM provider instance

        Raises:
            ValueError: If the provider is not supported or lacks credentials
        """
        if config.provider == "openai":
            if not config.api_key:
                raise ValueError("OpenAI API key is required")
            return OpenAILLM(
                api_key=config.api_key,
                model=config.chat_model or config.model,
                base_url=config.base_url,
                timeout=config.timeout,
                research_model=config.research_model,
                image_model=config.image_model,
                speech_model=config.speech_model,
                voice=config.voice,
            )

        if config.provider == "ollama":
            logger.warning(
                "Ollama provider is text only: research, illustrations and briefings are disabled",
                extra={"model": config.model},
            )
            return OllamaLLM(
                host=config.base_url or DEFAULT_OLLAMA_HOST,
                model=config.chat_model or config.model,
                timeout=config.timeout,
            )

        raise ValueError(f"Unsupported LLM provider: {config.provider}")
