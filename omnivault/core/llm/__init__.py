"""
Generative-AI provider abstraction layer.

Supported providers:
- OpenAI (official SDK): text, streaming, web research, images, speech
- Ollama (native SDK): text and streaming
"""

from omnivault.core.llm.base import LLMProvider
from omnivault.core.llm.ollama import OllamaLLM
from omnivault.core.llm.openai import OpenAILLM

__all__ = [
    "LLMProvider",
    "OllamaLLM",
    "OpenAILLM",
]
