"""
Factory modules for creating OmniVault components.

Provides modular factories for the LLM provider and key-value storage.
"""

from omnivault.core.factory.kv_factory import KeyValueStoreFactory
from omnivault.core.factory.llm_factory import LLMFactory

__all__ = [
    "LLMFactory",
    "KeyValueStoreFactory",
]
