"""Utility modules for OmniVault."""

from omnivault.utils.audio import pcm_to_wav
from omnivault.utils.exceptions import (
    ConfigurationError,
    LLMError,
    NotFoundError,
    OmniVaultError,
    PersistenceError,
    StoreError,
    ValidationError,
)
from omnivault.utils.id_generator import generate_message_id, generate_note_id, now_ms
from omnivault.utils.logger import get_logger, setup_logging

__all__ = [
    # Logging
    "get_logger",
    "setup_logging",
    # ID Generators
    "generate_note_id",
    "generate_message_id",
    "now_ms",
    # Audio
    "pcm_to_wav",
    # Exceptions
    "OmniVaultError",
    "StoreError",
    "PersistenceError",
    "ValidationError",
    "NotFoundError",
    "ConfigurationError",
    "LLMError",
]
