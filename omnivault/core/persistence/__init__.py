"""Persistence of vault state to local key-value storage."""

from omnivault.core.persistence.adapter import StorageKeys, VaultPersistence
from omnivault.core.persistence.seed import initial_notes

__all__ = [
    "StorageKeys",
    "VaultPersistence",
    "initial_notes",
]
