"""
Factory for creating key-value storage backends.
"""

from omnivault.config import StorageConfig
from omnivault.core.kv_store.base import KeyValueStore
from omnivault.core.kv_store.memory_store import InMemoryKeyValueStore
from omnivault.core.kv_store.sqlite_store import SQLiteKeyValueStore


class KeyValueStoreFactory:
    """Factory for creating key-value stores from configuration."""

    @staticmethod
    def create(config: StorageConfig) -> KeyValueStore:
        """
        Create key-value store from configuration.

        Args:
            config: Storage configuration

        Returns:
            Key-value store instance

        Raises:
            ValueError: If backend is not supported
        """
        if config.backend == "sqlite":
            return SQLiteKeyValueStore(db_path=config.db_path)
        elif config.backend == "memory":
            return InMemoryKeyValueStore()
        else:
            raise ValueError(f"Unsupported storage backend: {config.backend}")
