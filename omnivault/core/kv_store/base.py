"""
Base interface for local key-value storage.

Values are complete JSON strings; every write replaces the whole value
stored under a key, so an interrupted write never leaves a partial patch.
"""

from abc import ABC, abstractmethod


class KeyValueStore(ABC):
    """Abstract base class for key-value storage implementations."""

    @abstractmethod
    async def initialize(self) -> None:
        """Initialize the store (open connection, create schema)."""
        pass

    @abstractmethod
    async def get(self, key: str) -> str | None:
        """
        Read the value stored under a key.

        Args:
            key: Storage key

        Returns:
            Stored value or None if the key is absent
        """
        pass

    @abstractmethod
    async def set(self, key: str, value: str) -> None:
        """
        Replace the value stored under a key.

        Args:
            key: Storage key
            value: Complete replacement value
        """
        pass

    @abstractmethod
    async def delete(self, key: str) -> None:
        """
        Remove a key. Removing an absent key is a no-op.

        Args:
            key: Storage key
        """
        pass

    @abstractmethod
    async def keys(self, prefix: str = "") -> list[str]:
        """
        List stored keys.

        Args:
            prefix: Only return keys starting with this prefix

        Returns:
            Sorted key names
        """
        pass

    @abstractmethod
    async def close(self) -> None:
        """Release any open connections."""
        pass
