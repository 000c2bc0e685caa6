"""In-process key-value store for tests and ephemeral sessions."""

from omnivault.core.kv_store.base import KeyValueStore


class InMemoryKeyValueStore(KeyValueStore):
    """
    Dict-backed key-value store.

    Nothing survives the process; useful as a drop-in fake for the SQLite
    backend.
    """

    def __init__(self, initial: dict[str, str] | None = None):
        """
        Initialize in-memory store.

        Args:
            initial: Optional pre-populated values
        """
        self._data: dict[str, str] = dict(initial or {})

    async def initialize(self) -> None:
        pass

    async def get(self, key: str) -> str | None:
        return self._data.get(key)

    async def set(self, key: str, value: str) -> None:
        self._data[key] = value

    async def delete(self, key: str) -> None:
        self._data.pop(key, None)

    async def keys(self, prefix: str = "") -> list[str]:
        return sorted(k for k in self._data if k.startswith(prefix))

    async def close(self) -> None:
        pass
