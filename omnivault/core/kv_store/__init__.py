"""
Key-value store implementations for OmniVault.

Available backends:
- SQLiteKeyValueStore: Durable local storage (aiosqlite)
- InMemoryKeyValueStore: Process-local dict, for tests and ephemeral runs
"""

from omnivault.core.kv_store.base import KeyValueStore
from omnivault.core.kv_store.memory_store import InMemoryKeyValueStore
from omnivault.core.kv_store.sqlite_store import SQLiteKeyValueStore

__all__ = [
    "KeyValueStore",
    "InMemoryKeyValueStore",
    "SQLiteKeyValueStore",
]
