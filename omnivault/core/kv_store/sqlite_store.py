"""
SQLite key-value store implementation.

Single-table store using aiosqlite. Each write is one INSERT OR REPLACE
committed on its own, which gives whole-value replacement semantics.
"""

from datetime import datetime
from pathlib import Path

import aiosqlite

from omnivault.core.kv_store.base import KeyValueStore
from omnivault.utils.exceptions import StoreError
from omnivault.utils.logger import get_logger

logger = get_logger(__name__)


class SQLiteKeyValueStore(KeyValueStore):
    """
    SQLite-based key-value store.

    Features:
    - Fast local storage
    - Atomic whole-value replacement per key
    - WAL journal for crash safety
    """

    def __init__(self, db_path: str = "data/omnivault.db"):
        """
        Initialize SQLite key-value store.

        Args:
            db_path: Path to SQLite database file (":memory:" for a private in-memory db)
        """
        self.db_path = db_path
        self.connection: aiosqlite.Connection | None = None

        if db_path != ":memory:":
            Path(db_path).parent.mkdir(parents=True, exist_ok=True)

    async def connect(self) -> None:
        """Establish connection to SQLite."""
        if self.connection is None:
            self.connection = await aiosqlite.connect(self.db_path)
            await self.connection.execute("PRAGMA journal_mode = WAL")
            await self.connection.commit()

    async def initialize(self) -> None:
        """Initialize database schema."""
        await self.connect()

        await self.connection.execute(
            """
            CREATE TABLE IF NOT EXISTS kv (
                key TEXT PRIMARY KEY,
                value TEXT NOT NULL,
                updated_at TEXT NOT NULL
            )
        """
        )
        await self.connection.commit()
        logger.debug(f"SQLite key-value store ready: {self.db_path}")

    async def get(self, key: str) -> str | None:
        """Read the value stored under a key."""
        await self.connect()

        try:
            async with self.connection.execute("SELECT value FROM kv WHERE key = ?", (key,)) as cursor:
                row = await cursor.fetchone()
        except aiosqlite.Error as e:
            raise StoreError(f"Failed to read key {key}: {e}", {"key": key}) from e

        return row[0] if row else None

    async def set(self, key: str, value: str) -> None:
        """Replace the value stored under a key."""
        await self.connect()

        try:
            await self.connection.execute(
                "INSERT OR REPLACE INTO kv (key, value, updated_at) VALUES (?, ?, ?)",
                (key, value, datetime.now().isoformat()),
            )
            await self.connection.commit()
        except aiosqlite.Error as e:
            raise StoreError(f"Failed to write key {key}: {e}", {"key": key}) from e

    async def delete(self, key: str) -> None:
        """Remove a key."""
        await self.connect()

        try:
            await self.connection.execute("DELETE FROM kv WHERE key = ?", (key,))
            await self.connection.commit()
        except aiosqlite.Error as e:
            raise StoreError(f"Failed to delete key {key}: {e}", {"key": key}) from e

    async def keys(self, prefix: str = "") -> list[str]:
        """List stored keys with an optional prefix."""
        await self.connect()

        async with self.connection.execute(
            # substr instead of LIKE: "_" in key prefixes is a LIKE wildcard
            "SELECT key FROM kv WHERE substr(key, 1, ?) = ? ORDER BY key",
            (len(prefix), prefix),
        ) as cursor:
            rows = await cursor.fetchall()

        return [row[0] for row in rows]

    async def close(self) -> None:
        """Close the connection."""
        if self.connection is not None:
            await self.connection.close()
            self.connection = None
