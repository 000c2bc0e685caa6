"""
Vault persistence adapter.

Serializes notes and session companion state (chat history, current view,
drafts, last research result) to a KeyValueStore. Loading is tolerant: a
missing key, unreadable backend or malformed value falls back to a documented
default and is never propagated to the caller.
"""

import json
from collections.abc import Sequence
from typing import Any

from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from omnivault.core.kv_store.base import KeyValueStore
from omnivault.core.persistence.seed import initial_notes
from omnivault.models.ai import GroundedResult
from omnivault.models.chat import ChatMessage
from omnivault.models.note import Note
from omnivault.models.view import View
from omnivault.utils.exceptions import PersistenceError, StoreError
from omnivault.utils.logger import get_logger

logger = get_logger(__name__)


class StorageKeys(BaseModel):
    """Key names for each persisted value."""

    prefix: str = "omnivault"

    @property
    def notes(self) -> str:
        return f"{self.prefix}_notes"

    @property
    def chat(self) -> str:
        return f"{self.prefix}_chat"

    @property
    def view(self) -> str:
        return f"{self.prefix}_view"

    @property
    def research(self) -> str:
        return f"{self.prefix}_last_research"

    def draft(self, name: str) -> str:
        return f"{self.prefix}_draft_{name}"


class VaultPersistence:
    """
    Durable storage for the note collection and session state.

    Every save writes a complete replacement value under a single key.
    """

    def __init__(self, kv_store: KeyValueStore, keys: StorageKeys | None = None):
        """
        Initialize persistence adapter.

        Args:
            kv_store: Underlying key-value backend
            keys: Storage key names (default prefix "omnivault")
        """
        self.kv_store = kv_store
        self.keys = keys or StorageKeys()

    # ═══════════════════════════════════════════════════════════
    # NOTES
    # ═══════════════════════════════════════════════════════════

    async def save_notes(self, notes: Sequence[Note]) -> None:
        """
        Persist the full ordered note collection.

        Raises:
            PersistenceError: If the backend write fails
        """
        payload = [note.to_storage() for note in notes]
        await self._write(self.keys.notes, payload)

    async def load_notes(self) -> list[Note]:
        """
        Load the ordered note collection.

        Returns:
            Stored notes; the seed collection when the key is missing, the
            value is not a JSON array, or no stored record is valid
        """
        data = await self._read(self.keys.notes)
        if data is None:
            return initial_notes()
        if not isinstance(data, list):
            logger.warning(
                "Stored notes are not an array, using seed collection",
                extra={"key": self.keys.notes, "type": type(data).__name__},
            )
            return initial_notes()

        notes: list[Note] = []
        seen: set[str] = set()
        for record in data:
            try:
                note = Note.from_storage(record)
            except (PydanticValidationError, TypeError) as e:
                logger.warning(f"Skipping malformed stored note: {e}")
                continue
            if note.id in seen:
                logger.warning(f"Skipping duplicate stored note id: {note.id}")
                continue
            seen.add(note.id)
            notes.append(note)

        if data and not notes:
            logger.warning("No stored note could be read, using seed collection")
            return initial_notes()

        return notes

    # ═══════════════════════════════════════════════════════════
    # SESSION STATE
    # ═══════════════════════════════════════════════════════════

    async def save_chat_history(self, messages: Sequence[ChatMessage]) -> None:
        """Persist the copilot conversation."""
        await self._write(self.keys.chat, [message.to_storage() for message in messages])

    async def load_chat_history(self) -> list[ChatMessage]:
        """Load the copilot conversation (empty when missing or malformed)."""
        data = await self._read(self.keys.chat)
        if not isinstance(data, list):
            return []

        messages: list[ChatMessage] = []
        for record in data:
            try:
                messages.append(ChatMessage.from_storage(record))
            except (PydanticValidationError, TypeError) as e:
                logger.warning(f"Skipping malformed chat message: {e}")
        return messages

    async def save_view(self, view: View) -> None:
        """Persist the current screen."""
        await self._write(self.keys.view, view.value, raw=True)

    async def load_view(self) -> View:
        """Load the current screen (DASHBOARD when missing or unknown)."""
        raw = await self._read_raw(self.keys.view)
        return View.parse(raw)

    async def save_draft(self, name: str, text: str) -> None:
        """Persist in-progress text for a named input."""
        await self._write(self.keys.draft(name), text, raw=True)

    async def load_draft(self, name: str) -> str:
        """Load in-progress text for a named input (empty when missing)."""
        return await self._read_raw(self.keys.draft(name)) or ""

    async def save_research(self, result: GroundedResult | None) -> None:
        """Persist the last research result; None clears it."""
        if result is None:
            await self.kv_store.delete(self.keys.research)
            return
        await self._write(self.keys.research, result.model_dump())

    async def load_research(self) -> GroundedResult | None:
        """Load the last research result, if any."""
        data = await self._read(self.keys.research)
        if data is None:
            return None
        try:
            return GroundedResult.model_validate(data)
        except PydanticValidationError as e:
            logger.warning(f"Discarding malformed research result: {e}")
            return None

    # ═══════════════════════════════════════════════════════════
    # HELPER METHODS
    # ═══════════════════════════════════════════════════════════

    async def _write(self, key: str, value: Any, raw: bool = False) -> None:
        """Serialize and store a complete replacement value."""
        serialized = value if raw else json.dumps(value, ensure_ascii=False)
        try:
            await self.kv_store.set(key, serialized)
        except StoreError as e:
            raise PersistenceError(f"Failed to persist {key}: {e.message}", {"key": key}) from e

    async def _read_raw(self, key: str) -> str | None:
        """Read a raw value, treating backend failures as a missing key."""
        try:
            return await self.kv_store.get(key)
        except StoreError as e:
            logger.warning(f"Storage read failed for {key}, using default: {e}")
            return None

    async def _read(self, key: str) -> Any:
        """Read and decode a JSON value; None when missing or unparseable."""
        raw = await self._read_raw(key)
        if raw is None:
            return None
        try:
            return json.loads(raw)
        except (json.JSONDecodeError, TypeError):
            logger.warning(f"Stored value under {key} is not valid JSON, using default")
            return None
