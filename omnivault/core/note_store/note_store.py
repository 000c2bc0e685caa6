"""
In-memory note store - source of truth for the running session.

All mutations are synchronous and run to completion on the event loop, so
they never interleave. Each mutation schedules a write of the full
collection; writes are serialized in scheduling order and each persists the
snapshot taken when it was scheduled.
"""

import asyncio
from collections.abc import Iterable, Iterator
from typing import Any

from omnivault.core.persistence.adapter import VaultPersistence
from omnivault.models.note import Note
from omnivault.utils.exceptions import PersistenceError
from omnivault.utils.logger import get_logger

logger = get_logger(__name__)


class NoteStore:
    """
    Ordered note collection, most recent activity first.

    The store owns every Note. Callers should re-fetch by id after any
    mutation instead of holding references, since load() replaces the whole
    collection.
    """

    def __init__(self, persistence: VaultPersistence | None = None):
        """
        Initialize note store.

        Args:
            persistence: Adapter used for loading and background writes
                (None keeps the store purely in memory)
        """
        self.persistence = persistence
        self._notes: list[Note] = []
        self._write_lock = asyncio.Lock()
        self._pending: set[asyncio.Task] = set()
        self._dirty = False

    # ═══════════════════════════════════════════════════════════
    # READ ACCESS
    # ═══════════════════════════════════════════════════════════

    def all(self) -> list[Note]:
        """Snapshot of the collection in display order."""
        return list(self._notes)

    def get(self, note_id: str) -> Note | None:
        """Look up a note by id."""
        for note in self._notes:
            if note.id == note_id:
                return note
        return None

    def contains(self, note_id: str) -> bool:
        """Whether a note with this id exists."""
        return self.get(note_id) is not None

    def __len__(self) -> int:
        return len(self._notes)

    def __iter__(self) -> Iterator[Note]:
        return iter(self.all())

    # ═══════════════════════════════════════════════════════════
    # MUTATIONS
    # ═══════════════════════════════════════════════════════════

    async def load(self) -> list[Note]:
        """
        Replace the collection with persisted notes.

        Returns:
            Loaded notes (seed collection on missing or malformed data)
        """
        if self.persistence is None:
            return self.all()

        notes = await self.persistence.load_notes()
        self._notes = list(notes)
        logger.info(f"Loaded {len(self._notes)} notes")
        return self.all()

    def replace_all(self, notes: Iterable[Note]) -> None:
        """Atomically swap the whole collection."""
        self._notes = list(notes)
        self._schedule_persist()

    def upsert(self, note: Note) -> Note:
        """
        Insert a note, or replace the note with the same id.

        The note moves to the front of the collection.
        """
        self._notes = [note] + [n for n in self._notes if n.id != note.id]
        logger.debug(f"Upserted note: {note.id}", extra={"note_id": note.id})
        self._schedule_persist()
        return note

    def patch(self, note_id: str, **fields: Any) -> Note | None:
        """
        Update fields of an existing note in place, keeping its position.

        Args:
            note_id: Target note id
            **fields: Attribute values to replace

        Returns:
            Patched note, or None if the id no longer resolves
        """
        for index, note in enumerate(self._notes):
            if note.id == note_id:
                patched = note.model_copy(update=fields)
                self._notes[index] = patched
                self._schedule_persist()
                return patched
        return None

    def remove(self, note_id: str) -> bool:
        """
        Delete a note by id. Absent ids are a no-op.

        Returns:
            True if a note was removed
        """
        remaining = [n for n in self._notes if n.id != note_id]
        if len(remaining) == len(self._notes):
            return False
        self._notes = remaining
        logger.debug(f"Removed note: {note_id}", extra={"note_id": note_id})
        self._schedule_persist()
        return True

    # ═══════════════════════════════════════════════════════════
    # PERSISTENCE
    # ═══════════════════════════════════════════════════════════

    async def flush(self) -> None:
        """Wait until every scheduled write has completed."""
        while self._pending:
            await asyncio.gather(*list(self._pending), return_exceptions=True)

        if self._dirty and self.persistence is not None:
            self._dirty = False
            await self._write(self.all())

    @property
    def pending_writes(self) -> int:
        """Number of background writes not yet completed."""
        return len(self._pending)

    def _schedule_persist(self) -> None:
        """Schedule a background write of the current snapshot."""
        if self.persistence is None:
            return

        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            # Outside an event loop; flush() writes the latest snapshot later
            self._dirty = True
            return

        snapshot = self.all()
        task = loop.create_task(self._write(snapshot))
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)

    async def _write(self, snapshot: list[Note]) -> None:
        """Persist one snapshot; failures are logged, not raised."""
        async with self._write_lock:
            try:
                await self.persistence.save_notes(snapshot)
            except PersistenceError as e:
                logger.error(
                    f"Failed to persist notes: {e}",
                    extra={"error": str(e), "count": len(snapshot)},
                )
