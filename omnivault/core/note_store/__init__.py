"""In-memory note store backed by the persistence adapter."""

from omnivault.core.note_store.note_store import NoteStore

__all__ = ["NoteStore"]
