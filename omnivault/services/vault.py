"""
Vault - single entry point wiring storage, lifecycle, graph and assistant.

Collaborators (key-value backend, AI provider) are injected so tests can
substitute in-memory fakes.
"""

from typing import Any

from omnivault.config import Config
from omnivault.core.graph.mentions import resolve_mentions, suggest_mentions, suggest_tags
from omnivault.core.graph.similarity import build_graph, related_notes
from omnivault.core.kv_store.base import KeyValueStore
from omnivault.core.llm.base import LLMProvider
from omnivault.core.note_store import NoteStore
from omnivault.core.persistence.adapter import StorageKeys, VaultPersistence
from omnivault.models.ai import GraphNode, GroundedResult, LookupResult
from omnivault.models.note import Note
from omnivault.models.view import View
from omnivault.services.copilot import CopilotSession
from omnivault.services.note_lifecycle import NoteLifecycleManager
from omnivault.services.vault_assistant import VaultAssistant
from omnivault.utils.exceptions import ConfigurationError, NotFoundError
from omnivault.utils.logger import get_logger

logger = get_logger(__name__)


class Vault:
    """
    Knowledge vault facade.

    Usage:
        vault = Vault(config, kv_store, llm)
        await vault.initialize()
        note = vault.lifecycle.create_or_update({"title": "Alpha", "content": "..."})
        related = vault.related(note.id)
        await vault.close()
    """

    def __init__(
        self,
        config: Config,
        kv_store: KeyValueStore,
        llm: LLMProvider | None = None,
    ):
        """
        Initialize vault.

        Args:
            config: Main configuration
            kv_store: Local key-value backend
            llm: Optional generative-AI provider (AI features disabled without one)
        """
        self.config = config
        self.kv_store = kv_store
        self.llm = llm

        self.persistence = VaultPersistence(kv_store, StorageKeys(prefix=config.storage.key_prefix))
        self.store = NoteStore(self.persistence)
        self.assistant = VaultAssistant(llm, config) if llm is not None else None
        self.lifecycle = NoteLifecycleManager(self.store, self.assistant, config.vault)
        self.copilot = (
            CopilotSession(self.assistant, self.store, self.persistence)
            if self.assistant is not None
            else None
        )
        self.view = View.DASHBOARD

    # ═══════════════════════════════════════════════════════════
    # LIFECYCLE MANAGEMENT
    # ═══════════════════════════════════════════════════════════

    async def initialize(self) -> None:
        """Open storage and rehydrate notes, chat history and view."""
        await self.kv_store.initialize()
        await self.store.load()
        if self.copilot is not None:
            await self.copilot.load()
        self.view = await self.persistence.load_view()
        logger.info(
            f"Vault initialized: {len(self.store)} notes, view={self.view.value}",
            extra={"ai_enabled": self.assistant is not None},
        )

    async def close(self) -> None:
        """Drain background work, flush writes and close collaborators."""
        logger.info("Shutting down vault")
        await self.lifecycle.wait_for_enrichment()
        await self.store.flush()
        await self.kv_store.close()
        if self.llm is not None:
            await self.llm.close()
        logger.info("Vault shutdown complete")

    # ═══════════════════════════════════════════════════════════
    # NOTES AND GRAPH
    # ═══════════════════════════════════════════════════════════

    def get_note(self, note_id: str) -> Note:
        """
        Fetch a note by id.

        Raises:
            NotFoundError: If no such note exists
        """
        note = self.store.get(note_id)
        if note is None:
            raise NotFoundError(f"Note not found: {note_id}", {"note_id": note_id})
        return note

    def recent(self, limit: int | None = None) -> list[Note]:
        """Most recently active notes."""
        return self.store.all()[: limit or self.config.vault.recent_limit]

    def related(self, note_id: str) -> list[Note]:
        """Most related notes for a note."""
        vault = self.config.vault
        return related_notes(
            self.get_note(note_id),
            self.store.all(),
            limit=vault.related_limit,
            tag_weight=vault.tag_weight,
            title_word_weight=vault.title_word_weight,
            containment_weight=vault.containment_weight,
            min_title_word_length=vault.min_title_word_length,
        )

    def graph(self) -> list[GraphNode]:
        """Knowledge graph: every note with its related notes."""
        vault = self.config.vault
        return build_graph(
            self.store.all(),
            limit=vault.related_limit,
            tag_weight=vault.tag_weight,
            title_word_weight=vault.title_word_weight,
            containment_weight=vault.containment_weight,
            min_title_word_length=vault.min_title_word_length,
        )

    def mentions(self, note_id: str) -> list[Note]:
        """Notes referenced by [[Title]] mentions in a note."""
        return resolve_mentions(self.get_note(note_id), self.store.all())

    def suggest_tags(self, query: str, active_tags: list[str] | None = None) -> list[str]:
        return suggest_tags(query, self.store.all(), active_tags or [])

    def suggest_mentions(self, query: str) -> list[Note]:
        return suggest_mentions(query, self.store.all())

    # ═══════════════════════════════════════════════════════════
    # AI FLOWS
    # ═══════════════════════════════════════════════════════════

    def notes_context(self) -> str:
        """Current vault rendered as assistant context."""
        return self._require_assistant().notes_context(self.store.all())

    async def lookup(self, query: str) -> LookupResult:
        """Semantic lookup over the current notes."""
        return await self._require_assistant().smart_lookup(query, self.store.all())

    async def import_content(self, raw_text: str) -> Note:
        """Summarize pasted text or a link into a new note."""
        self._require_assistant()
        return await self.lifecycle.import_content(raw_text)

    async def research(self, query: str) -> GroundedResult:
        """Run a grounded research query and remember it for the research screen."""
        assistant = self._require_assistant()
        await self.persistence.save_draft("research_query", query)
        result = await assistant.research_query(query, self.notes_context())
        await self.persistence.save_research(result)
        return result

    async def last_research(self) -> GroundedResult | None:
        """Most recent research result, kept across restarts."""
        return await self.persistence.load_research()

    async def briefing(self) -> bytes:
        """WAV audio briefing over the most recent notes."""
        return await self._require_assistant().audio_briefing(self.store.all())

    # ═══════════════════════════════════════════════════════════
    # VIEW
    # ═══════════════════════════════════════════════════════════

    async def set_view(self, view: View | str) -> View:
        """Switch screens and persist the choice (unknown names keep the current view)."""
        self.view = View.parse(view, default=self.view)
        await self.persistence.save_view(self.view)
        return self.view

    async def statistics(self) -> dict[str, Any]:
        """Vault statistics."""
        notes = self.store.all()
        tags = {tag for note in notes for tag in note.tags}
        return {
            "notes": {
                "total": len(notes),
                "illustrated": sum(1 for n in notes if n.image_url),
                "imported": sum(1 for n in notes if n.source_url),
            },
            "tags": len(tags),
            "chat_messages": len(self.copilot.history) if self.copilot else 0,
            "pending_enrichments": self.lifecycle.pending_enrichments,
            "pending_writes": self.store.pending_writes,
            "view": self.view.value,
        }

    # ═══════════════════════════════════════════════════════════
    # HELPER METHODS
    # ═══════════════════════════════════════════════════════════

    def _require_assistant(self) -> VaultAssistant:
        if self.assistant is None:
            raise ConfigurationError("This operation requires a configured AI provider")
        return self.assistant
