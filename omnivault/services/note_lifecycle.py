"""
Note Lifecycle Manager - mediates every note creation, edit and deletion.

Saves are synchronous: the note is visible in the store before any
enrichment is dispatched. Enrichment (illustration generation) runs as a
background task and is applied as a second, independent mutation, guarded by
an existence check so results for deleted notes are dropped.
"""

import asyncio
from typing import Any

from omnivault.config import VaultConfig
from omnivault.core.note_store import NoteStore
from omnivault.models.ai import GroundedResult, GroundedSource
from omnivault.models.note import Note, NoteDraft
from omnivault.services.vault_assistant import VaultAssistant
from omnivault.utils.exceptions import ValidationError
from omnivault.utils.id_generator import generate_note_id, now_ms
from omnivault.utils.logger import get_logger

logger = get_logger(__name__)

RESEARCH_TAGS = ["research", "ai-synthesis"]
RESEARCH_SOURCE_TAGS = ["research-source"]


class NoteLifecycleManager:
    """
    Enforces note invariants before handing notes to the store.

    There is no invalid-note state: missing fields are defaulted rather than
    rejected, so every save produces a well-formed Note.
    """

    def __init__(
        self,
        store: NoteStore,
        assistant: VaultAssistant | None = None,
        config: VaultConfig | None = None,
    ):
        """
        Initialize lifecycle manager.

        Args:
            store: Note store receiving every mutation
            assistant: Optional AI boundary used for enrichment and imports
            config: Vault tuning (placeholder title, enrichment threshold)
        """
        self.store = store
        self.assistant = assistant
        self.config = config or VaultConfig()

        self._enrichment_tasks: set[asyncio.Task] = set()

    # ═══════════════════════════════════════════════════════════
    # CREATE / UPDATE / DELETE
    # ═══════════════════════════════════════════════════════════

    def create_or_update(
        self,
        draft: NoteDraft | dict[str, Any],
        existing: Note | None = None,
    ) -> Note:
        """
        Save a note from partial input.

        With an existing note the id is kept, present draft fields replace
        the old values and absent ones fall back to them; image_url survives
        unless the draft supplies a replacement. Without one, a fresh id is
        minted and defaults apply.

        Args:
            draft: Partial note data (NoteDraft or a dict of its fields)
            existing: Note being edited, or None to create

        Returns:
            The saved note, already upserted into the store
        """
        if not isinstance(draft, NoteDraft):
            draft = NoteDraft.model_validate(draft)

        now = now_ms()

        if existing is not None:
            note = Note(
                id=existing.id,
                title=draft.clean_title or existing.title,
                content=draft.content if draft.content is not None else existing.content,
                tags=draft.tags if draft.tags is not None else existing.tags,
                source_url=draft.source_url if draft.source_url is not None else existing.source_url,
                image_url=draft.image_url if draft.image_url is not None else existing.image_url,
                updated_at=max(now, existing.updated_at),
            )
            logger.info(f"Updating note: {note.id}", extra={"note_id": note.id})
        else:
            note = Note(
                id=self._new_id(),
                title=draft.clean_title or self.config.placeholder_title,
                content=draft.content or "",
                tags=draft.tags or [],
                source_url=draft.source_url,
                image_url=draft.image_url,
                updated_at=now,
            )
            logger.info(f"Creating note: {note.id}", extra={"note_id": note.id})

        self.store.upsert(note)
        self._maybe_enrich(note)
        return note

    def delete(self, note_id: str) -> bool:
        """
        Remove a note unconditionally.

        Returns:
            True if a note was removed (deleting an unknown id is a no-op)
        """
        removed = self.store.remove(note_id)
        if removed:
            logger.info(f"Deleted note: {note_id}", extra={"note_id": note_id})
        return removed

    # ═══════════════════════════════════════════════════════════
    # IMPORTS
    # ═══════════════════════════════════════════════════════════

    async def import_content(self, raw_text: str) -> Note:
        """
        Summarize pasted text or a link into a new note.

        The raw input is kept as source_url when it contains a link.

        Raises:
            ValidationError: If no assistant is configured or input is blank
            LLMError: If summarization fails
        """
        if self.assistant is None:
            raise ValidationError("Importing requires a configured AI provider")

        summary = await self.assistant.summarize_import(raw_text)
        draft = NoteDraft(
            title=summary.title,
            content=summary.content,
            tags=summary.tags,
            source_url=raw_text.strip() if "http" in raw_text else None,
        )
        return self.create_or_update(draft)

    def import_research(self, query: str, result: GroundedResult) -> Note:
        """Save a research report as a new note."""
        return self.create_or_update(
            NoteDraft(title=f"Research: {query}", content=result.text, tags=RESEARCH_TAGS)
        )

    def import_research_source(self, query: str, source: GroundedSource) -> Note:
        """Save one research source as a new note linking back to it."""
        return self.create_or_update(
            NoteDraft(
                title=source.title,
                content=(
                    f"Source: {source.uri}\n\n"
                    f"Abstracted from Research Lab session regarding: {query}"
                ),
                source_url=source.uri or None,
                tags=RESEARCH_SOURCE_TAGS,
            )
        )

    # ═══════════════════════════════════════════════════════════
    # ENRICHMENT
    # ═══════════════════════════════════════════════════════════

    @property
    def pending_enrichments(self) -> int:
        """Number of enrichment tasks still in flight."""
        return len(self._enrichment_tasks)

    async def wait_for_enrichment(self) -> None:
        """Wait for every in-flight enrichment task to finish."""
        while self._enrichment_tasks:
            await asyncio.gather(*list(self._enrichment_tasks), return_exceptions=True)

    def _should_enrich(self, note: Note) -> bool:
        return (
            self.assistant is not None
            and self.config.enable_enrichment
            and not note.image_url
            and len(note.content) > self.config.enrichment_min_content_length
        )

    def _maybe_enrich(self, note: Note) -> None:
        """Dispatch background enrichment for a freshly saved note."""
        if not self._should_enrich(note):
            return

        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            logger.debug(f"No running event loop, skipping enrichment for {note.id}")
            return

        task = loop.create_task(self._enrich(note.id, note.title, note.content))
        self._enrichment_tasks.add(task)
        task.add_done_callback(self._enrichment_tasks.discard)

    async def _enrich(self, note_id: str, title: str, content: str) -> None:
        """Generate an illustration and attach it if the note still exists."""
        try:
            image_url = await self.assistant.generate_visual(title, content)
        except Exception as e:
            logger.warning(f"Enrichment failed for {note_id}: {e}", extra={"note_id": note_id})
            return

        if not image_url:
            return

        current = self.store.get(note_id)
        if current is None:
            logger.debug(f"Dropping enrichment for deleted note: {note_id}")
            return
        if current.image_url:
            # Re-saved with an explicit image while generation was in flight
            return

        self.store.patch(
            note_id, image_url=image_url, updated_at=max(now_ms(), current.updated_at)
        )
        logger.info(f"Attached illustration to note: {note_id}", extra={"note_id": note_id})

    # ═══════════════════════════════════════════════════════════
    # HELPER METHODS
    # ═══════════════════════════════════════════════════════════

    def _new_id(self) -> str:
        """Mint a note id not present in the store."""
        note_id = generate_note_id()
        while self.store.contains(note_id):
            note_id = generate_note_id()
        return note_id
