"""
Vault Assistant - the generative-AI capability boundary.

Wraps an LLMProvider with the vault's operations: import summarization,
grounded chat, web research, semantic lookup, illustration and audio
briefings. Responses are validated against explicit schemas here so the
rest of the vault never sees raw provider output.

Failure policy:
- User-initiated operations raise LLMError (malformed responses included)
- generate_visual is best effort and returns None on any failure
- smart_lookup degrades to an empty result with a "Search failed." summary
"""

from collections.abc import AsyncIterator, Sequence

from omnivault.config import Config
from omnivault.core.llm.base import LLMProvider
from omnivault.core.tokenizer import Tokenizer
from omnivault.models.ai import GroundedResult, ImportDraft, LookupResult, LookupSelection
from omnivault.models.chat import ChatMessage
from omnivault.models.note import Note
from omnivault.utils.audio import pcm_to_wav
from omnivault.utils.exceptions import LLMError, ValidationError
from omnivault.utils.logger import get_logger

logger = get_logger(__name__)

SYSTEM_INSTRUCTION = """You are the user's personal knowledge concierge.
Default to the user's stored knowledge and decisions. Do not browse the web unless explicitly asked.
Answer with context and continuity, not just facts.
Be concise first: 2-5 sentences unless asked to expand.
When asked about past decisions, prioritize the decision log and linked sources.
When uncertain, say what you checked (which items, which dates) and what is missing.
Never overwhelm: summarize, then offer options."""

CITATION_INSTRUCTION = (
    "When your answer draws on a note, cite it by writing its ID in square brackets, e.g. [note_123]."
)

IMPORT_INSTRUCTION = (
    "Extract the core knowledge from this content. Create a concise title, "
    "a summary for the note body, and relevant tags. Return as JSON."
)

RESEARCH_INSTRUCTION = (
    "You are an advanced research agent. Use web search to find the latest information. "
    "Synthesize how this information relates to the user's current vault. "
    "Provide a structured report."
)

LOOKUP_INSTRUCTION = (
    "You are a semantic search engine. Identify relevant notes. "
    "Summarize findings. Return relevant note IDs."
)

BRIEFING_INSTRUCTION = (
    "Write a short spoken audio briefing that connects the following notes. "
    "Use plain sentences suitable for narration, no markdown, under 200 words."
)

NO_FINDINGS = "No findings found."
SEARCH_FAILED = "Search failed."


class VaultAssistant:
    """
    Generative-AI operations over the vault.

    The assistant never mutates the note store; its results are handed to
    the lifecycle manager as ordinary note input.
    """

    def __init__(
        self,
        llm: LLMProvider,
        config: Config | None = None,
        tokenizer: Tokenizer | None = None,
    ):
        """
        Initialize vault assistant.

        Args:
            llm: Generative-AI provider
            config: Main configuration (defaults if not provided)
            tokenizer: Token counter for context budgeting
        """
        self.llm = llm
        self.config = config or Config()
        self.tokenizer = tokenizer or Tokenizer(self.config.tokenizer)

    # ═══════════════════════════════════════════════════════════
    # CONTEXT
    # ═══════════════════════════════════════════════════════════

    def notes_context(self, notes: Sequence[Note]) -> str:
        """
        Render notes as prompt context within the token budget.

        Notes are taken in collection order (most recent first). A note too
        large for the remaining budget is skipped in favour of smaller ones,
        and any budget left at the end holds the start of the first one skipped.
        """
        blocks = [f"ID: {n.id} TITLE: {n.title} CONTENT: {n.content}" for n in notes]
        selected = self.tokenizer.fit_to_budget(blocks, self.config.vault.context_token_budget)
        if len(selected) < len(blocks):
            logger.debug(f"Vault context truncated to {len(selected)}/{len(blocks)} notes")
        return "\n---\n".join(selected)

    # ═══════════════════════════════════════════════════════════
    # OPERATIONS
    # ═══════════════════════════════════════════════════════════

    async def summarize_import(self, raw_text: str) -> ImportDraft:
        """
        Distill pasted or imported text into a note payload.

        Raises:
            ValidationError: If raw_text is blank
            LLMError: If the provider fails or returns a malformed payload
        """
        if not raw_text or not raw_text.strip():
            raise ValidationError("Nothing to import")

        result = await self._structured(
            f"Content to process:\n{raw_text}", ImportDraft, system=IMPORT_INSTRUCTION
        )
        logger.info(f"Summarized import: {result.title!r}", extra={"tags": result.tags})
        return result

    async def chat_stream(
        self, message: str, history: Sequence[ChatMessage], notes: Sequence[Note]
    ) -> AsyncIterator[str]:
        """
        Stream a grounded copilot reply.

        Args:
            message: Latest user message
            history: Prior conversation, oldest first
            notes: Current collection used as knowledge context

        Yields:
            Reply text chunks

        Raises:
            LLMError: If the provider fails
        """
        system = (
            f"{SYSTEM_INSTRUCTION}\n\n{CITATION_INSTRUCTION}\n\n"
            f"Available Knowledge Vault:\n{self.notes_context(notes)}"
        )
        turns = [{"role": m.role.value, "content": m.text} for m in history if m.text]

        async for chunk in self.llm.stream(
            message,
            system=system,
            history=turns,
            max_tokens=self.config.llm.max_tokens,
            temperature=self.config.llm.temperature,
        ):
            yield chunk

    async def chat(
        self, message: str, history: Sequence[ChatMessage], notes: Sequence[Note]
    ) -> str:
        """Complete copilot reply as a single string."""
        chunks = [chunk async for chunk in self.chat_stream(message, history, notes)]
        return "".join(chunks)

    async def research_query(self, query: str, vault_context: str) -> GroundedResult:
        """
        Web-grounded research report related to the vault.

        Raises:
            ValidationError: If query is blank
            LLMError: If the provider fails or lacks web search
        """
        if not query or not query.strip():
            raise ValidationError("Research query cannot be empty")

        result = await self.llm.grounded_search(
            f"Vault Context:\n{vault_context}\n\nResearch Query: {query}",
            system=RESEARCH_INSTRUCTION,
        )
        if not result.text.strip():
            result = result.model_copy(update={"text": NO_FINDINGS})

        logger.info(
            f"Research complete: {len(result.sources)} sources",
            extra={"query": query, "sources": len(result.sources)},
        )
        return result

    async def smart_lookup(self, query: str, notes: Sequence[Note]) -> LookupResult:
        """
        Semantic lookup over the vault.

        Returns:
            Selected notes in collection order, each annotated with the
            configured relevance score; an empty result with a failure
            summary if the provider fails
        """
        if not query or not query.strip() or not notes:
            return LookupResult(notes=[], summary="")

        context = "\n---\n".join(
            f"ID: {n.id}\nTitle: {n.title}\nContent: {n.content}" for n in notes
        )
        try:
            selection = await self._structured(
                f"Query: {query}\n\nNotes Context:\n{context}",
                LookupSelection,
                system=LOOKUP_INSTRUCTION,
            )
        except LLMError as e:
            logger.warning(f"Smart lookup failed: {e}", extra={"query": query})
            return LookupResult(notes=[], summary=SEARCH_FAILED)

        wanted = set(selection.relevant_ids)
        relevance = self.config.vault.lookup_relevance
        matched = [note.with_relevance(relevance) for note in notes if note.id in wanted]
        return LookupResult(notes=matched, summary=selection.summary)

    async def generate_visual(self, title: str, content: str) -> str | None:
        """
        Best-effort illustration for a note.

        Returns:
            Image URL or data URI, None on any failure
        """
        prompt = (
            f"A minimal, atmospheric conceptual illustration for a knowledge note titled "
            f"'{title}'. Theme: {content[:500]}. No text in the image."
        )
        try:
            return await self.llm.generate_image(prompt)
        except Exception as e:
            logger.warning(
                f"Visual generation failed: {e}",
                extra={"title": title, "error_type": type(e).__name__},
            )
            return None

    async def audio_briefing(self, notes: Sequence[Note]) -> bytes:
        """
        Narrated briefing over the leading notes, as a WAV file.

        Raises:
            ValidationError: If there are no notes to brief on
            LLMError: If script generation or speech synthesis fails
        """
        if not notes:
            raise ValidationError("The Vault must contain entries before a synthesis can occur.")

        selected = list(notes)[: self.config.vault.briefing_note_count]
        material = "\n\n".join(f"{n.title}\n{n.content}" for n in selected)
        script = await self.llm.complete(
            material,
            system=BRIEFING_INSTRUCTION,
            max_tokens=self.config.llm.max_tokens,
            temperature=self.config.llm.temperature,
        )
        pcm = await self.llm.synthesize_speech(str(script))
        logger.info(f"Audio briefing synthesized: {len(pcm)} PCM bytes")
        return pcm_to_wav(pcm)

    # ═══════════════════════════════════════════════════════════
    # HELPER METHODS
    # ═══════════════════════════════════════════════════════════

    async def _structured(self, prompt: str, schema, system: str | None = None):
        """Structured completion; malformed output is reported as LLMError."""
        try:
            result = await self.llm.complete(
                prompt,
                response_format=schema,
                system=system,
                max_tokens=self.config.llm.max_tokens,
                temperature=self.config.llm.temperature,
            )
        except ValidationError as e:
            raise LLMError(f"Malformed AI response: {e.message}") from e

        if not isinstance(result, schema):
            try:
                result = schema.model_validate(result)
            except Exception as e:
                raise LLMError(f"Malformed AI response: {e}") from e
        return result
