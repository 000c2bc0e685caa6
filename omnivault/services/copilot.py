"""
Copilot session - conversational access to the vault.

Keeps the chat history, streams assistant replies grounded in the current
notes and converts [id] references in replies into linked_note_ids.
"""

import asyncio
from collections.abc import AsyncIterator

from omnivault.core.graph.mentions import detect_linked_note_ids
from omnivault.core.note_store import NoteStore
from omnivault.core.persistence.adapter import VaultPersistence
from omnivault.models.chat import ChatMessage, ChatRole
from omnivault.services.vault_assistant import VaultAssistant
from omnivault.utils.exceptions import LLMError, PersistenceError
from omnivault.utils.logger import get_logger

logger = get_logger(__name__)

DISRUPTED_NOTICE = "Neural link disrupted. Error synchronizing with Vault."


class CopilotSession:
    """Chat history plus the send/stream flow of the copilot screen."""

    def __init__(
        self,
        assistant: VaultAssistant,
        store: NoteStore,
        persistence: VaultPersistence | None = None,
        history: list[ChatMessage] | None = None,
    ):
        """
        Initialize copilot session.

        Args:
            assistant: AI boundary producing replies
            store: Note store providing knowledge context
            persistence: Adapter used to save history after each turn
            history: Previously persisted conversation
        """
        self.assistant = assistant
        self.store = store
        self.persistence = persistence
        self._history: list[ChatMessage] = list(history or [])
        self._turn_lock = asyncio.Lock()

    @property
    def history(self) -> list[ChatMessage]:
        """Conversation so far, oldest first."""
        return list(self._history)

    async def load(self) -> list[ChatMessage]:
        """Replace the history with the persisted conversation."""
        if self.persistence is not None:
            self._history = await self.persistence.load_chat_history()
        return self.history

    async def send(self, text: str) -> ChatMessage | None:
        """
        Send a user message and wait for the full reply.

        Returns:
            The assistant message (the disruption notice on provider
            failure), or None for blank input
        """
        if not text or not text.strip():
            return None

        async for _ in self._converse(text):
            pass
        # _converse always ends the turn with an assistant message
        return self._history[-1]

    async def stream(self, text: str) -> AsyncIterator[str]:
        """
        Send a user message and yield reply chunks as they arrive.

        The completed reply is appended to the history when the stream ends.
        """
        async for chunk in self._converse(text):
            yield chunk

    async def clear(self) -> None:
        """Purge the conversation."""
        self._history = []
        await self._save()
        logger.info("Copilot history cleared")

    async def _converse(self, text: str) -> AsyncIterator[str]:
        if not text or not text.strip():
            return

        # One turn at a time, so each reply directly follows its message
        async with self._turn_lock:
            prior = list(self._history)
            self._history.append(ChatMessage(role=ChatRole.USER, text=text))

            parts: list[str] = []
            try:
                async for chunk in self.assistant.chat_stream(text, prior, self.store.all()):
                    parts.append(chunk)
                    yield chunk
            except LLMError as e:
                logger.error(f"Copilot reply failed: {e}", extra={"error": str(e)})
                self._history.append(ChatMessage(role=ChatRole.ASSISTANT, text=DISRUPTED_NOTICE))
                await self._save()
                return

            reply_text = "".join(parts) or "..."
            self._history.append(
                ChatMessage(
                    role=ChatRole.ASSISTANT,
                    text=reply_text,
                    linked_note_ids=detect_linked_note_ids(reply_text, self.store.all()),
                )
            )
            await self._save()

    async def _save(self) -> None:
        if self.persistence is None:
            return
        try:
            await self.persistence.save_chat_history(self._history)
        except PersistenceError as e:
            logger.error(f"Failed to persist chat history: {e}")
