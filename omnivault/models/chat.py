"""
Chat message model for the vault copilot.

Chat history is session-scoped companion state. linked_note_ids has no
referential integrity against the note store: a linked note may have been
deleted since, and consumers must handle its absence.
"""

from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from omnivault.utils.id_generator import generate_message_id, now_ms


class ChatRole(str, Enum):
    """Author of a chat message."""

    USER = "user"
    ASSISTANT = "assistant"


class ChatMessage(BaseModel):
    """Single copilot conversation turn."""

    model_config = ConfigDict(populate_by_name=True)

    id: str = Field(default_factory=generate_message_id, description="Message ID (msg_xxx)")
    role: ChatRole = Field(..., description="user or assistant")
    text: str = Field(default="", description="Message text")
    timestamp: int = Field(default_factory=now_ms, description="Epoch milliseconds")
    linked_note_ids: list[str] = Field(
        default_factory=list,
        alias="linkedNoteIds",
        description="Note IDs referenced as [id] in an assistant reply",
    )

    def to_storage(self) -> dict[str, Any]:
        """Serialize to the durable JSON shape."""
        data = self.model_dump(by_alias=True, mode="json")
        if not self.linked_note_ids:
            data.pop("linkedNoteIds")
        return data

    @classmethod
    def from_storage(cls, data: dict[str, Any]) -> "ChatMessage":
        """Validate one stored record."""
        return cls.model_validate(data)
