"""
Data models for OmniVault.

Core models:
- Note, NoteDraft: Vault entity and its partial create/update input
- ChatMessage, ChatRole: Copilot conversation turns
- View: Persisted shell screen
- ImportDraft, GroundedResult, GroundedSource, LookupSelection, LookupResult:
  Generative-AI boundary schemas
- GraphNode: Note with its related notes
"""

from omnivault.models.ai import (
    GraphNode,
    GroundedResult,
    GroundedSource,
    ImportDraft,
    LookupResult,
    LookupSelection,
)
from omnivault.models.chat import ChatMessage, ChatRole
from omnivault.models.note import DEFAULT_TITLE, Note, NoteDraft, normalize_tags
from omnivault.models.view import View

__all__ = [
    # Vault models
    "Note",
    "NoteDraft",
    "DEFAULT_TITLE",
    "normalize_tags",
    # Session models
    "ChatMessage",
    "ChatRole",
    "View",
    # AI boundary models
    "ImportDraft",
    "GroundedResult",
    "GroundedSource",
    "LookupSelection",
    "LookupResult",
    "GraphNode",
]
