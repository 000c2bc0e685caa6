"""
Vault services.

- VaultAssistant: generative-AI boundary
- NoteLifecycleManager: note create/update/delete and enrichment
- CopilotSession: chat history and grounded replies
- Vault: facade wiring storage, lifecycle, graph and assistant
"""

from omnivault.services.copilot import CopilotSession
from omnivault.services.note_lifecycle import NoteLifecycleManager
from omnivault.services.vault import Vault
from omnivault.services.vault_assistant import VaultAssistant

__all__ = [
    "CopilotSession",
    "NoteLifecycleManager",
    "Vault",
    "VaultAssistant",
]
