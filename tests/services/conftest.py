"""Fixtures for service tests.

Services are wired to the in-memory key-value store and the scripted fake
LLM from the top-level conftest, so no test needs a network or a disk.
"""

from collections.abc import AsyncGenerator

import pytest

from omnivault.services import NoteLifecycleManager, Vault, VaultAssistant


@pytest.fixture
def assistant(fake_llm, test_config) -> VaultAssistant:
    """Vault assistant over the fake LLM."""
    return VaultAssistant(fake_llm, test_config)


@pytest.fixture
def lifecycle(note_store, assistant, test_config) -> NoteLifecycleManager:
    """Lifecycle manager with enrichment enabled."""
    return NoteLifecycleManager(note_store, assistant, test_config.vault)


@pytest.fixture
async def vault(test_config, kv_store, fake_llm) -> AsyncGenerator[Vault, None]:
    """Initialized vault starting from an empty collection."""
    await kv_store.set("omnivault_notes", "[]")
    v = Vault(test_config, kv_store, fake_llm)
    await v.initialize()
    yield v
    await v.close()
