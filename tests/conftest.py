"""
Shared test fixtures for all test modules.

Provides an in-memory fake LLM provider, an in-memory key-value store and a
config that never touches the network or the filesystem.
"""

import asyncio
from collections.abc import AsyncIterator, Callable
from typing import Any

import pytest
from pydantic import BaseModel

from omnivault.config import Config, LoggingConfig, StorageConfig, TokenizerConfig
from omnivault.core.kv_store.memory_store import InMemoryKeyValueStore
from omnivault.core.llm.base import LLMProvider
from omnivault.core.note_store import NoteStore
from omnivault.core.persistence.adapter import VaultPersistence
from omnivault.models.ai import GroundedResult, GroundedSource
from omnivault.models.note import Note
from omnivault.utils.exceptions import LLMError


class FakeLLM(LLMProvider):
    """
    Scripted LLM provider.

    Tests set the canned outputs on the instance. Capabilities listed in
    `failing` raise LLMError. Setting `image_gate` or `stream_gate` to an
    asyncio.Event holds image generation or chat streaming until it is set.
    """

    def __init__(self):
        self.text = "Scripted completion."
        self.chunks = ["Hello ", "from ", "the vault."]
        self.structured: dict[type, Any] = {}
        self.grounded = GroundedResult(
            text="Latest findings on Mars habitats.",
            sources=[GroundedSource(title="NASA", uri="https://nasa.gov/mars")],
        )
        self.image: str | None = "data:image/png;base64,iVBORw0KGgo="
        self.speech = b"\x01\x00\x02\x00\x03\x00\x04\x00"
        self.failing: set[str] = set()
        self.image_gate: asyncio.Event | None = None
        self.stream_gate: asyncio.Event | None = None
        self.calls: list[tuple[str, dict[str, Any]]] = []
        self.closed = False

    def _check(self, capability: str) -> None:
        if capability in self.failing:
            raise LLMError(f"{capability} failed")

    async def complete(
        self,
        prompt: str,
        response_format: type[BaseModel] | None = None,
        max_tokens: int = 2000,
        temperature: float = 0.0,
        system: str | None = None,
        **kwargs,
    ) -> BaseModel | str:
        self.calls.append(("complete", {"prompt": prompt, "system": system}))
        self._check("complete")
        if response_format is not None:
            return self.structured[response_format]
        return self.text

    async def stream(
        self,
        prompt: str,
        system: str | None = None,
        history: list[dict[str, str]] | None = None,
        max_tokens: int = 2000,
        temperature: float = 0.0,
        **kwargs,
    ) -> AsyncIterator[str]:
        self.calls.append(("stream", {"prompt": prompt, "system": system, "history": history}))
        if self.stream_gate is not None:
            await self.stream_gate.wait()
        self._check("stream")
        for chunk in self.chunks:
            yield chunk

    async def grounded_search(self, prompt: str, system: str | None = None) -> GroundedResult:
        self.calls.append(("grounded_search", {"prompt": prompt, "system": system}))
        self._check("grounded_search")
        return self.grounded

    async def generate_image(self, prompt: str) -> str | None:
        self.calls.append(("generate_image", {"prompt": prompt}))
        if self.image_gate is not None:
            await self.image_gate.wait()
        self._check("generate_image")
        return self.image

    async def synthesize_speech(self, text: str, voice: str | None = None) -> bytes:
        self.calls.append(("synthesize_speech", {"text": text, "voice": voice}))
        self._check("synthesize_speech")
        return self.speech

    async def close(self):
        self.closed = True


@pytest.fixture
def test_config() -> Config:
    """Config with approximate token counting, memory storage and no log files."""
    return Config(
        storage=StorageConfig(backend="memory"),
        tokenizer=TokenizerConfig(provider="approximate"),
        logging=LoggingConfig(log_to_file=False),
    )


@pytest.fixture
def fake_llm() -> FakeLLM:
    """Scripted LLM provider."""
    return FakeLLM()


@pytest.fixture
def kv_store() -> InMemoryKeyValueStore:
    """Empty in-memory key-value store."""
    return InMemoryKeyValueStore()


@pytest.fixture
def persistence(kv_store) -> VaultPersistence:
    """Persistence adapter over the in-memory store."""
    return VaultPersistence(kv_store)


@pytest.fixture
def note_store(persistence) -> NoteStore:
    """Empty note store wired to in-memory persistence."""
    return NoteStore(persistence)


@pytest.fixture
def make_note() -> Callable[..., Note]:
    """Factory for notes with sensible defaults."""
    counter = {"n": 0}

    def _make(title: str = "Untitled Insight", **fields: Any) -> Note:
        counter["n"] += 1
        fields.setdefault("id", f"note_{counter['n']:012d}")
        fields.setdefault("updated_at", 1_700_000_000_000 + counter["n"])
        return Note(title=title, **fields)

    return _make
