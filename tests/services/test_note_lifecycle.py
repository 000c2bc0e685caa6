"""
Tests for the note lifecycle manager.

Tests cover:
1. Creation defaults and id minting
2. Update semantics (id, image and timestamp preservation)
3. Background enrichment, including deletion races
4. Imports from web content and research
"""

import asyncio
import json
from unittest.mock import patch

import pytest

from omnivault.config import VaultConfig
from omnivault.models import GroundedResult, GroundedSource, ImportDraft, NoteDraft
from omnivault.services import NoteLifecycleManager
from omnivault.services.note_lifecycle import RESEARCH_SOURCE_TAGS, RESEARCH_TAGS
from omnivault.utils.exceptions import ValidationError
from omnivault.utils.id_generator import now_ms

LONG_CONTENT = "this is a sufficiently long piece of content"


@pytest.mark.unit
@pytest.mark.asyncio
class TestCreate:
    """Test note creation."""

    async def test_short_note_not_enriched(self, lifecycle, note_store, fake_llm):
        """A fresh short note gets defaults and no enrichment."""
        note = lifecycle.create_or_update({"title": "Alpha", "content": "short"})

        assert note.id.startswith("note_")
        assert note.title == "Alpha"
        assert note.content == "short"
        assert note.tags == []
        assert note.image_url is None
        assert lifecycle.pending_enrichments == 0
        assert note_store.all() == [note]

        await lifecycle.wait_for_enrichment()
        assert note_store.get(note.id).image_url is None
        assert all(name != "generate_image" for name, _ in fake_llm.calls)

    async def test_content_of_exactly_twenty_chars_not_enriched(self, lifecycle):
        lifecycle.create_or_update({"title": "Edge", "content": "x" * 20})
        assert lifecycle.pending_enrichments == 0

    async def test_defaults(self, lifecycle):
        note = lifecycle.create_or_update(NoteDraft())

        assert note.title == "Untitled Insight"
        assert note.content == ""
        assert note.tags == []

    async def test_blank_title_gets_placeholder(self, lifecycle):
        assert lifecycle.create_or_update({"title": "   "}).title == "Untitled Insight"

    async def test_timestamp_is_now(self, lifecycle):
        before = now_ms()
        note = lifecycle.create_or_update({"title": "Now"})
        assert before <= note.updated_at <= now_ms()

    async def test_new_note_goes_to_front(self, lifecycle, note_store):
        first = lifecycle.create_or_update({"title": "First"})
        second = lifecycle.create_or_update({"title": "Second"})

        assert [n.id for n in note_store.all()] == [second.id, first.id]

    async def test_id_regenerated_on_collision(self, lifecycle, note_store, make_note):
        note_store.upsert(make_note("Existing", id="note_taken00000"))

        with patch(
            "omnivault.services.note_lifecycle.generate_note_id",
            side_effect=["note_taken00000", "note_fresh00000"],
        ):
            note = lifecycle.create_or_update({"title": "New"})

        assert note.id == "note_fresh00000"
        assert len(note_store) == 2


@pytest.mark.unit
@pytest.mark.asyncio
class TestUpdate:
    """Test editing an existing note."""

    async def test_keeps_id_and_moves_to_front(self, lifecycle, note_store):
        original = lifecycle.create_or_update({"title": "Original", "content": "a"})
        other = lifecycle.create_or_update({"title": "Other"})

        updated = lifecycle.create_or_update({"title": "Renamed"}, existing=original)

        assert updated.id == original.id
        assert updated.title == "Renamed"
        assert [n.id for n in note_store.all()] == [original.id, other.id]
        assert len(note_store) == 2

    async def test_absent_fields_fall_back(self, lifecycle, make_note, note_store):
        existing = make_note("Keep", content="Body", tags=["x"], source_url="https://src")
        note_store.upsert(existing)

        updated = lifecycle.create_or_update({"title": "", "tags": ["y"]}, existing=existing)

        assert updated.title == "Keep"
        assert updated.content == "Body"
        assert updated.tags == ["y"]
        assert updated.source_url == "https://src"

    async def test_empty_content_is_applied(self, lifecycle, make_note, note_store):
        existing = make_note("Keep", content="Body")
        note_store.upsert(existing)

        assert lifecycle.create_or_update({"content": ""}, existing=existing).content == ""

    async def test_image_preserved(self, lifecycle, make_note, note_store):
        existing = make_note("Illustrated", content="short", image_url="data:image/png;base64,AA")
        note_store.upsert(existing)

        updated = lifecycle.create_or_update({"content": LONG_CONTENT}, existing=existing)

        assert updated.image_url == existing.image_url
        # Already illustrated, so no new enrichment
        assert lifecycle.pending_enrichments == 0

    async def test_explicit_image_replaces(self, lifecycle, make_note, note_store):
        existing = make_note("Illustrated", image_url="old")
        note_store.upsert(existing)

        assert lifecycle.create_or_update({"image_url": "new"}, existing=existing).image_url == "new"

    async def test_timestamp_never_goes_backwards(self, lifecycle, make_note, note_store):
        future = now_ms() + 10_000_000
        existing = make_note("Future", updated_at=future)
        note_store.upsert(existing)

        updated = lifecycle.create_or_update({"content": "edit"}, existing=existing)

        assert updated.updated_at == future

    async def test_resave_is_idempotent(self, lifecycle, note_store):
        note = lifecycle.create_or_update({"title": "Same", "content": "x", "tags": ["a"]})

        again = lifecycle.create_or_update(NoteDraft.from_note(note), existing=note)

        assert len(note_store) == 1
        assert again.model_dump(exclude={"updated_at"}) == note.model_dump(exclude={"updated_at"})
        assert again.updated_at >= note.updated_at


@pytest.mark.unit
@pytest.mark.asyncio
class TestDelete:
    """Test deletion."""

    async def test_delete(self, lifecycle, note_store):
        note = lifecycle.create_or_update({"title": "Doomed"})

        assert lifecycle.delete(note.id) is True
        assert note_store.get(note.id) is None

    async def test_delete_unknown_is_noop(self, lifecycle, note_store):
        lifecycle.create_or_update({"title": "Survivor"})

        assert lifecycle.delete("ghost") is False
        assert len(note_store) == 1


@pytest.mark.unit
@pytest.mark.asyncio
class TestEnrichment:
    """Test background illustration."""

    async def test_long_note_enriched_after_save(self, lifecycle, note_store, fake_llm):
        """The note is saved first without an image, then enriched in place."""
        fake_llm.image_gate = asyncio.Event()

        note = lifecycle.create_or_update({"title": "Beta", "content": LONG_CONTENT})

        assert note.image_url is None
        assert note_store.get(note.id).image_url is None
        assert lifecycle.pending_enrichments == 1

        fake_llm.image_gate.set()
        await lifecycle.wait_for_enrichment()

        enriched = note_store.get(note.id)
        assert enriched.image_url == fake_llm.image
        assert enriched.title == "Beta"
        assert lifecycle.pending_enrichments == 0

    async def test_enrichment_keeps_position(self, lifecycle, note_store, fake_llm):
        fake_llm.image_gate = asyncio.Event()
        illustrated = lifecycle.create_or_update({"title": "Beta", "content": LONG_CONTENT})
        newer = lifecycle.create_or_update({"title": "Newer"})

        fake_llm.image_gate.set()
        await lifecycle.wait_for_enrichment()

        assert [n.id for n in note_store.all()] == [newer.id, illustrated.id]

    async def test_enrichment_refreshes_timestamp(self, lifecycle, note_store, fake_llm):
        fake_llm.image_gate = asyncio.Event()
        with patch("omnivault.services.note_lifecycle.now_ms", return_value=1_000):
            note = lifecycle.create_or_update({"title": "Beta", "content": LONG_CONTENT})

        with patch("omnivault.services.note_lifecycle.now_ms", return_value=5_000):
            fake_llm.image_gate.set()
            await lifecycle.wait_for_enrichment()

        assert note.updated_at == 1_000
        assert note_store.get(note.id).updated_at == 5_000

    async def test_delete_before_enrichment_resolves(self, lifecycle, note_store, fake_llm, kv_store):
        """A late result for a deleted note neither recreates nor mutates anything."""
        fake_llm.image_gate = asyncio.Event()
        survivor = lifecycle.create_or_update({"title": "Survivor"})
        note = lifecycle.create_or_update({"title": "Beta", "content": LONG_CONTENT})

        lifecycle.delete(note.id)
        fake_llm.image_gate.set()
        await lifecycle.wait_for_enrichment()
        await note_store.flush()

        assert note_store.get(note.id) is None
        assert note_store.all() == [survivor]
        stored = json.loads(await kv_store.get("omnivault_notes"))
        assert [record["id"] for record in stored] == [survivor.id]

    async def test_explicit_image_while_generating_wins(self, lifecycle, note_store, fake_llm):
        fake_llm.image_gate = asyncio.Event()
        note = lifecycle.create_or_update({"title": "Beta", "content": LONG_CONTENT})

        lifecycle.create_or_update({"image_url": "manual"}, existing=note)
        fake_llm.image_gate.set()
        await lifecycle.wait_for_enrichment()

        assert note_store.get(note.id).image_url == "manual"

    async def test_generation_failure_leaves_note(self, lifecycle, note_store, fake_llm):
        fake_llm.failing.add("generate_image")

        note = lifecycle.create_or_update({"title": "Beta", "content": LONG_CONTENT})
        await lifecycle.wait_for_enrichment()

        assert note_store.get(note.id).image_url is None

    async def test_disabled_by_config(self, note_store, assistant):
        manager = NoteLifecycleManager(note_store, assistant, VaultConfig(enable_enrichment=False))

        manager.create_or_update({"title": "Beta", "content": LONG_CONTENT})

        assert manager.pending_enrichments == 0

    async def test_no_assistant(self, note_store):
        manager = NoteLifecycleManager(note_store)

        note = manager.create_or_update({"title": "Beta", "content": LONG_CONTENT})

        assert manager.pending_enrichments == 0
        assert note.image_url is None


@pytest.mark.unit
def test_save_outside_event_loop_skips_enrichment(note_store, assistant):
    manager = NoteLifecycleManager(note_store, assistant)

    note = manager.create_or_update({"title": "Beta", "content": LONG_CONTENT})

    assert manager.pending_enrichments == 0
    assert note_store.get(note.id) == note


@pytest.mark.unit
@pytest.mark.asyncio
class TestImports:
    """Test web and research imports."""

    async def test_import_link(self, lifecycle, fake_llm):
        fake_llm.structured[ImportDraft] = ImportDraft(
            title="Cyanobacteria", content="short summary", tags=["science"]
        )

        note = await lifecycle.import_content("  https://example.com/algae  ")

        assert note.title == "Cyanobacteria"
        assert note.tags == ["science"]
        assert note.source_url == "https://example.com/algae"

    async def test_import_plain_text_has_no_source(self, lifecycle, fake_llm):
        fake_llm.structured[ImportDraft] = ImportDraft(title="Notes", content="c")

        note = await lifecycle.import_content("Some pasted meeting notes")

        assert note.source_url is None

    async def test_import_empty_title_gets_placeholder(self, lifecycle, fake_llm):
        fake_llm.structured[ImportDraft] = ImportDraft(title="", content="c")

        note = await lifecycle.import_content("text")

        assert note.title == "Untitled Insight"

    async def test_import_requires_assistant(self, note_store):
        with pytest.raises(ValidationError):
            await NoteLifecycleManager(note_store).import_content("text")

    async def test_import_research(self, lifecycle):
        result = GroundedResult(text="Report body")

        note = lifecycle.import_research("mars habitats", result)

        assert note.title == "Research: mars habitats"
        assert note.content == "Report body"
        assert note.tags == RESEARCH_TAGS

    async def test_import_research_source(self, lifecycle):
        source = GroundedSource(title="NASA Mars", uri="https://nasa.gov/mars")

        note = lifecycle.import_research_source("mars habitats", source)

        assert note.title == "NASA Mars"
        assert note.content == (
            "Source: https://nasa.gov/mars\n\n"
            "Abstracted from Research Lab session regarding: mars habitats"
        )
        assert note.source_url == "https://nasa.gov/mars"
        assert note.tags == RESEARCH_SOURCE_TAGS
