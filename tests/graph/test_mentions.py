"""
Tests for mentions, reply references and autocomplete.
"""

import pytest

from omnivault.core.graph import (
    detect_linked_note_ids,
    extract_mentions,
    format_mention,
    resolve_mentions,
    suggest_mentions,
    suggest_tags,
)
from omnivault.models import Note


def note(note_id: str, title: str, content: str = "", tags: list[str] | None = None) -> Note:
    return Note(id=note_id, title=title, content=content, tags=tags or [], updated_at=1)


@pytest.mark.unit
class TestMentions:
    """Test [[Title]] mentions."""

    def test_format_mention(self):
        assert format_mention("The Ion Stalkers") == "[[The Ion Stalkers]]"

    def test_extract_in_order(self):
        content = "Links to [[Mars Habitat]] and [[ Elias Thorne ]]."
        assert extract_mentions(content) == ["Mars Habitat", "Elias Thorne"]

    def test_extract_deduplicates_case_insensitively(self):
        content = "[[Mars]] then [[mars]] then [[MARS]]"
        assert extract_mentions(content) == ["Mars"]

    def test_extract_ignores_malformed(self):
        assert extract_mentions("[[]] [single] [[unclosed") == []
        assert extract_mentions("") == []

    def test_resolve_mentions(self):
        target = note("t", "The Ion Stalkers")
        source = note("s", "Elias", content="Fought [[the ion stalkers]] and [[Missing Note]].")

        assert resolve_mentions(source, [source, target]) == [target]

    def test_resolve_skips_self(self):
        source = note("s", "Loop", content="See [[Loop]].")
        assert resolve_mentions(source, [source]) == []


@pytest.mark.unit
class TestLinkedNoteIds:
    """Test [id] references in assistant replies."""

    def test_existing_id_detected(self):
        notes = [note("note_123", "Alpha"), note("note_456", "Beta")]

        assert detect_linked_note_ids("See [note_123] for details", notes) == ["note_123"]

    def test_unknown_id_ignored(self):
        notes = [note("note_456", "Beta")]

        assert detect_linked_note_ids("See [note_123] for details", notes) == []

    def test_collection_order(self):
        notes = [note("1", "A"), note("2", "B"), note("3", "C")]

        assert detect_linked_note_ids("[3] and [1]", notes) == ["1", "3"]

    def test_bare_id_without_brackets_ignored(self):
        assert detect_linked_note_ids("note 1 is relevant", [note("1", "A")]) == []


@pytest.mark.unit
class TestSuggestions:
    """Test autocomplete helpers."""

    def test_suggest_tags(self):
        notes = [note("1", "A", tags=["mars", "space"]), note("2", "B", tags=["marsupial", "mars"])]

        assert suggest_tags("mar", notes) == ["mars", "marsupial"]

    def test_suggest_tags_excludes_active(self):
        notes = [note("1", "A", tags=["mars", "marsupial"])]

        assert suggest_tags("mar", notes, active_tags=["mars"]) == ["marsupial"]

    def test_suggest_tags_empty_query(self):
        assert suggest_tags("  ", [note("1", "A", tags=["mars"])]) == []

    def test_suggest_tags_limit(self):
        notes = [note("1", "A", tags=[f"tag{i}" for i in range(10)])]

        assert len(suggest_tags("tag", notes)) == 5

    def test_suggest_mentions(self):
        notes = [note("1", "Mars Habitat"), note("2", "Elias"), note("3", "Mars Atmosphere")]

        assert [n.id for n in suggest_mentions("mars", notes)] == ["1", "3"]
