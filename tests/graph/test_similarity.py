"""
Tests for heuristic note similarity.

Tests cover:
1. Pair scoring (tags, title words, containment)
2. Related-note ranking, limits and ties
3. Graph construction
"""

import pytest

from omnivault.core.graph import build_graph, related_notes, score_pair
from omnivault.core.graph.similarity import shared_title_words
from omnivault.models import Note


def note(note_id: str, title: str, content: str = "", tags: list[str] | None = None) -> Note:
    return Note(id=note_id, title=title, content=content, tags=tags or [], updated_at=1)


@pytest.mark.unit
class TestScorePair:
    """Test pair scoring."""

    def test_mars_habitat_and_atmosphere(self):
        """Shared tag (2) plus shared title word "mars" (1.5)."""
        habitat = note("h", "Mars Habitat", tags=["space", "mars"])
        atmosphere = note("a", "Mars Atmosphere", tags=["science", "mars"])

        assert score_pair(habitat, atmosphere) == 3.5
        assert score_pair(atmosphere, habitat) == 3.5

    @pytest.mark.parametrize("shared", [0, 1, 2, 3])
    def test_tag_term_is_two_per_shared_tag(self, shared):
        tags = ["t1", "t2", "t3"]
        active = note("a", "Alpha", tags=tags)
        other = note("b", "Beta", tags=tags[:shared] + ["other"])

        assert score_pair(active, other) == 2 * shared

    def test_short_title_words_ignored(self):
        """Words of three characters or fewer never count."""
        active = note("a", "The Ion Age")
        other = note("b", "The Ion Age")

        assert shared_title_words(active, other) == []
        # Containment still applies: the full title appears in neither content
        assert score_pair(active, other) == 0

    def test_four_letter_word_counts(self):
        assert shared_title_words(note("a", "Mars one"), note("b", "mars two")) == ["mars"]

    def test_title_match_is_case_insensitive(self):
        active = note("a", "ORBITAL Mechanics")
        other = note("b", "orbital decay")

        assert score_pair(active, other) == 1.5

    def test_repeated_title_word_counts_per_occurrence(self):
        active = note("a", "Mars mars")
        other = note("b", "Mars")

        assert score_pair(active, other) == 3.0

    def test_containment_is_directional(self):
        active = note("a", "Ion Stalkers")
        mentions_active = note("b", "Elias", content="Elias fought the ion stalkers bravely.")

        assert score_pair(active, mentions_active) == 1.0
        assert score_pair(mentions_active, active) == 0

    def test_custom_weights(self):
        active = note("a", "Mars Habitat", tags=["mars"])
        other = note("b", "Mars Base", tags=["mars"])

        assert score_pair(active, other, tag_weight=10, title_word_weight=0) == 10


@pytest.mark.unit
class TestRelatedNotes:
    """Test related-note ranking."""

    def test_scenario_pair_relates_both_ways(self):
        habitat = note("h", "Mars Habitat", tags=["space", "mars"])
        atmosphere = note("a", "Mars Atmosphere", tags=["science", "mars"])
        notes = [habitat, atmosphere]

        assert related_notes(habitat, notes) == [atmosphere]
        assert related_notes(atmosphere, notes) == [habitat]

    def test_excludes_self_and_zero_scores(self):
        active = note("a", "Alpha", tags=["x"])
        same_id = note("a", "Alpha copy", tags=["x"])
        unrelated = note("u", "Unrelated")

        assert related_notes(active, [active, same_id, unrelated]) == []

    def test_limit_and_order(self):
        active = note("a", "Mars Habitat", tags=["mars", "space", "habitat"])
        notes = [
            active,
            note("low", "Other", tags=["mars"]),  # 2
            note("top", "Habitat", tags=["mars", "space", "habitat"]),  # 6 + 1.5
            note("mid", "Mars Base", tags=["mars", "space"]),  # 4 + 1.5
            note("mid2", "Elsewhere", tags=["space", "habitat"]),  # 4
        ]

        related = related_notes(active, notes)

        assert [n.id for n in related] == ["top", "mid", "mid2"]

    def test_ties_keep_collection_order(self):
        active = note("a", "Alpha", tags=["x"])
        notes = [note(f"n{i}", f"Note {i}", tags=["x"]) for i in range(5)]

        assert [n.id for n in related_notes(active, notes)] == ["n0", "n1", "n2"]

    def test_custom_limit(self):
        active = note("a", "Alpha", tags=["x"])
        notes = [note(f"n{i}", f"Note {i}", tags=["x"]) for i in range(5)]

        assert len(related_notes(active, notes, limit=5)) == 5
        assert related_notes(active, notes, limit=0) == []

    def test_inputs_not_mutated(self):
        active = note("a", "Alpha", tags=["x"])
        notes = [note("b", "Beta", tags=["x"])]
        before = [n.model_dump() for n in notes]

        related_notes(active, notes)

        assert [n.model_dump() for n in notes] == before


@pytest.mark.unit
class TestBuildGraph:
    """Test graph construction."""

    def test_every_note_gets_a_node(self):
        notes = [
            note("h", "Mars Habitat", tags=["space", "mars"]),
            note("a", "Mars Atmosphere", tags=["science", "mars"]),
            note("e", "Elias Thorne", tags=["novel"]),
        ]

        graph = build_graph(notes)

        assert [node.note.id for node in graph] == ["h", "a", "e"]
        assert [n.id for n in graph[0].related] == ["a"]
        assert [n.id for n in graph[1].related] == ["h"]
        assert graph[2].related == []

    def test_empty_collection(self):
        assert build_graph([]) == []
