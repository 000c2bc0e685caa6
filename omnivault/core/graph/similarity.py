"""
Heuristic note similarity for the knowledge graph.

Links notes by shared tags, shared title keywords and title containment.
Everything here is pure: no I/O, no mutation of the inputs.
"""

from collections.abc import Sequence

from omnivault.models.ai import GraphNode
from omnivault.models.note import Note

TAG_WEIGHT = 2.0
TITLE_WORD_WEIGHT = 1.5
CONTAINMENT_WEIGHT = 1.0
# Title words must be strictly longer than this to count
MIN_TITLE_WORD_LENGTH = 3
RELATED_LIMIT = 3


def shared_tags(active: Note, other: Note) -> list[str]:
    """Tags of the other note that the active note also carries."""
    active_tags = set(active.tags)
    return [tag for tag in other.tags if tag in active_tags]


def shared_title_words(
    active: Note, other: Note, min_length: int = MIN_TITLE_WORD_LENGTH
) -> list[str]:
    """
    Words of the active title that also appear in the other title.

    Both titles are lower-cased and split on whitespace. Words of length
    min_length or less never count; a word repeated in the active title
    counts once per occurrence.
    """
    other_words = set(other.title.lower().split())
    return [
        word
        for word in active.title.lower().split()
        if len(word) > min_length and word in other_words
    ]


def score_pair(
    active: Note,
    other: Note,
    tag_weight: float = TAG_WEIGHT,
    title_word_weight: float = TITLE_WORD_WEIGHT,
    containment_weight: float = CONTAINMENT_WEIGHT,
    min_title_word_length: int = MIN_TITLE_WORD_LENGTH,
) -> float:
    """
    Similarity of another note to the active note.

    score = tag_weight * shared tags
          + title_word_weight * shared long title words
          + containment_weight if other.content contains active.title

    The score is directional: containment checks the other note's content
    for the active note's title.
    """
    score = tag_weight * len(shared_tags(active, other))
    score += title_word_weight * len(shared_title_words(active, other, min_title_word_length))
    if active.title.lower() in other.content.lower():
        score += containment_weight
    return score


def related_notes(
    active: Note,
    notes: Sequence[Note],
    limit: int = RELATED_LIMIT,
    **weights: float,
) -> list[Note]:
    """
    Most related notes for the active note.

    Args:
        active: Note to find relations for (excluded from the result by id)
        notes: Current collection, in display order
        limit: Maximum number of notes returned
        **weights: Optional overrides forwarded to score_pair

    Returns:
        Up to `limit` notes with a positive score, highest score first; equal
        scores keep collection order
    """
    scored = [
        (score_pair(active, note, **weights), note) for note in notes if note.id != active.id
    ]
    scored = [(score, note) for score, note in scored if score > 0]
    # sorted() is stable, so ties keep first-seen order
    scored = sorted(scored, key=lambda item: item[0], reverse=True)
    return [note for _, note in scored[:limit]]


def build_graph(
    notes: Sequence[Note],
    limit: int = RELATED_LIMIT,
    **weights: float,
) -> list[GraphNode]:
    """Every note paired with its related notes, in collection order."""
    return [
        GraphNode(note=note, related=related_notes(note, notes, limit=limit, **weights))
        for note in notes
    ]
