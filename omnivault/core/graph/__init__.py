"""
Knowledge graph heuristics.

- similarity: related notes by tags, title keywords and containment
- mentions: [[Title]] mentions, [id] reply references, autocomplete
"""

from omnivault.core.graph.mentions import (
    detect_linked_note_ids,
    extract_mentions,
    format_mention,
    resolve_mentions,
    suggest_mentions,
    suggest_tags,
)
from omnivault.core.graph.similarity import (
    CONTAINMENT_WEIGHT,
    MIN_TITLE_WORD_LENGTH,
    RELATED_LIMIT,
    TAG_WEIGHT,
    TITLE_WORD_WEIGHT,
    build_graph,
    related_notes,
    score_pair,
)

__all__ = [
    # Similarity
    "score_pair",
    "related_notes",
    "build_graph",
    "TAG_WEIGHT",
    "TITLE_WORD_WEIGHT",
    "CONTAINMENT_WEIGHT",
    "MIN_TITLE_WORD_LENGTH",
    "RELATED_LIMIT",
    # Mentions
    "extract_mentions",
    "resolve_mentions",
    "format_mention",
    "detect_linked_note_ids",
    "suggest_tags",
    "suggest_mentions",
]
