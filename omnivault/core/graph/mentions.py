"""
Mention and reference helpers.

Notes link to each other by title with [[Title]] markers. Assistant replies
reference notes by id with [id] markers.
"""

import re
from collections.abc import Iterable, Sequence

from omnivault.models.note import Note

MENTION_PATTERN = re.compile(r"\[\[([^\[\]]+?)\]\]")
SUGGESTION_LIMIT = 5


def format_mention(title: str) -> str:
    """Mention marker for a note title."""
    return f"[[{title}]]"


def extract_mentions(content: str) -> list[str]:
    """
    Titles mentioned in note content, in order of first appearance.

    Args:
        content: Note body

    Returns:
        Stripped, de-duplicated titles
    """
    titles: list[str] = []
    seen: set[str] = set()
    for match in MENTION_PATTERN.finditer(content or ""):
        title = match.group(1).strip()
        key = title.lower()
        if title and key not in seen:
            seen.add(key)
            titles.append(title)
    return titles


def resolve_mentions(note: Note, notes: Sequence[Note]) -> list[Note]:
    """
    Notes referenced by [[Title]] markers in a note's content.

    Titles match case-insensitively; the note itself is never returned.
    Unresolvable mentions are skipped.
    """
    by_title: dict[str, Note] = {}
    for candidate in notes:
        by_title.setdefault(candidate.title.lower(), candidate)

    resolved: list[Note] = []
    for title in extract_mentions(note.content):
        target = by_title.get(title.lower())
        if target is not None and target.id != note.id and target not in resolved:
            resolved.append(target)
    return resolved


def detect_linked_note_ids(text: str, notes: Iterable[Note]) -> list[str]:
    """
    IDs of existing notes referenced as [id] in a reply.

    Args:
        text: Assistant reply text
        notes: Current collection

    Returns:
        Matching note ids in collection order
    """
    if not text:
        return []
    return [note.id for note in notes if f"[{note.id}]" in text]


def suggest_tags(
    query: str,
    notes: Iterable[Note],
    active_tags: Iterable[str] = (),
    limit: int = SUGGESTION_LIMIT,
) -> list[str]:
    """
    Existing tags containing the query, for tag autocomplete.

    Tags already applied are excluded. An empty query suggests nothing.
    """
    needle = query.strip().lower()
    if not needle:
        return []

    active = set(active_tags)
    seen: set[str] = set()
    suggestions: list[str] = []
    for note in notes:
        for tag in note.tags:
            if tag in seen:
                continue
            seen.add(tag)
            if needle in tag and tag not in active:
                suggestions.append(tag)
    return suggestions[:limit]


def suggest_mentions(query: str, notes: Iterable[Note], limit: int = SUGGESTION_LIMIT) -> list[Note]:
    """Notes whose title contains the query, for mention autocomplete."""
    needle = query.lower()
    return [note for note in notes if needle in note.title.lower()][:limit]
