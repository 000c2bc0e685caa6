"""
Note model - the fundamental vault entity.

Notes are titled, tagged, free-form text records. The Python attributes are
snake_case; the durable JSON form keeps the camelCase keys the vault has
always stored (updatedAt, sourceUrl, imageUrl).
"""

from collections.abc import Iterable
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from omnivault.utils.id_generator import now_ms

DEFAULT_TITLE = "Untitled Insight"


def normalize_tags(tags: Iterable[str] | None) -> list[str]:
    """
    Normalize a tag collection.

    Tags are stripped and lower-cased; empty tags and duplicates are dropped.
    First-seen order is kept for display.

    Args:
        tags: Raw tags (any iterable of strings, or None)

    Returns:
        Normalized tag list
    """
    if not tags:
        return []
    if isinstance(tags, str):
        tags = [tags]

    seen: set[str] = set()
    result: list[str] = []
    for tag in tags:
        clean = str(tag).strip().lower()
        if clean and clean not in seen:
            seen.add(clean)
            result.append(clean)
    return result


class Note(BaseModel):
    """
    A titled, tagged, free-form text record owned by the vault.

    Content may reference other notes with [[Title]] mentions. relevance_score
    is a per-query view annotation and is excluded from every dump, so it can
    never reach durable storage.
    """

    model_config = ConfigDict(populate_by_name=True)

    # Core identity
    id: str = Field(..., min_length=1, description="Opaque unique note ID, immutable")

    # Content
    title: str = Field(default=DEFAULT_TITLE, min_length=1, description="Display title")
    content: str = Field(default="", description="Free-form note body")
    tags: list[str] = Field(default_factory=list, description="Normalized lower-case tags")

    # Timestamps
    updated_at: int = Field(
        default_factory=now_ms,
        alias="updatedAt",
        description="Last mutation time in epoch milliseconds",
    )

    # Provenance and enrichment
    source_url: str | None = Field(
        default=None, alias="sourceUrl", description="Imported web resource"
    )
    image_url: str | None = Field(
        default=None, alias="imageUrl", description="Generated illustration (URL or data URI)"
    )

    # View annotation
    relevance_score: float | None = Field(
        default=None,
        ge=0.0,
        le=1.0,
        alias="relevanceScore",
        exclude=True,
        description="Transient search relevance, never persisted",
    )

    @field_validator("title", mode="before")
    @classmethod
    def _default_blank_title(cls, value: Any) -> Any:
        # Stored records may carry an empty title
        if value is None or (isinstance(value, str) and not value.strip()):
            return DEFAULT_TITLE
        return value

    @field_validator("tags", mode="before")
    @classmethod
    def _normalize_tags(cls, value: Any) -> list[str]:
        return normalize_tags(value)

    def to_storage(self) -> dict[str, Any]:
        """
        Serialize to the durable JSON shape.

        Returns:
            camelCase dict without unset optional fields
        """
        return self.model_dump(by_alias=True, exclude_none=True)

    @classmethod
    def from_storage(cls, data: dict[str, Any]) -> "Note":
        """
        Validate one stored record.

        Raises:
            pydantic.ValidationError: If the record has the wrong shape
        """
        return cls.model_validate(data)

    def with_relevance(self, score: float) -> "Note":
        """Copy of this note annotated with a search relevance score."""
        return self.model_copy(update={"relevance_score": score})


class NoteDraft(BaseModel):
    """
    Partial note input for create/update.

    A field left as None is absent and falls back to the existing note's
    value (or the creation default).
    """

    model_config = ConfigDict(populate_by_name=True)

    title: str | None = None
    content: str | None = None
    tags: list[str] | None = None
    source_url: str | None = Field(default=None, alias="sourceUrl")
    image_url: str | None = Field(default=None, alias="imageUrl")

    @field_validator("tags", mode="before")
    @classmethod
    def _normalize_tags(cls, value: Any) -> list[str] | None:
        if value is None:
            return None
        return normalize_tags(value)

    @property
    def clean_title(self) -> str | None:
        """Title with whitespace stripped, or None when blank."""
        if self.title is None or not self.title.strip():
            return None
        return self.title.strip()

    @classmethod
    def from_note(cls, note: Note) -> "NoteDraft":
        """Draft carrying every editable field of an existing note."""
        return cls(
            title=note.title,
            content=note.content,
            tags=list(note.tags),
            source_url=note.source_url,
            image_url=note.image_url,
        )
