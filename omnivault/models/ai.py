"""
Schemas for generative-AI responses.

Provider output is validated against these models at the boundary instead of
trusting its shape at use-sites.
"""

from typing import Any

from pydantic import BaseModel, Field, field_validator

from omnivault.models.note import Note, normalize_tags


class ImportDraft(BaseModel):
    """Note payload distilled from pasted or imported text."""

    title: str = Field(default="", description="Concise note title")
    content: str = Field(default="", description="Summary used as the note body")
    tags: list[str] = Field(default_factory=list, description="Relevant tags")

    @field_validator("tags", mode="before")
    @classmethod
    def _normalize_tags(cls, value: Any) -> list[str]:
        return normalize_tags(value)


class GroundedSource(BaseModel):
    """Web reference backing a grounded answer."""

    title: str = "Source"
    uri: str = ""


class GroundedResult(BaseModel):
    """Research report plus the web sources it was grounded on."""

    text: str
    sources: list[GroundedSource] = Field(default_factory=list)


class LookupSelection(BaseModel):
    """Structured response for semantic lookup."""

    summary: str = Field(..., description="Summary of findings across the relevant notes")
    relevant_ids: list[str] = Field(
        default_factory=list, description="IDs of the notes relevant to the query"
    )


class LookupResult(BaseModel):
    """Semantic lookup outcome; notes carry a transient relevance_score."""

    notes: list[Note] = Field(default_factory=list)
    summary: str = ""


class GraphNode(BaseModel):
    """A note with its most related notes, as shown in the knowledge graph."""

    note: Note
    related: list[Note] = Field(default_factory=list)
