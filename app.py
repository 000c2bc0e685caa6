"""
OmniVault FastAPI Application

A REST API server for the OmniVault knowledge vault.
Routes mirror the vault screens: notes, graph, copilot, smart lookup,
research lab, web import and studio.
"""

from contextlib import asynccontextmanager
from typing import Any

from fastapi import FastAPI, HTTPException, Query
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import Response, StreamingResponse
from pydantic import BaseModel, Field

from omnivault.config import Config
from omnivault.core.factory import KeyValueStoreFactory, LLMFactory
from omnivault.models.ai import GroundedResult, GroundedSource
from omnivault.models.chat import ChatMessage
from omnivault.models.note import Note, NoteDraft
from omnivault.services.vault import Vault
from omnivault.utils.exceptions import (
    ConfigurationError,
    LLMError,
    NotFoundError,
    OmniVaultError,
    ValidationError,
)
from omnivault.utils.logger import get_logger, setup_logging

# Global vault instance
vault: Vault | None = None
logger = get_logger(__name__)


# Pydantic models for API
class NoteRequest(BaseModel):
    """Request model for creating or editing a note (absent fields keep their value)."""

    title: str | None = Field(default=None, description="Note title")
    content: str | None = Field(default=None, description="Note body, may contain [[Title]] mentions")
    tags: list[str] | None = Field(default=None, description="Tags")
    source_url: str | None = None
    image_url: str | None = None

    def to_draft(self) -> NoteDraft:
        return NoteDraft(
            title=self.title,
            content=self.content,
            tags=self.tags,
            source_url=self.source_url,
            image_url=self.image_url,
        )


class NoteResponse(BaseModel):
    """Note as returned by the API."""

    id: str
    title: str
    content: str
    tags: list[str]
    updated_at: int
    source_url: str | None = None
    image_url: str | None = None
    relevance_score: float | None = None

    @classmethod
    def from_note(cls, note: Note) -> "NoteResponse":
        return cls(
            id=note.id,
            title=note.title,
            content=note.content,
            tags=note.tags,
            updated_at=note.updated_at,
            source_url=note.source_url,
            image_url=note.image_url,
            relevance_score=note.relevance_score,
        )


class GraphNodeResponse(BaseModel):
    """Graph node: a note and the ids of its most related notes."""

    note: NoteResponse
    related_ids: list[str]


class QueryRequest(BaseModel):
    """Request model for lookup and research."""

    query: str = Field(..., description="Search or research query")


class LookupResponse(BaseModel):
    """Smart lookup result."""

    summary: str
    notes: list[NoteResponse]


class ImportRequest(BaseModel):
    """Request model for web import."""

    content: str = Field(..., description="Pasted text or a link")


class ResearchImportRequest(BaseModel):
    """Request model for saving research into the vault."""

    query: str
    text: str | None = Field(default=None, description="Report text (defaults to last research)")
    source: GroundedSource | None = Field(default=None, description="Save one source instead")


class ChatRequest(BaseModel):
    """Request model for a copilot message."""

    message: str
    stream: bool = Field(default=False, description="Stream reply chunks as plain text")


class ViewRequest(BaseModel):
    """Request model for switching screens."""

    view: str


class DraftRequest(BaseModel):
    """Request model for in-progress input text."""

    text: str = ""


class HealthResponse(BaseModel):
    """Health check response."""

    status: str
    vault_initialized: bool
    storage_backend: str
    ai_provider: str | None
    notes: int


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Lifespan context manager for startup/shutdown."""
    global vault

    # Load configuration from environment or use defaults
    config = Config.from_env()

    # Initialize logging with config
    setup_logging(
        level=config.logging.level,
        log_to_file=config.logging.log_to_file,
        log_dir=config.logging.log_dir,
        file_rotation=config.logging.file_rotation,
        file_retention=config.logging.file_retention,
        compression=config.logging.compression,
        serialize=config.logging.serialize,
    )

    logger.info("Starting OmniVault server")
    logger.info(
        f"Configuration: LLM={config.llm.provider}/{config.llm.model}, "
        f"Storage={config.storage.backend}"
    )

    # Create components using factories
    logger.info("Creating key-value store")
    kv_store = KeyValueStoreFactory.create(config.storage)

    logger.info("Creating LLM provider")
    try:
        llm = LLMFactory.create(config.llm)
    except ValueError as e:
        logger.warning(f"AI features disabled: {e}")
        llm = None

    vault = Vault(config=config, kv_store=kv_store, llm=llm)

    await vault.initialize()
    logger.info("OmniVault initialized")

    yield

    # Cleanup
    logger.info("Shutting down OmniVault server")
    await vault.close()
    vault = None
    logger.info("Cleanup complete")


# Create FastAPI app
app = FastAPI(
    title="OmniVault API",
    description="Personal knowledge vault with related-note discovery and an AI copilot",
    version="1.0.0",
    lifespan=lifespan,
)

# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


def _require_vault() -> Vault:
    if not vault:
        raise HTTPException(status_code=503, detail="Vault not initialized")
    return vault


def _http_error(e: OmniVaultError) -> HTTPException:
    """Map a vault error to an HTTP error."""
    if isinstance(e, NotFoundError):
        return HTTPException(status_code=404, detail=e.message)
    if isinstance(e, ValidationError):
        return HTTPException(status_code=400, detail=e.message)
    if isinstance(e, ConfigurationError):
        return HTTPException(status_code=503, detail=e.message)
    if isinstance(e, LLMError):
        logger.error(f"AI request failed: {e}")
        return HTTPException(status_code=502, detail=f"AI request failed: {e.message}")
    logger.error(f"Vault error: {e}")
    return HTTPException(status_code=500, detail=e.message)


def _notes(notes: list[Note]) -> list[NoteResponse]:
    return [NoteResponse.from_note(note) for note in notes]


# Health check endpoint
@app.get("/health", response_model=HealthResponse)
async def health_check():
    """Health check endpoint."""
    return HealthResponse(
        status="healthy" if vault else "initializing",
        vault_initialized=vault is not None,
        storage_backend=vault.config.storage.backend if vault else "unknown",
        ai_provider=vault.config.llm.provider if vault and vault.assistant else None,
        notes=len(vault.store) if vault else 0,
    )


# Note endpoints
@app.get("/notes", response_model=list[NoteResponse])
async def list_notes(
    tag: str | None = Query(default=None, description="Only notes carrying this tag"),
    limit: int | None = Query(default=None, ge=1, description="Most recent N notes"),
):
    """List notes, most recent activity first."""
    v = _require_vault()
    notes = v.store.all()
    if tag:
        tag = tag.strip().lower()
        notes = [note for note in notes if tag in note.tags]
    if limit:
        notes = notes[:limit]
    return _notes(notes)


@app.post("/notes", response_model=NoteResponse)
async def create_note(request: NoteRequest):
    """
    Create a note.

    Missing fields are defaulted (placeholder title, empty content, no tags).
    Notes with substantial content and no image get an illustration generated
    in the background when an AI provider is configured.
    """
    v = _require_vault()
    note = v.lifecycle.create_or_update(request.to_draft())
    return NoteResponse.from_note(note)


@app.get("/notes/{note_id}", response_model=NoteResponse)
async def get_note(note_id: str):
    """Retrieve a specific note by ID."""
    v = _require_vault()
    try:
        return NoteResponse.from_note(v.get_note(note_id))
    except OmniVaultError as e:
        raise _http_error(e) from e


@app.put("/notes/{note_id}", response_model=NoteResponse)
async def update_note(note_id: str, request: NoteRequest):
    """
    Edit a note.

    The id is kept and the note moves to the front of the collection. A
    generated illustration survives unless image_url is supplied.
    """
    v = _require_vault()
    try:
        existing = v.get_note(note_id)
    except OmniVaultError as e:
        raise _http_error(e) from e

    note = v.lifecycle.create_or_update(request.to_draft(), existing=existing)
    return NoteResponse.from_note(note)


@app.delete("/notes/{note_id}")
async def delete_note(note_id: str):
    """Delete a note. Deleting an unknown id is a no-op."""
    v = _require_vault()
    deleted = v.lifecycle.delete(note_id)
    return {"id": note_id, "deleted": deleted}


@app.get("/notes/{note_id}/related", response_model=list[NoteResponse])
async def related_notes(note_id: str):
    """Most related notes by shared tags, title words and title containment."""
    v = _require_vault()
    try:
        return _notes(v.related(note_id))
    except OmniVaultError as e:
        raise _http_error(e) from e


@app.get("/notes/{note_id}/mentions", response_model=list[NoteResponse])
async def note_mentions(note_id: str):
    """Notes referenced by [[Title]] mentions in this note."""
    v = _require_vault()
    try:
        return _notes(v.mentions(note_id))
    except OmniVaultError as e:
        raise _http_error(e) from e


@app.get("/graph", response_model=list[GraphNodeResponse])
async def knowledge_graph():
    """Knowledge graph: every note with the ids of its related notes."""
    v = _require_vault()
    return [
        GraphNodeResponse(
            note=NoteResponse.from_note(node.note),
            related_ids=[note.id for note in node.related],
        )
        for node in v.graph()
    ]


@app.get("/tags/suggest", response_model=list[str])
async def suggest_tags(
    q: str = Query(default="", description="Partial tag"),
    active: list[str] = Query(default=[], description="Tags already on the note"),
):
    """Existing tags matching a partial input."""
    v = _require_vault()
    return v.suggest_tags(q, active)


@app.get("/mentions/suggest", response_model=list[NoteResponse])
async def suggest_mentions(q: str = Query(default="", description="Partial title")):
    """Notes whose titles match a partial [[mention]]."""
    v = _require_vault()
    return _notes(v.suggest_mentions(q))


# AI endpoints
@app.post("/lookup", response_model=LookupResponse)
async def smart_lookup(request: QueryRequest):
    """Semantic lookup: relevant notes plus a summary of findings."""
    v = _require_vault()
    try:
        result = await v.lookup(request.query)
    except OmniVaultError as e:
        raise _http_error(e) from e
    return LookupResponse(summary=result.summary, notes=_notes(result.notes))


@app.post("/import", response_model=NoteResponse)
async def web_import(request: ImportRequest):
    """Distill pasted text or a link into a new note."""
    v = _require_vault()
    try:
        note = await v.import_content(request.content)
    except OmniVaultError as e:
        raise _http_error(e) from e
    return NoteResponse.from_note(note)


@app.post("/research", response_model=GroundedResult)
async def research(request: QueryRequest):
    """Web-grounded research report related to the vault."""
    v = _require_vault()
    try:
        return await v.research(request.query)
    except OmniVaultError as e:
        raise _http_error(e) from e


@app.get("/research", response_model=GroundedResult | None)
async def last_research():
    """Most recent research result, if any."""
    v = _require_vault()
    return await v.last_research()


@app.post("/research/import", response_model=NoteResponse)
async def import_research(request: ResearchImportRequest):
    """
    Save research into the vault.

    With a source, that single source becomes a note; otherwise the report
    text (or the last research result) does.
    """
    v = _require_vault()
    if request.source is not None:
        note = v.lifecycle.import_research_source(request.query, request.source)
        return NoteResponse.from_note(note)

    if request.text:
        result = GroundedResult(text=request.text)
    else:
        result = await v.last_research()
        if result is None:
            raise HTTPException(status_code=400, detail="No research result to import")

    note = v.lifecycle.import_research(request.query, result)
    return NoteResponse.from_note(note)


# Copilot endpoints
@app.get("/chat", response_model=list[ChatMessage])
async def chat_history():
    """Copilot conversation so far."""
    v = _require_vault()
    return v.copilot.history if v.copilot else []


@app.post("/chat")
async def chat(request: ChatRequest):
    """
    Send a message to the copilot.

    Replies cite notes as [id]; cited ids are returned as linked_note_ids.
    Provider failures produce a disruption notice rather than an error.
    """
    v = _require_vault()
    if not v.copilot:
        raise HTTPException(status_code=503, detail="This operation requires a configured AI provider")
    if not request.message.strip():
        raise HTTPException(status_code=400, detail="Message cannot be empty")

    if request.stream:
        return StreamingResponse(v.copilot.stream(request.message), media_type="text/plain")

    reply: ChatMessage = await v.copilot.send(request.message)
    return reply.model_dump(mode="json")


@app.delete("/chat")
async def clear_chat():
    """Purge the copilot conversation."""
    v = _require_vault()
    if v.copilot:
        await v.copilot.clear()
    return {"cleared": True}


# Session state endpoints
@app.get("/view")
async def get_view():
    """Current screen."""
    v = _require_vault()
    return {"view": v.view.value}


@app.put("/view")
async def set_view(request: ViewRequest):
    """Switch screens. Unknown names keep the current screen."""
    v = _require_vault()
    try:
        view = await v.set_view(request.view)
    except OmniVaultError as e:
        raise _http_error(e) from e
    return {"view": view.value}


@app.get("/drafts/{name}")
async def get_draft(name: str):
    """In-progress text for a named input."""
    v = _require_vault()
    return {"name": name, "text": await v.persistence.load_draft(name)}


@app.put("/drafts/{name}")
async def save_draft(name: str, request: DraftRequest):
    """Persist in-progress text for a named input."""
    v = _require_vault()
    try:
        await v.persistence.save_draft(name, request.text)
    except OmniVaultError as e:
        raise _http_error(e) from e
    return {"name": name, "text": request.text}


# Studio endpoint
@app.post("/studio/briefing")
async def audio_briefing():
    """Narrated audio briefing over the most recent notes, as WAV."""
    v = _require_vault()
    try:
        audio = await v.briefing()
    except OmniVaultError as e:
        raise _http_error(e) from e
    return Response(content=audio, media_type="audio/wav")


# Statistics endpoint
@app.get("/stats")
async def get_stats() -> dict[str, Any]:
    """Vault statistics."""
    v = _require_vault()
    return await v.statistics()


# Root endpoint
@app.get("/")
async def root():
    """Root endpoint with API information."""
    return {
        "name": "OmniVault API",
        "version": "1.0.0",
        "description": "Personal knowledge vault with related-note discovery and an AI copilot",
        "docs": "/docs",
        "health": "/health",
    }


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("app:app", host="0.0.0.0", port=8000, reload=True, log_level="info")
