"""Domain entities for support_copilot."""
from __future__ import annotations

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, Field


class Chunk(BaseModel):
    """A bounded span of a document's text, the unit of embedding and retrieval."""
    id: str
    document_id: str
    ordinal: int = Field(ge=0)
    text: str
    embedding: list[float] = Field(default_factory=list)
    start_page: int = 0
    end_page: int = 0

    model_config = {"frozen": True}

    @property
    def has_embedding(self) -> bool:
        return len(self.embedding) > 0


class Document(BaseModel):
    """An ingested source file together with its chunks."""
    id: str
    title: str
    source_path: str
    file_type: str
    content: str
    summary: str = ""
    tags: list[str] = Field(default_factory=list)
    chunks: list[Chunk] = Field(default_factory=list)
    indexed_at: datetime = Field(default_factory=datetime.now)

    model_config = {"frozen": True}


class Relevance(str, Enum):
    """Coarse relevance bucket derived from a similarity score."""
    HIGH = "High"
    MEDIUM = "Medium"
    LOW = "Low"

    @classmethod
    def for_score(cls, score: float) -> Relevance:
        if score >= 0.8:
            return cls.HIGH
        if score >= 0.6:
            return cls.MEDIUM
        return cls.LOW


class SearchResult(BaseModel):
    """Represents a search result."""
    document: Document
    chunk: Chunk
    score: float = Field(ge=0.0, le=1.0)
    relevance: Relevance


class SuggestedSolution(BaseModel):
    """A candidate solution for a ticket."""
    title: str
    description: str
    steps: list[str] = Field(default_factory=list)
    references: list[str] = Field(default_factory=list)
    confidence: float = Field(ge=0.0, le=1.0)


class Ticket(BaseModel):
    """Ticket context as handed over by the ticket repository."""
    id: str
    title: str
    description: str
    category: str = "Other"
    priority: str = "medium"

    model_config = {"coerce_numbers_to_str": True}


class TicketSolutionBundle(BaseModel):
    """Solutions for one ticket with the search results that grounded them."""
    ticket_id: str
    solutions: list[SuggestedSolution]
    document_sources: list[SearchResult] = Field(default_factory=list)
    confidence: float = Field(ge=0.0, le=1.0)
    generated_at: datetime = Field(default_factory=datetime.now)


class IngestReport(BaseModel):
    """Outcome of an ingestion batch. Partial success is normal."""
    documents: list[Document] = Field(default_factory=list)
    warnings: list[str] = Field(default_factory=list)
    skipped: list[str] = Field(default_factory=list)

    @property
    def count(self) -> int:
        return len(self.documents)


class IndexStats(BaseModel):
    """Index statistics."""
    indexed_documents: int
    indexed_chunks: int
    status: str = "active"
